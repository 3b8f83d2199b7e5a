from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple, Union


@dataclass(frozen=True)
class Dependency:
    """
    Gating condition: ``child`` is active only when ``parent`` equals ``value``.

    Examples:
        Dependency("mtry", "branch", "rf")
        Dependency("cost_trafo", "branch", "svm")
    """

    child: str
    parent: str
    value: Any

    def holds(self, assignment: Mapping[str, Any]) -> bool:
        """Whether the condition is met; an absent parent never satisfies it."""
        return self.parent in assignment and assignment[self.parent] == self.value

    def __repr__(self) -> str:
        return f"Dependency({self.child!r} <- {self.parent!r} == {self.value!r})"


DependencyLike = Union[Dependency, Tuple[str, str, Any], Sequence[Any]]


def to_dependency(value: DependencyLike) -> Dependency:
    """Accept either a Dependency or a ``(child, parent, value)`` triple."""
    if isinstance(value, Dependency):
        return value
    if isinstance(value, (tuple, list)) and len(value) == 3:
        child, parent, required = value
        return Dependency(child, parent, required)
    raise TypeError(
        f"Cannot convert {value!r} to Dependency; expected (child, parent, value)"
    )
