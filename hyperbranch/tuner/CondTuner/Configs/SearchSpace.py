"""
Conditional search space: parameter domains, dependency DAG and transform.

A parameter is *active* for a given assignment when every dependency that
names it as child holds against that assignment. Dependencies are resolved
parents-first, so a parameter whose parent was itself deactivated is also
removed (its parent is absent and therefore cannot equal the required value).
"""

import warnings
from collections import deque
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Union,
)

import pandas as pd

from ..errors import (
    CyclicDependencyError,
    DuplicateNameError,
    TransformError,
    UnknownParameterError,
)
from .Dependency import Dependency, DependencyLike, to_dependency
from .ParamSpec import Categorical, Float, Int, ParamSpec, contains, normalize_spec

Assignment = Dict[str, Any]
Transform = Callable[[Assignment], Mapping[str, Any]]


class ConditionalSpace:
    """
    Ordered collection of parameter specs plus dependency conditions and an
    optional transform applied to sampled assignments before evaluation.

    Example:
        >>> space = ConditionalSpace()
        >>> space.add_parameter("branch", Categorical(["svm", "rf"]))
        >>> space.add_parameter("mtry", Int(1, 20))
        >>> space.add_parameter("cost_trafo", Float(-10, 10))
        >>> space.add_dependency("mtry", "branch", "rf")
        >>> space.add_dependency("cost_trafo", "branch", "svm")
    """

    def __init__(
        self,
        params: Optional[Mapping[str, ParamSpec]] = None,
        dependencies: Optional[Iterable[DependencyLike]] = None,
        transform: Optional[Transform] = None,
    ):
        """
        Initialize a search space.

        Args:
            params: Optional mapping of parameter names to their specifications.
                    Lists are promoted to Categorical.
            dependencies: Optional iterable of Dependency objects or
                          (child, parent, value) triples.
            transform: Optional function rewriting sampled assignments.
        """
        self._params: Dict[str, Union[Categorical, Int, Float]] = {}
        # child -> dependencies naming it as child, in insertion order
        self._parents: Dict[str, List[Dependency]] = {}
        self._transform: Optional[Transform] = None

        for name, spec in (params or {}).items():
            self.add_parameter(name, spec)
        for dependency in dependencies or ():
            dep = to_dependency(dependency)
            self.add_dependency(dep.child, dep.parent, dep.value)
        if transform is not None:
            self.set_transform(transform)

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def add_parameter(self, name: str, spec: ParamSpec) -> "ConditionalSpace":
        """
        Register a new parameter.

        Raises:
            DuplicateNameError: If ``name`` is already registered
            TypeError: If ``spec`` is not a supported ParamSpec
        """
        if name in self._params:
            raise DuplicateNameError(name)
        self._params[name] = normalize_spec(name, spec)
        return self

    def add_dependency(self, child: str, parent: str, value: Any) -> "ConditionalSpace":
        """
        Make ``child`` active only when ``parent`` equals ``value``.

        Several dependencies on the same child must all hold. The space is
        left unchanged when the dependency is rejected.

        Raises:
            UnknownParameterError: If either name is not registered
            CyclicDependencyError: If ``child`` would become its own ancestor
        """
        for name in (child, parent):
            if name not in self._params:
                raise UnknownParameterError(name)
        if child == parent or self._reaches(parent, child):
            raise CyclicDependencyError(child, parent)

        dependency = Dependency(child, parent, value)
        existing = self._parents.setdefault(child, [])
        if dependency in existing:
            return self

        if not contains(self._params[parent], value):
            warnings.warn(
                f"Dependency {dependency!r}: value {value!r} is outside the domain "
                f"{self._params[parent]!r} of '{parent}', so '{child}' can never be active.",
                UserWarning,
            )
        existing.append(dependency)
        return self

    def set_transform(self, transform: Optional[Transform]) -> "ConditionalSpace":
        """Replace the current transform; ``None`` removes it."""
        if transform is not None and not callable(transform):
            raise TypeError(
                f"Transform must be callable, got {type(transform).__name__}"
            )
        self._transform = transform
        return self

    def _reaches(self, start: str, target: str) -> bool:
        """DFS along child -> parent edges from ``start`` looking for ``target``."""
        stack = [start]
        visited = set()
        while stack:
            node = stack.pop()
            if node == target:
                return True
            if node in visited:
                continue
            visited.add(node)
            stack.extend(dep.parent for dep in self._parents.get(node, ()))
        return False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def names(self) -> List[str]:
        return list(self._params)

    @property
    def parameters(self) -> Dict[str, Union[Categorical, Int, Float]]:
        """Ordered copy of the name -> spec mapping."""
        return dict(self._params)

    @property
    def dependencies(self) -> List[Dependency]:
        """All dependencies, grouped by child in parameter order."""
        return [
            dep
            for name in self._params
            for dep in self._parents.get(name, ())
        ]

    @property
    def transform(self) -> Optional[Transform]:
        return self._transform

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __getitem__(self, name: str) -> Union[Categorical, Int, Float]:
        if name not in self._params:
            raise UnknownParameterError(name)
        return self._params[name]

    def __repr__(self) -> str:
        return (
            f"ConditionalSpace(params={self._params}, "
            f"dependencies={self.dependencies}, "
            f"transform={getattr(self._transform, '__name__', self._transform)})"
        )

    def parents_of(self, name: str) -> List[Dependency]:
        """Dependencies gating ``name`` (empty when it is always active)."""
        if name not in self._params:
            raise UnknownParameterError(name)
        return list(self._parents.get(name, ()))

    def is_conditional(self, name: str) -> bool:
        return bool(self.parents_of(name))

    def topological_order(self) -> List[str]:
        """
        Parameter names ordered parents-before-children.

        Kahn's algorithm; among parameters that are ready at the same time the
        insertion order is kept, so the result is deterministic.
        """
        position = {name: i for i, name in enumerate(self._params)}
        in_degree = {name: 0 for name in self._params}
        children: Dict[str, List[str]] = {name: [] for name in self._params}
        for child, deps in self._parents.items():
            for parent in {dep.parent for dep in deps}:
                in_degree[child] += 1
                children[parent].append(child)

        ready = deque(name for name in self._params if in_degree[name] == 0)
        order: List[str] = []
        while ready:
            name = ready.popleft()
            order.append(name)
            released = []
            for child in children[name]:
                in_degree[child] -= 1
                if in_degree[child] == 0:
                    released.append(child)
            # keep insertion order among newly released nodes
            merged = sorted(list(ready) + released, key=position.__getitem__)
            ready = deque(merged)

        if len(order) != len(self._params):
            stuck = [name for name in self._params if name not in order]
            raise RuntimeError(f"Dependency graph has a cycle through {stuck}")
        return order

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------

    def is_active(self, name: str, assignment: Mapping[str, Any]) -> bool:
        """Whether every dependency on ``name`` holds against ``assignment``."""
        return all(dep.holds(assignment) for dep in self.parents_of(name))

    def filter_active(self, raw: Mapping[str, Any]) -> Assignment:
        """
        Drop every parameter whose dependencies do not all hold.

        Parents are resolved before their children, so the conditions are
        checked against the assignment as already filtered. ``raw`` is not
        modified.
        """
        active: Assignment = {}
        for name in self.topological_order():
            if name not in raw:
                continue
            if all(dep.holds(active) for dep in self._parents.get(name, ())):
                active[name] = raw[name]
        # restore declaration order for display
        return {name: active[name] for name in self._params if name in active}

    def validate(self, assignment: Mapping[str, Any]) -> None:
        """
        Check that ``assignment`` is a well-formed raw draw of this space.

        Raises:
            ValueError: On unknown keys, missing active parameters, present
                        inactive parameters or out-of-domain values
        """
        unknown = [key for key in assignment if key not in self._params]
        if unknown:
            raise ValueError(f"Unknown parameters in assignment: {unknown}")

        for name in self.topological_order():
            active = all(dep.holds(assignment) for dep in self._parents.get(name, ()))
            present = name in assignment
            if active and not present:
                raise ValueError(f"Active parameter '{name}' is missing")
            if not active and present:
                raise ValueError(f"Inactive parameter '{name}' must be absent")
            if present and not contains(self._params[name], assignment[name]):
                raise ValueError(
                    f"Value {assignment[name]!r} for '{name}' is outside {self._params[name]!r}"
                )

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------

    def apply_transform(self, assignment: Mapping[str, Any]) -> Mapping[str, Any]:
        """
        Run the configured transform on ``assignment``.

        Without a transform the assignment is returned unchanged. The transform
        receives a copy, so it may pop or rewrite keys freely. Inactive
        parameters are absent rather than None; a transform that reads a key
        without checking for it first fails only on the branches where that key
        is inactive.

        Raises:
            TransformError: Wrapping whatever the transform raised
        """
        transform = self._transform
        if transform is None:
            return assignment

        try:
            result = transform(dict(assignment))
        except Exception as exc:
            raise TransformError(assignment, f"{type(exc).__name__}: {exc}") from exc

        if not isinstance(result, Mapping):
            raise TransformError(
                assignment,
                f"transform returned {type(result).__name__}, expected a mapping",
            )
        return dict(result)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabular description of the space, one row per parameter.

        Returns:
            DataFrame with columns name, kind, domain and depends_on
        """
        rows = []
        for name, spec in self._params.items():
            rows.append(
                {
                    "name": name,
                    "kind": type(spec).__name__.lower(),
                    "domain": repr(spec),
                    "depends_on": ", ".join(
                        f"{dep.parent}=={dep.value!r}"
                        for dep in self._parents.get(name, ())
                    ),
                }
            )
        return pd.DataFrame(rows, columns=["name", "kind", "domain", "depends_on"])
