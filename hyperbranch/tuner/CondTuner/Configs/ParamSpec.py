"""
Parameter domain specifications for conditional search spaces.

Each spec describes the domain of a single tunable value: a fixed set of
levels, an inclusive integer range, or a half-open real range. The name of
the parameter is the key it is registered under in a ConditionalSpace.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union


@dataclass
class Categorical:
    """
    A categorical parameter that takes values from an ordered set of levels.

    Examples:
        Categorical(["svm", "rf"])  # Branch selection
        Categorical(["linear", "radial", "polynomial"])
    """

    choices: Sequence[Any]

    def __post_init__(self):
        if not self.choices:
            raise ValueError("Categorical choices must not be empty")
        self.choices = list(self.choices)
        seen: List[Any] = []
        for choice in self.choices:
            if choice in seen:
                raise ValueError(f"Categorical choices must be unique, got {choice!r} twice")
            seen.append(choice)

    def __repr__(self) -> str:
        return f"Categorical({self.choices})"


@dataclass
class Int:
    """
    An integer parameter within a range [low, high].

    Args:
        low: Lower bound (inclusive)
        high: Upper bound (inclusive)
        step: Step size for discrete values (default: 1)
        log: Whether to sample in log scale

    Examples:
        Int(1, 20)  # mtry for a random forest
        Int(8, 512, step=8)  # Multiples of 8 from 8 to 512
    """

    low: int
    high: int
    step: int = 1
    log: bool = False

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(f"Int: low ({self.low}) must be <= high ({self.high})")
        if self.step < 1:
            raise ValueError(f"Int: step ({self.step}) must be >= 1")
        if self.log and self.low <= 0:
            raise ValueError(f"Int: log=True requires low > 0, got {self.low}")
        if self.log and self.step != 1:
            raise ValueError("Int: log=True cannot be combined with step != 1")

    def __repr__(self) -> str:
        parts = [f"{self.low}", f"{self.high}"]
        if self.step != 1:
            parts.append(f"step={self.step}")
        if self.log:
            parts.append("log=True")
        return f"Int({', '.join(parts)})"


@dataclass
class Float:
    """
    A floating-point parameter within a range [low, high).

    Args:
        low: Lower bound (inclusive)
        high: Upper bound (exclusive, unless low == high)
        step: Step size for discrete values (None for continuous)
        log: Whether to sample in log scale

    Examples:
        Float(-10.0, 10.0)  # cost exponent, transformed to 2**x later
        Float(1e-5, 1e-1, log=True)  # Log-scale float (e.g., learning rate)
    """

    low: float
    high: float
    step: Optional[float] = None
    log: bool = False

    def __post_init__(self):
        if self.low > self.high:
            raise ValueError(f"Float: low ({self.low}) must be <= high ({self.high})")
        if self.step is not None and self.step <= 0:
            raise ValueError(f"Float: step ({self.step}) must be > 0")
        if self.log and self.low <= 0:
            raise ValueError(f"Float: log=True requires low > 0, got {self.low}")
        if self.log and self.step is not None:
            raise ValueError("Float: log=True cannot be combined with step")

    def __repr__(self) -> str:
        parts = [f"{self.low}", f"{self.high}"]
        if self.step is not None:
            parts.append(f"step={self.step}")
        if self.log:
            parts.append("log=True")
        return f"Float({', '.join(parts)})"


# Type alias for any parameter specification
ParamSpec = Union[Categorical, Int, Float, List[Any]]


def normalize_spec(name: str, spec: Any) -> Union[Categorical, Int, Float]:
    """Promote legacy lists and reject anything that is not a ParamSpec."""
    if isinstance(spec, list):
        return Categorical(spec)
    if isinstance(spec, (Categorical, Int, Float)):
        return spec
    raise TypeError(
        f"Parameter '{name}' has unsupported type {type(spec).__name__}. "
        f"Expected list, Categorical, Int, or Float."
    )


def contains(spec: ParamSpec, value: Any) -> bool:
    """
    Check whether ``value`` lies inside the domain described by ``spec``.

    Integer ranges are inclusive on both ends and respect ``step``; real
    ranges are half-open, except for the degenerate ``low == high`` case.
    """
    if isinstance(spec, list):
        spec = Categorical(spec)
    if isinstance(spec, Categorical):
        return value in spec.choices
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(spec, Int):
        if isinstance(value, float) and not value.is_integer():
            return False
        value = int(value)
        return spec.low <= value <= spec.high and (value - spec.low) % spec.step == 0
    if isinstance(spec, Float):
        if spec.low == spec.high:
            return value == spec.low
        return spec.low <= value < spec.high
    return False


def float_grid_size(spec: Float) -> int:
    """Number of points low + k*step that stay strictly below high."""
    if spec.step is None or spec.low == spec.high:
        return 1
    count = int(math.ceil((spec.high - spec.low) / spec.step))
    return max(count, 1)
