from dataclasses import asdict, dataclass, fields
from dataclasses import replace as dataclass_replace
from typing import Any, Dict, Mapping, Optional

DIRECTIONS = ("maximize", "minimize")


@dataclass
class TuningConfig:
    """
    Settings for a single search run.

    Args:
        budget: Number of evaluations to perform (default: 20)
        seed: Seed of the random stream; None draws fresh entropy once per run
        direction: "maximize" or "minimize" the evaluation score
        n_jobs: Number of concurrent evaluations (1 runs sequentially)
        verbose: Log every trial at INFO instead of DEBUG
    """

    budget: int = 20
    seed: Optional[int] = None
    direction: str = "maximize"
    n_jobs: int = 1
    verbose: bool = False

    def __post_init__(self):
        if isinstance(self.budget, bool) or not isinstance(self.budget, int):
            raise ValueError(f"TuningConfig: budget must be an int, got {self.budget!r}")
        if self.budget < 0:
            raise ValueError(f"TuningConfig: budget ({self.budget}) must be >= 0")
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0
        ):
            raise ValueError(
                f"TuningConfig: seed must be a non-negative int or None, got {self.seed!r}"
            )
        if self.direction not in DIRECTIONS:
            raise ValueError(
                f"TuningConfig: direction must be one of {DIRECTIONS}, got {self.direction!r}"
            )
        if self.n_jobs < 1:
            raise ValueError(f"TuningConfig: n_jobs ({self.n_jobs}) must be >= 1")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TuningConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"TuningConfig: unknown settings {unknown}")
        return cls(**dict(data))

    def replace(self, **changes: Any) -> "TuningConfig":
        """Return a validated copy with ``changes`` applied."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
