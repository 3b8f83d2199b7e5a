from .Configs import (
    Categorical,
    ConditionalSpace,
    Dependency,
    Float,
    Int,
    TuningConfig,
)
from .CondTuner import CondTuner, SearchResult, TrialRecord, run_search
from .errors import (
    CyclicDependencyError,
    DuplicateNameError,
    EvaluationError,
    SearchSpaceError,
    TransformError,
    UnknownParameterError,
)
from .Searching import OptunaSearch, RandomSearch, SearchAlgorithm, sample

__all__ = [
    # Driver
    "CondTuner",
    "SearchResult",
    "TrialRecord",
    "run_search",
    # Configs
    "ConditionalSpace",
    "Dependency",
    "TuningConfig",
    # ParamSpec types
    "Categorical",
    "Int",
    "Float",
    # Search algorithms
    "SearchAlgorithm",
    "RandomSearch",
    "OptunaSearch",
    "sample",
    # Errors
    "SearchSpaceError",
    "DuplicateNameError",
    "UnknownParameterError",
    "CyclicDependencyError",
    "TransformError",
    "EvaluationError",
]
