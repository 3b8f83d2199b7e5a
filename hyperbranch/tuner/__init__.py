from .CondTuner import (
    Categorical,
    ConditionalSpace,
    CondTuner,
    CyclicDependencyError,
    Dependency,
    DuplicateNameError,
    EvaluationError,
    Float,
    Int,
    OptunaSearch,
    RandomSearch,
    SearchAlgorithm,
    SearchResult,
    SearchSpaceError,
    TransformError,
    TrialRecord,
    TuningConfig,
    UnknownParameterError,
    run_search,
    sample,
)

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
