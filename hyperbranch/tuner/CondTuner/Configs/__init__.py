from .Dependency import Dependency
from .ParamSpec import Categorical, Float, Int
from .SearchSpace import ConditionalSpace
from .TuningConfig import TuningConfig

__all__ = [
    "Categorical",
    "ConditionalSpace",
    "Dependency",
    "Float",
    "Int",
    "TuningConfig",
]
