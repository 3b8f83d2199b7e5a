"""
Search algorithm implementations for conditional spaces.

- SearchAlgorithm: Abstract base class that defines the interface
- RandomSearch: Seeded, index-addressable uniform sampling (supports parallel runs)
- OptunaSearch: Model-based search using Optuna's define-by-run API
"""

from .OptunaSearch import OptunaSearch
from .RandomSearch import RandomSearch, sample
from .SearchAlgorithm import SearchAlgorithm

__all__ = [
    "SearchAlgorithm",
    "RandomSearch",
    "OptunaSearch",
    "sample",
]
