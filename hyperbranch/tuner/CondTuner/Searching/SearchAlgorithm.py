import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..Configs.SearchSpace import ConditionalSpace


class SearchAlgorithm(ABC):
    """
    Abstract base class for search algorithms driving a conditional search.

    Parameters returned by ``get_next_params`` are raw assignments: inactive
    parameters are already removed, the space's transform is not yet applied.
    """

    @abstractmethod
    def initialize(self, space: ConditionalSpace):
        """
        Initialize the search algorithm with the search space.

        Args:
            space: The conditional search space to explore.
        """
        pass

    @abstractmethod
    def get_next_params(self) -> Optional[Dict[str, Any]]:
        """
        Get the next raw assignment to try.

        Returns:
            Dictionary of active parameter names and values, or None if finished
        """
        pass

    @abstractmethod
    def update(self, params: Dict[str, Any], score: float):
        """
        Update the search algorithm with the results of the latest trial.

        Args:
            params: The raw assignment that was tried
            score: The evaluation score for the parameters
        """
        pass

    @abstractmethod
    def get_best_params(self) -> Optional[Dict[str, Any]]:
        """
        Get the best raw assignment found so far.

        Returns:
            Dictionary of the best parameter names and values, or None if no params yet.
        """
        pass

    @abstractmethod
    def get_best_score(self) -> Optional[float]:
        """
        Get the best score achieved so far.

        Returns:
            The best score, or None if no score yet.
        """
        pass

    @abstractmethod
    def reset(self):
        """
        Reset the search algorithm to its initial state.
        """
        pass

    @abstractmethod
    def is_finished(self) -> bool:
        """
        Check if the search algorithm has finished its search (e.g., budget exhausted).

        Returns:
            True if the search is finished, False otherwise.
        """
        pass

    def report_failure(self, params: Dict[str, Any]):
        """
        Record that the latest trial was aborted before it produced a score.

        Called by the tuner when the transform or the evaluator raises. The
        default does nothing; backends with per-trial state override it.

        Args:
            params: The raw assignment whose trial failed
        """
        pass


def is_better(new_score: float, old_score: Optional[float], direction: str) -> bool:
    """
    Strict direction-aware comparison used for best tracking.

    Ties keep the earlier score. NaN ranks below every number, so it only
    wins against nothing.
    """
    if old_score is None:
        return True
    if math.isnan(new_score):
        return False
    if math.isnan(old_score):
        return True
    if direction == "maximize":
        return new_score > old_score
    return new_score < old_score
