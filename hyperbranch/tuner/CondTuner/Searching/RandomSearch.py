import math
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from ..Configs.ParamSpec import Categorical, Float, Int, float_grid_size
from ..Configs.SearchSpace import ConditionalSpace
from ..Configs.TuningConfig import DIRECTIONS
from .SearchAlgorithm import SearchAlgorithm, is_better


def _check_seed(seed: Any):
    """numpy seeds streams from non-negative ints only."""
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
        raise ValueError(f"RandomSearch: seed must be a non-negative int or None, got {seed!r}")


class RandomSearch(SearchAlgorithm):
    """
    Random search over a conditional space.

    Every draw samples all parameters independently and uniformly over their
    domains, then drops the parameters whose dependencies do not hold. Draw
    ``i`` is generated from a numpy Generator seeded with ``[seed, i]``, so a
    draw depends only on the seed and its index. The same seed always
    reproduces the same sequence, and draws can be handed to concurrent
    workers in any order.

    Attributes:
        max_trials: The maximum number of draws to hand out through get_next_params.
        seed: The user-supplied seed, or None.
        space: The ConditionalSpace being explored.
        curr_iteration: The number of draws handed out so far.
        history: List of {"params", "score"} entries, in update order.
        best_score: The best score seen so far (direction-aware).
        best_params: The raw assignment that achieved best_score.
    """

    def __init__(
        self,
        max_trials: int = 20,
        seed: Optional[int] = None,
        direction: str = "maximize",
    ):
        if max_trials < 0:
            raise ValueError(f"max_trials ({max_trials}) must be >= 0")
        if direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")
        _check_seed(seed)
        self.max_trials = max_trials
        self.seed = seed
        self.direction = direction
        # Fixed once, so an unseeded search is still reproducible within itself
        self._stream_seed: int = (
            seed if seed is not None else int(np.random.SeedSequence().entropy)
        )
        self.space: Optional[ConditionalSpace] = None
        self.curr_iteration: int = 0
        self.history: List[Dict[str, Any]] = []
        self.best_params: Optional[Dict[str, Any]] = None
        self.best_score: Optional[float] = None

    @property
    def stream_seed(self) -> int:
        """Seed actually used for the random stream."""
        return self._stream_seed

    def initialize(self, space: ConditionalSpace):
        """
        Initialize the search algorithm with the search space.

        Args:
            space: The conditional search space to sample from
        """
        self.reset()
        self.space = space

    def _require_space(self) -> ConditionalSpace:
        if self.space is None:
            raise RuntimeError("RandomSearch not initialized. Call initialize() first.")
        return self.space

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    @staticmethod
    def _draw_value(rng: np.random.Generator, spec) -> Any:
        """Draw one value uniformly over the domain of ``spec``."""
        if isinstance(spec, Categorical):
            return spec.choices[int(rng.integers(len(spec.choices)))]

        if isinstance(spec, Int):
            count = (spec.high - spec.low) // spec.step + 1
            if spec.log:
                raw = math.exp(rng.uniform(math.log(spec.low), math.log(spec.high + 1)))
                k = int((raw - spec.low) // spec.step)
                k = min(max(k, 0), count - 1)
            else:
                k = int(rng.integers(count))
            return int(spec.low + k * spec.step)

        if isinstance(spec, Float):
            if spec.low == spec.high:
                rng.random()  # keep one draw per parameter
                return float(spec.low)
            if spec.step is not None:
                k = int(rng.integers(float_grid_size(spec)))
                return float(spec.low + k * spec.step)
            if spec.log:
                value = math.exp(rng.uniform(math.log(spec.low), math.log(spec.high)))
            else:
                value = float(rng.uniform(spec.low, spec.high))
            # rounding can land exactly on the open upper bound
            upper = float(np.nextafter(spec.high, spec.low))
            return float(min(max(value, spec.low), upper))

        raise TypeError(f"Unknown param spec type: {type(spec)}")

    def _draw(self, index: int, seed: int) -> Dict[str, Any]:
        space = self._require_space()
        rng = np.random.default_rng([seed, index])
        raw = {
            name: self._draw_value(rng, spec)
            for name, spec in space.parameters.items()
        }
        return space.filter_active(raw)

    def draw(self, index: int) -> Dict[str, Any]:
        """
        Produce raw assignment number ``index`` of this search's stream.

        Args:
            index: Non-negative draw index

        Returns:
            Assignment holding only the active parameters
        """
        if index < 0:
            raise ValueError(f"Draw index ({index}) must be >= 0")
        return self._draw(index, self._stream_seed)

    def sample(self, n: int, seed: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """
        Lazily produce ``n`` raw assignments.

        Args:
            n: Number of assignments
            seed: Seed of the stream; defaults to this search's seed

        Returns:
            A generator; calling sample again with the same seed restarts the
            identical sequence.
        """
        if n < 0:
            raise ValueError(f"Number of samples ({n}) must be >= 0")
        _check_seed(seed)
        self._require_space()
        stream_seed = self._stream_seed if seed is None else seed
        return (self._draw(index, stream_seed) for index in range(n))

    # ------------------------------------------------------------------
    # SearchAlgorithm interface
    # ------------------------------------------------------------------

    def get_next_params(self) -> Optional[Dict[str, Any]]:
        """
        Get the next raw assignment to try.

        Returns:
            Dictionary of active parameter names and values, or None if finished
        """
        self._require_space()
        if self.is_finished():
            return None

        params = self.draw(self.curr_iteration)
        self.curr_iteration += 1
        return params

    def update(self, params: Dict[str, Any], score: float):
        """
        Update the search algorithm with the results of the latest trial.

        Args:
            params: The raw assignment that was tried
            score: The evaluation score for the parameters
        """
        self.history.append({"params": params, "score": score})
        if is_better(score, self.best_score, self.direction):
            self.best_score = score
            self.best_params = params

    def get_best_params(self) -> Optional[Dict[str, Any]]:
        return self.best_params

    def get_best_score(self) -> Optional[float]:
        return self.best_score

    def reset(self):
        """
        Reset progress and best tracking; the space and the seed are kept.
        """
        self.curr_iteration = 0
        self.history = []
        self.best_params = None
        self.best_score = None

    def is_finished(self) -> bool:
        """
        Check if the search algorithm has handed out max_trials draws.

        Returns:
            True if the search is finished, False otherwise.
        """
        return self.curr_iteration >= self.max_trials


def sample(space: ConditionalSpace, n: int, seed: int) -> Iterator[Dict[str, Any]]:
    """
    Lazily draw ``n`` raw assignments from ``space``.

    Shorthand for ``RandomSearch(seed=seed)`` initialized on ``space``.
    """
    search = RandomSearch(max_trials=n, seed=seed)
    search.initialize(space)
    return search.sample(n)
