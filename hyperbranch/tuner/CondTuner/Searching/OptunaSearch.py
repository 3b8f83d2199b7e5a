"""
Optuna-backed search algorithm for conditional spaces.

Optuna's define-by-run API suits conditional spaces: parameters are suggested
parents-first and a parameter is only suggested when its dependencies hold
for the values already suggested, so inactive parameters never reach the
sampler.
"""

from typing import Any, Dict, Optional

import optuna
from optuna.samplers import BaseSampler, TPESampler
from optuna.trial import TrialState

from ..Configs.ParamSpec import Categorical, Float, Int
from ..Configs.SearchSpace import ConditionalSpace
from ..Configs.TuningConfig import DIRECTIONS
from .SearchAlgorithm import SearchAlgorithm, is_better


class OptunaSearch(SearchAlgorithm):
    """
    Optuna-backed search algorithm implementing the SearchAlgorithm interface.

    Args:
        n_trials: Maximum number of trials to run (default: 100)
        sampler: Optuna sampler to use (default: TPESampler)
        direction: Optimization direction, "maximize" or "minimize" (default: "maximize")
        study_name: Optional name for the study
        storage: Optional Optuna storage URL (e.g., "sqlite:///study.db")
        load_if_exists: Whether to load existing study if storage is provided
        seed: Random seed for reproducibility

    Example:
        >>> search = OptunaSearch(n_trials=50, seed=42)
        >>> search.initialize(space)
        >>> while not search.is_finished():
        ...     params = search.get_next_params()
        ...     score = evaluate(space.apply_transform(params))
        ...     search.update(params, score)
    """

    def __init__(
        self,
        n_trials: int = 100,
        sampler: Optional[BaseSampler] = None,
        direction: str = "maximize",
        study_name: Optional[str] = None,
        storage: Optional[str] = None,
        load_if_exists: bool = False,
        seed: Optional[int] = None,
    ):
        if direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")
        self.n_trials = n_trials
        self.direction = direction
        self.study_name = study_name or "hyperbranch_study"
        self.storage = storage
        self.load_if_exists = load_if_exists
        self.seed = seed

        self.sampler: BaseSampler
        if sampler is None:
            self.sampler = TPESampler(seed=seed)
        else:
            self.sampler = sampler

        # State
        self._study: Optional[optuna.Study] = None
        self._space: Optional[ConditionalSpace] = None
        self._pending_trial: Optional[optuna.trial.Trial] = None
        self._trial_count: int = 0
        self._best_params: Optional[Dict[str, Any]] = None
        self._best_score: Optional[float] = None

    def initialize(self, space: ConditionalSpace):
        """
        Initialize the search algorithm with the search space and create a study.

        Args:
            space: The conditional search space to explore.
        """
        if not isinstance(space, ConditionalSpace):
            raise TypeError(
                f"OptunaSearch expects a ConditionalSpace, got {type(space).__name__}"
            )
        self._space = space
        self._study = optuna.create_study(
            study_name=self.study_name,
            sampler=self.sampler,
            direction=self.direction,
            storage=self.storage,
            load_if_exists=self.load_if_exists,
        )

        self._trial_count = 0
        self._pending_trial = None
        self._best_params = None
        self._best_score = None

    @staticmethod
    def _suggest_param(trial: optuna.trial.Trial, name: str, spec) -> Any:
        """Suggest a parameter value using Optuna's trial API."""
        if isinstance(spec, Categorical):
            return trial.suggest_categorical(name, spec.choices)
        elif isinstance(spec, Int):
            return trial.suggest_int(
                name, spec.low, spec.high, step=spec.step, log=spec.log
            )
        elif isinstance(spec, Float):
            if spec.step is not None:
                return trial.suggest_float(
                    name, spec.low, spec.high, step=spec.step, log=spec.log
                )
            return trial.suggest_float(name, spec.low, spec.high, log=spec.log)
        else:
            raise TypeError(f"Unknown param spec type: {type(spec)}")

    def get_next_params(self) -> Optional[Dict[str, Any]]:
        """
        Ask the study for a new trial and suggest its active parameters.

        Returns:
            Raw assignment with only the active parameters, or None if finished.
        """
        if self._study is None or self._space is None:
            raise RuntimeError("OptunaSearch not initialized. Call initialize() first.")

        if self.is_finished():
            return None

        self._pending_trial = self._study.ask()
        self._trial_count += 1

        space = self._space
        suggested: Dict[str, Any] = {}
        for name in space.topological_order():
            if space.is_active(name, suggested):
                suggested[name] = self._suggest_param(
                    self._pending_trial, name, space[name]
                )

        return {name: suggested[name] for name in space.names if name in suggested}

    def update(self, params: Dict[str, Any], score: float):
        """
        Report the score of the pending trial back to the study.

        Args:
            params: The raw assignment that was tried
            score: The evaluation score for the parameters
        """
        if self._study is None:
            raise RuntimeError("OptunaSearch not initialized. Call initialize() first.")

        if self._pending_trial is None:
            raise RuntimeError(
                "No pending trial to update. Call get_next_params() first."
            )

        self._study.tell(self._pending_trial, score)
        self._pending_trial = None

        if is_better(score, self._best_score, self.direction):
            self._best_score = score
            self._best_params = params.copy()

    def report_failure(self, params: Dict[str, Any]):
        """
        Mark the pending trial as failed so the study holds no RUNNING trial.

        Args:
            params: The raw assignment whose transform or evaluation raised
        """
        if self._study is None or self._pending_trial is None:
            return
        self._study.tell(self._pending_trial, state=TrialState.FAIL)
        self._pending_trial = None

    def get_best_params(self) -> Optional[Dict[str, Any]]:
        """
        Get the best raw assignment reported through update().

        Kept locally rather than read from ``study.best_params`` so that ties
        resolve to the earliest trial, as they do for RandomSearch.
        """
        return self._best_params

    def get_best_score(self) -> Optional[float]:
        return self._best_score

    def reset(self):
        """
        Reset the search algorithm; a fresh study is created if a space is set.
        """
        if self._space is not None:
            self.initialize(self._space)
        else:
            self._study = None
            self._pending_trial = None
            self._trial_count = 0
            self._best_params = None
            self._best_score = None

    def is_finished(self) -> bool:
        """
        Check if the search algorithm has finished its search.

        Returns:
            True if the budget (n_trials) is exhausted, False otherwise.
        """
        return self._trial_count >= self.n_trials

    # --- Additional Optuna-specific methods ---

    @property
    def study(self) -> Optional[optuna.Study]:
        """Access the underlying Optuna study for advanced operations."""
        return self._study

    def get_trials_dataframe(self):
        """
        Get a pandas DataFrame of all trials.

        Useful for analysis; inactive parameters show up as NaN.
        """
        if self._study is None:
            return None
        return self._study.trials_dataframe()
