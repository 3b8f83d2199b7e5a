import logging
import warnings
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

import pandas as pd

from .Configs import ConditionalSpace, TuningConfig
from .Searching import RandomSearch, SearchAlgorithm
from .Searching.SearchAlgorithm import is_better

logger = logging.getLogger(__name__)

EvaluateFunc = Callable[[Mapping[str, Any]], float]

# Result table columns; parameters with these names are renamed to params_<name>
RESERVED_COLUMNS = ("index", "score")


@dataclass
class TrialRecord:
    """
    One evaluated configuration.

    Attributes:
        index: Position of the draw in the search
        raw: Sampled assignment (inactive parameters absent)
        assignment: Assignment after the transform, as passed to the evaluator
        score: Value returned by the evaluator
    """

    index: int
    raw: Dict[str, Any]
    assignment: Dict[str, Any]
    score: float


@dataclass
class SearchResult:
    """Ordered trial records of a search and the best one among them."""

    records: List[TrialRecord]
    best: Optional[TrialRecord]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TrialRecord]:
        return iter(self.records)

    def to_dataframe(self, raw: bool = False) -> pd.DataFrame:
        """
        One row per trial: the draw index, its parameters and the score.

        Args:
            raw: Use the sampled assignment instead of the transformed one

        Returns:
            DataFrame; parameters that were inactive in a trial are NaN. A parameter
            named like a reserved column (index, score) becomes params_<name>.
        """
        rows = []
        for record in self.records:
            row: Dict[str, Any] = {"index": record.index}
            for key, value in (record.raw if raw else record.assignment).items():
                row[f"params_{key}" if key in RESERVED_COLUMNS else key] = value
            row["score"] = record.score
            rows.append(row)
        return pd.DataFrame(rows)


def select_best(records: List[TrialRecord], direction: str = "maximize") -> Optional[TrialRecord]:
    """Best record by score; ties go to the earliest draw and NaN scores rank last."""
    best: Optional[TrialRecord] = None
    for record in records:
        if is_better(record.score, None if best is None else best.score, direction):
            best = record
    return best


class CondTuner:
    """
    Drives a search over a conditional space.

    Each trial draws a raw assignment from the search algorithm, applies the
    space's transform, scores the result with the evaluation callback and
    records it. Errors from the transform (TransformError) or from the
    evaluator abort the run and propagate unchanged.
    """

    def __init__(
        self,
        space: ConditionalSpace,
        evaluate: EvaluateFunc,
        search_algorithm: Optional[SearchAlgorithm] = None,
        config: Optional[TuningConfig] = None,
    ):
        """
        Initialize the tuner.

        Args:
            space: The conditional search space
            evaluate: Callback scoring one transformed assignment
            search_algorithm: Search algorithm to use (default: RandomSearch seeded from config)
            config: Run settings (budget, seed, direction, n_jobs, verbose)
        """
        self.space = space
        self.evaluate = evaluate
        self.config = config or TuningConfig()
        self.search_algorithm = search_algorithm or RandomSearch(
            max_trials=self.config.budget,
            seed=self.config.seed,
            direction=self.config.direction,
        )
        self.results: List[TrialRecord] = []
        self.best: Optional[TrialRecord] = None

        self._check_configs()

    def _check_configs(self):
        """
        Validate the combination of space, callback and search settings.

        Raises:
            TypeError: If space or evaluate have the wrong type
            ValueError: If parallel evaluation is requested for a search
                        algorithm that cannot address draws by index
        """
        if not isinstance(self.space, ConditionalSpace):
            raise TypeError(
                f"space must be a ConditionalSpace, got {type(self.space).__name__}"
            )
        if not callable(self.evaluate):
            raise TypeError("evaluate must be callable")
        if self.config.n_jobs > 1 and not isinstance(self.search_algorithm, RandomSearch):
            raise ValueError(
                f"n_jobs={self.config.n_jobs} requires RandomSearch; "
                f"{type(self.search_algorithm).__name__} proposes trials sequentially"
            )
        direction = getattr(self.search_algorithm, "direction", self.config.direction)
        if direction != self.config.direction:
            warnings.warn(
                f"Search algorithm optimizes '{direction}' but the tuner is configured "
                f"to '{self.config.direction}'; the tuner's direction decides the best trial.",
                UserWarning,
            )

    def _log(self, message: str, *args: Any):
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, message, *args)

    def _run_trial(self, index: int, raw: Dict[str, Any]) -> TrialRecord:
        """Transform, evaluate and record a single draw."""
        assignment = dict(self.space.apply_transform(raw))
        self._log("Trial %d: trying parameters %s", index, assignment)
        score = float(self.evaluate(assignment))
        self._log("Trial %d: score %s", index, score)
        return TrialRecord(index=index, raw=raw, assignment=assignment, score=score)

    def _tune_sequential(self) -> List[TrialRecord]:
        records: List[TrialRecord] = []
        while len(records) < self.config.budget:
            params = self.search_algorithm.get_next_params()
            if params is None:
                break  # search algorithm exhausted before the budget

            try:
                record = self._run_trial(len(records), params)
            except Exception:
                self.search_algorithm.report_failure(params)
                raise
            self.search_algorithm.update(params, record.score)
            records.append(record)
        return records

    def _tune_parallel(self) -> List[TrialRecord]:
        search = self.search_algorithm
        if not isinstance(search, RandomSearch):
            raise RuntimeError(
                f"Parallel tuning requires RandomSearch, got {type(search).__name__}"
            )
        budget = min(self.config.budget, search.max_trials)

        def run(index: int) -> TrialRecord:
            return self._run_trial(index, search.draw(index))

        records: List[TrialRecord] = []
        with ThreadPoolExecutor(max_workers=self.config.n_jobs) as executor:
            futures: List[Future] = [executor.submit(run, i) for i in range(budget)]
            try:
                # collect in draw order, so the first failure by index wins
                for future in futures:
                    records.append(future.result())
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        search.curr_iteration = budget
        for record in records:
            search.update(record.raw, record.score)
        return records

    def tune(self) -> SearchResult:
        """
        Run the search until the budget is spent.

        Returns:
            SearchResult with records in draw order and the best record
        """
        self.search_algorithm.initialize(self.space)
        self.results = []
        self.best = None

        if self.config.n_jobs > 1:
            self.results = self._tune_parallel()
        else:
            self.results = self._tune_sequential()

        self.best = select_best(self.results, self.config.direction)
        if self.best is not None:
            logger.info(
                "Best trial %d with score %s: %s",
                self.best.index,
                self.best.score,
                self.best.assignment,
            )
        return SearchResult(records=list(self.results), best=self.best)

    def get_best_params(self) -> Optional[Dict[str, Any]]:
        """
        Get the transformed assignment of the best trial.

        Returns:
            The best assignment, or None before tune() or with a zero budget
        """
        return None if self.best is None else self.best.assignment

    def get_best_score(self) -> Optional[float]:
        return None if self.best is None else self.best.score

    def get_results_dataframe(self, raw: bool = False) -> pd.DataFrame:
        """
        Get the results of the tuning process as a pandas DataFrame.

        Returns:
            DataFrame with columns for the draw index, parameters, and score
        """
        return SearchResult(records=self.results, best=self.best).to_dataframe(raw=raw)


def run_search(
    space: ConditionalSpace,
    budget: int,
    evaluate: EvaluateFunc,
    seed: Optional[int] = None,
    direction: str = "maximize",
    n_jobs: int = 1,
    search_algorithm: Optional[SearchAlgorithm] = None,
    verbose: bool = False,
) -> SearchResult:
    """
    Sample, transform and evaluate ``budget`` configurations of ``space``.

    Args:
        space: The conditional search space
        budget: Number of evaluations
        evaluate: Callback scoring one transformed assignment
        seed: Seed of the random stream
        direction: "maximize" or "minimize"
        n_jobs: Number of concurrent evaluations
        search_algorithm: Optional replacement for the default RandomSearch
        verbose: Log every trial at INFO

    Returns:
        SearchResult with the ordered records and the best one (first wins ties)
    """
    config = TuningConfig(
        budget=budget, seed=seed, direction=direction, n_jobs=n_jobs, verbose=verbose
    )
    return CondTuner(space, evaluate, search_algorithm=search_algorithm, config=config).tune()
