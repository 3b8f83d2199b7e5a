import types

import pytest

from hyperbranch.tuner.CondTuner.Configs.ParamSpec import Categorical, Float, Int
from hyperbranch.tuner.CondTuner.Configs.SearchSpace import ConditionalSpace
from hyperbranch.tuner.CondTuner.Searching.RandomSearch import RandomSearch, sample


@pytest.fixture
def numeric_space():
    return ConditionalSpace(
        {
            "units": Int(8, 64, step=8),
            "depth": Int(1, 3),
            "lr": Float(1e-4, 1e-1, log=True),
            "trees": Int(1, 1000, log=True),
            "ratio": Float(0.0, 1.0, step=0.25),
            "dropout": Float(0.0, 0.5),
            "fixed": Float(2.0, 2.0),
        }
    )


class TestRandomSearch:
    @pytest.fixture(autouse=True)
    def setup_method(self, branch_space):
        self.space = branch_space
        self.max_trials = 5
        self.search = RandomSearch(max_trials=self.max_trials, seed=42)

    def test_initialization(self):
        search_default = RandomSearch()
        assert search_default.max_trials == 20
        assert search_default.seed is None
        assert isinstance(search_default.stream_seed, int)
        assert self.search.stream_seed == 42
        assert self.search.curr_iteration == 0
        assert self.search.history == []
        assert self.search.best_score is None
        assert self.search.best_params is None

    def test_invalid_arguments(self):
        with pytest.raises(ValueError, match="max_trials"):
            RandomSearch(max_trials=-1)
        with pytest.raises(ValueError, match="direction"):
            RandomSearch(direction="sideways")
        with pytest.raises(ValueError, match="seed"):
            RandomSearch(seed=-1)
        with pytest.raises(ValueError, match="seed"):
            RandomSearch(seed=1.5)

    def test_requires_initialize(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            self.search.get_next_params()
        with pytest.raises(RuntimeError, match="not initialized"):
            self.search.sample(3)

    def test_get_next_params_until_finished(self):
        self.search.initialize(self.space)
        drawn = []
        while not self.search.is_finished():
            drawn.append(self.search.get_next_params())
        assert len(drawn) == self.max_trials
        assert self.search.get_next_params() is None
        assert self.search.curr_iteration == self.max_trials

    def test_get_next_params_follows_draw_index(self):
        self.search.initialize(self.space)
        first = self.search.get_next_params()
        second = self.search.get_next_params()
        assert first == self.search.draw(0)
        assert second == self.search.draw(1)

    def test_update_history_and_best_score(self):
        self.search.initialize(self.space)
        params1 = {"branch": "rf", "mtry": 3}
        params2 = {"branch": "svm", "cost_trafo": 1.0}
        self.search.update(params1, 10.0)
        self.search.update(params2, 20.0)

        assert len(self.search.history) == 2
        assert self.search.history[1] == {"params": params2, "score": 20.0}
        assert self.search.get_best_score() == 20.0
        assert self.search.get_best_params() == params2

    def test_ties_keep_first(self):
        self.search.initialize(self.space)
        first = {"branch": "rf", "mtry": 3}
        self.search.update(first, 1.0)
        self.search.update({"branch": "rf", "mtry": 4}, 1.0)
        assert self.search.get_best_params() is first

    def test_nan_score_never_best(self):
        self.search.initialize(self.space)
        self.search.update({"branch": "rf", "mtry": 3}, float("nan"))
        self.search.update({"branch": "rf", "mtry": 4}, 1.0)
        self.search.update({"branch": "rf", "mtry": 5}, float("nan"))
        assert self.search.get_best_score() == 1.0
        assert self.search.get_best_params() == {"branch": "rf", "mtry": 4}

    def test_minimize(self):
        search = RandomSearch(seed=0, direction="minimize")
        search.initialize(self.space)
        search.update({"branch": "rf", "mtry": 3}, 5.0)
        search.update({"branch": "rf", "mtry": 4}, 2.0)
        assert search.get_best_score() == 2.0

    def test_reset_keeps_space(self):
        self.search.initialize(self.space)
        self.search.get_next_params()
        self.search.update({"branch": "rf", "mtry": 3}, 1.0)
        self.search.reset()
        assert self.search.space is self.space
        assert self.search.curr_iteration == 0
        assert self.search.history == []
        assert self.search.get_best_params() is None


class TestSampling:
    def test_sample_is_lazy(self, branch_space):
        search = RandomSearch(seed=1)
        search.initialize(branch_space)
        assert isinstance(search.sample(3), types.GeneratorType)

    def test_same_seed_same_sequence(self, branch_space):
        first = list(sample(branch_space, 25, seed=7))
        second = list(sample(branch_space, 25, seed=7))
        assert first == second

    def test_sample_restartable(self, branch_space):
        search = RandomSearch(seed=7)
        search.initialize(branch_space)
        assert list(search.sample(10)) == list(search.sample(10))
        assert list(search.sample(10, seed=99)) == list(search.sample(10, seed=99))

    def test_different_seeds_differ(self, branch_space):
        assert list(sample(branch_space, 20, seed=1)) != list(sample(branch_space, 20, seed=2))

    def test_prefix_stable_across_lengths(self, branch_space):
        assert list(sample(branch_space, 5, seed=3)) == list(sample(branch_space, 10, seed=3))[:5]

    def test_draw_matches_sequence_position(self, branch_space):
        search = RandomSearch(seed=11)
        search.initialize(branch_space)
        sequence = list(search.sample(8))
        for index in reversed(range(8)):
            assert search.draw(index) == sequence[index]

    def test_invalid_counts(self, branch_space):
        search = RandomSearch(seed=0)
        search.initialize(branch_space)
        with pytest.raises(ValueError):
            search.sample(-1)
        with pytest.raises(ValueError):
            search.draw(-1)

    def test_negative_seed_rejected_before_drawing(self, branch_space):
        with pytest.raises(ValueError, match="non-negative"):
            sample(branch_space, 2, seed=-1)
        search = RandomSearch(seed=0)
        search.initialize(branch_space)
        with pytest.raises(ValueError, match="non-negative"):
            search.sample(2, seed=-5)

    def test_zero_samples(self, branch_space):
        assert list(sample(branch_space, 0, seed=0)) == []

    def test_active_iff_dependencies_hold(self, branch_space):
        for raw in sample(branch_space, 200, seed=0):
            branch_space.validate(raw)
            for name in branch_space.names:
                if branch_space.is_conditional(name):
                    assert (name in raw) == branch_space.is_active(name, raw)

    def test_branches_select_parameter_subsets(self, branch_space):
        for raw in sample(branch_space, 100, seed=5):
            if raw["branch"] == "rf":
                assert set(raw) == {"branch", "mtry"}
            else:
                assert set(raw) == {"branch", "cost_trafo"}

    def test_chained_dependencies(self):
        space = ConditionalSpace(
            {"a": ["on", "off"], "b": ["x", "y"], "c": Int(1, 5)},
            dependencies=[("b", "a", "on"), ("c", "b", "x")],
        )
        for raw in sample(space, 200, seed=3):
            space.validate(raw)
            if "c" in raw:
                assert raw["a"] == "on" and raw["b"] == "x"

    def test_numeric_bounds(self, numeric_space):
        specs = numeric_space.parameters
        for raw in sample(numeric_space, 500, seed=13):
            for name, value in raw.items():
                spec = specs[name]
                assert spec.low <= value <= spec.high
            assert raw["units"] % 8 == 0
            assert raw["ratio"] in (0.0, 0.25, 0.5, 0.75)
            assert raw["dropout"] < 0.5
            assert raw["lr"] < 1e-1
            assert raw["fixed"] == 2.0
            assert isinstance(raw["depth"], int)
            assert isinstance(raw["trees"], int)

    def test_integer_endpoints_reachable(self, numeric_space):
        depths = {raw["depth"] for raw in sample(numeric_space, 200, seed=21)}
        assert depths == {1, 2, 3}

    def test_categorical_levels_covered(self):
        space = ConditionalSpace({"kernel": Categorical(["linear", "radial", "polynomial"])})
        kernels = {raw["kernel"] for raw in sample(space, 100, seed=0)}
        assert kernels == {"linear", "radial", "polynomial"}
