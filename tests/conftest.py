import pytest

from hyperbranch.tuner.CondTuner.Configs.ParamSpec import Categorical, Float, Int
from hyperbranch.tuner.CondTuner.Configs.SearchSpace import ConditionalSpace


@pytest.fixture
def branch_space():
    """svm / rf model selection: mtry only for rf, cost_trafo only for svm."""
    space = ConditionalSpace()
    space.add_parameter("branch", Categorical(["svm", "rf"]))
    space.add_parameter("mtry", Int(1, 20))
    space.add_parameter("cost_trafo", Float(-10.0, 10.0))
    space.add_dependency("mtry", "branch", "rf")
    space.add_dependency("cost_trafo", "branch", "svm")
    return space
