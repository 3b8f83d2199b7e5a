"""
Unit tests for hyperbranch.tuner.CondTuner.Configs.ParamSpec

Covers:
- Categorical: empty and duplicate choices errors, normal creation
- Int: low>high, step<1, log with low<=0, log with step
- Float: low>high, step<=0, log with low<=0, log with step
- normalize_spec / contains / float_grid_size helpers
"""

import pytest

from hyperbranch.tuner.CondTuner.Configs.ParamSpec import (
    Categorical,
    Float,
    Int,
    contains,
    float_grid_size,
    normalize_spec,
)


# ============================================================================
# Categorical tests
# ============================================================================


class TestCategorical:
    def test_valid_string_choices(self):
        cat = Categorical(["svm", "rf"])
        assert cat.choices == ["svm", "rf"]

    def test_tuple_converted_to_list(self):
        cat = Categorical(("a", "b", "c"))
        assert isinstance(cat.choices, list)
        assert cat.choices == ["a", "b", "c"]

    def test_empty_choices_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Categorical([])

    def test_duplicate_choices_raises(self):
        with pytest.raises(ValueError, match="must be unique"):
            Categorical(["svm", "rf", "svm"])

    def test_repr(self):
        cat = Categorical(["svm", "rf"])
        assert repr(cat) == "Categorical(['svm', 'rf'])"


# ============================================================================
# Int tests
# ============================================================================


class TestInt:
    def test_valid_range(self):
        i = Int(1, 20)
        assert i.low == 1
        assert i.high == 20
        assert i.step == 1
        assert i.log is False

    def test_single_point_range(self):
        i = Int(5, 5)
        assert i.low == i.high == 5

    def test_low_greater_than_high_raises(self):
        with pytest.raises(ValueError, match="low.*must be <= high"):
            Int(100, 1)

    def test_step_less_than_one_raises(self):
        with pytest.raises(ValueError, match="step.*must be >= 1"):
            Int(1, 10, step=0)

    def test_log_with_non_positive_low_raises(self):
        with pytest.raises(ValueError, match="log=True requires low > 0"):
            Int(0, 10, log=True)

    def test_log_with_step_raises(self):
        with pytest.raises(ValueError, match="cannot be combined"):
            Int(1, 64, step=2, log=True)

    def test_repr_with_step(self):
        assert repr(Int(8, 64, step=8)) == "Int(8, 64, step=8)"

    def test_repr_with_log(self):
        assert repr(Int(1, 100, log=True)) == "Int(1, 100, log=True)"


# ============================================================================
# Float tests
# ============================================================================


class TestFloat:
    def test_valid_range(self):
        f = Float(-10.0, 10.0)
        assert f.low == -10.0
        assert f.high == 10.0
        assert f.step is None
        assert f.log is False

    def test_low_greater_than_high_raises(self):
        with pytest.raises(ValueError, match="low.*must be <= high"):
            Float(1.0, 0.5)

    def test_step_zero_raises(self):
        with pytest.raises(ValueError, match="step.*must be > 0"):
            Float(0.0, 1.0, step=0.0)

    def test_log_with_non_positive_low_raises(self):
        with pytest.raises(ValueError, match="log=True requires low > 0"):
            Float(0.0, 1.0, log=True)

    def test_log_with_step_raises(self):
        with pytest.raises(ValueError, match="cannot be combined"):
            Float(0.1, 1.0, step=0.1, log=True)

    def test_repr_basic(self):
        assert repr(Float(0.0, 1.0)) == "Float(0.0, 1.0)"


# ============================================================================
# Helper function tests
# ============================================================================


class TestNormalizeSpec:
    def test_list_promoted(self):
        spec = normalize_spec("branch", ["svm", "rf"])
        assert isinstance(spec, Categorical)

    def test_spec_passthrough(self):
        spec = Int(1, 20)
        assert normalize_spec("mtry", spec) is spec

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Parameter 'x' has unsupported type"):
            normalize_spec("x", (1, 2))


class TestFloatGridSize:
    def test_stepped_grid_excludes_upper_bound(self):
        assert float_grid_size(Float(0.0, 1.0, step=0.25)) == 4

    def test_partial_last_step_counts(self):
        assert float_grid_size(Float(0.0, 1.0, step=0.3)) == 4

    def test_continuous_or_degenerate_is_one(self):
        assert float_grid_size(Float(0.0, 1.0)) == 1
        assert float_grid_size(Float(2.0, 2.0, step=0.5)) == 1


class TestContains:
    def test_categorical(self):
        spec = Categorical(["svm", "rf"])
        assert contains(spec, "svm")
        assert not contains(spec, "knn")

    def test_int_bounds_inclusive(self):
        spec = Int(1, 20)
        assert contains(spec, 1)
        assert contains(spec, 20)
        assert not contains(spec, 0)
        assert not contains(spec, 21)

    def test_int_respects_step(self):
        spec = Int(1, 10, step=3)
        assert all(contains(spec, v) for v in (1, 4, 7, 10))
        assert not contains(spec, 5)

    def test_int_rejects_fractional_and_bool(self):
        spec = Int(0, 5)
        assert not contains(spec, 2.5)
        assert not contains(spec, True)

    def test_float_upper_bound_exclusive(self):
        spec = Float(-10.0, 10.0)
        assert contains(spec, -10.0)
        assert contains(spec, 9.999)
        assert not contains(spec, 10.0)

    def test_degenerate_float(self):
        assert contains(Float(2.0, 2.0), 2.0)

    def test_non_numeric_for_numeric_spec(self):
        assert not contains(Float(0.0, 1.0), "0.5")
