import math

import numpy as np
import pytest

from groupstats import MISSING, StatsContext
from groupstats.stats import (
    iqr,
    kurtosis,
    maximum,
    mean,
    median,
    minimum,
    sd,
    sebinomial,
    semean,
    sepoisson,
    skewness,
    total,
)


class TestExampleGroup:
    """End-to-end values for [3, 7, 1, 9, 2]"""

    def test_sum(self, example_vector):
        assert total(example_vector, 0, 5) == 22.0

    def test_mean(self, example_vector):
        assert mean(example_vector, 0, 5) == pytest.approx(4.4)

    def test_min_max(self, example_vector):
        assert minimum(example_vector, 0, 5) == 1.0
        assert maximum(example_vector, 0, 5) == 9.0

    def test_median(self, example_vector):
        assert median(example_vector, 0, 5) == 3.0

    def test_sd(self, example_vector):
        assert sd(example_vector, 0, 5) == pytest.approx(math.sqrt(47.2 / 4))
        assert sd(example_vector, 0, 5) == pytest.approx(3.435, abs=1e-3)

    def test_semean(self, example_vector):
        assert semean(example_vector, 0, 5) == pytest.approx(math.sqrt(47.2 / 4) / math.sqrt(5))

    def test_subrange_ignores_other_groups(self, padded_vector):
        assert total(padded_vector, 1, 6) == 22.0
        assert minimum(padded_vector, 1, 6) == 1.0
        assert maximum(padded_vector, 1, 6) == 9.0
        assert sd(padded_vector, 1, 6) == pytest.approx(3.435, abs=1e-3)
        assert median(padded_vector, 1, 6) == 3.0

    def test_accepts_lists(self):
        assert total([3.0, 7.0, 1.0, 9.0, 2.0], 0, 5) == 22.0
        assert isinstance(mean([1, 2], 0, 2), float)


class TestStandardDeviation:
    """Test Bessel-corrected standard deviation"""

    @pytest.mark.parametrize("n", [1, 2, 5, 100])
    def test_constant_range_is_exactly_zero(self, n):
        assert sd(np.full(n, 0.1), 0, n) == 0.0

    def test_matches_numpy(self, rng):
        v = rng.normal(3.0, 2.0, size=250)
        assert sd(v, 0, 250) == pytest.approx(np.std(v, ddof=1))

    def test_two_values(self):
        assert sd(np.array([1.0, 3.0]), 0, 2) == pytest.approx(math.sqrt(2.0))


class TestStandardErrors:
    """Test binomial and Poisson standard errors"""

    def test_sebinomial_binary(self):
        v = np.array([0.0, 1.0, 1.0, 0.0, 1.0])
        assert sebinomial(v, 0, 5) == pytest.approx(math.sqrt(0.6 * 0.4 / 5))

    def test_sebinomial_non_binary_is_missing(self):
        assert sebinomial(np.array([0.0, 2.0, 1.0]), 0, 3) == MISSING

    def test_sebinomial_all_ones(self):
        assert sebinomial(np.ones(4), 0, 4) == 0.0

    def test_sebinomial_fraction_is_missing(self):
        assert sebinomial(np.array([0.0, 0.5, 1.0]), 0, 3) == MISSING

    def test_sepoisson_counts(self):
        assert sepoisson(np.array([1.0, 2.0, 3.0]), 0, 3) == pytest.approx(math.sqrt(6) / 3)

    @pytest.mark.parametrize(
        ("values", "count"),
        [([0.4, 0.4], 1), ([0.2, 0.2], 0), ([1.25, 1.25], 3), ([0.25, 0.25], 1)],
    )
    def test_sepoisson_rounds_sum_half_up(self, values, count):
        v = np.array(values)
        assert sepoisson(v, 0, v.size) == pytest.approx(math.sqrt(count) / v.size)

    def test_sepoisson_negative_is_missing(self):
        assert sepoisson(np.array([1.0, -0.5, 2.0]), 0, 3) == MISSING

    @pytest.mark.parametrize("values", [[1e308, 1e308], [1.0, float("nan")]])
    def test_sepoisson_non_finite_sum_is_missing(self, values):
        assert sepoisson(np.array(values), 0, 2) == MISSING

    def test_sepoisson_large_finite_sum(self):
        v = np.array([1e300, 1e300])
        assert sepoisson(v, 0, 2) == pytest.approx(math.sqrt(2e300) / 2)

    def test_custom_sentinel(self):
        ctx = StatsContext(missing=-999.0)
        assert sebinomial(np.array([0.0, 2.0]), 0, 2, ctx) == -999.0
        assert sepoisson(np.array([-1.0, 2.0]), 0, 2, {"missing": -999.0}) == -999.0


class TestMoments:
    """Test population skewness and kurtosis"""

    @staticmethod
    def _moments(x):
        d = x - x.mean()
        return np.mean(d**2), np.mean(d**3), np.mean(d**4)

    def test_skewness_population_moments(self, rng):
        v = rng.exponential(size=80)
        m2, m3, _ = self._moments(v)
        assert skewness(v, 0, 80) == pytest.approx(m3 / m2**1.5)

    def test_kurtosis_population_moments(self, rng):
        v = rng.normal(size=80)
        m2, _, m4 = self._moments(v)
        assert kurtosis(v, 0, 80) == pytest.approx(m4 / m2**2)

    def test_symmetric_sample(self):
        v = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        assert skewness(v, 0, 5) == pytest.approx(0.0, abs=1e-12)
        assert kurtosis(v, 0, 5) == pytest.approx(1.7)

    @pytest.mark.parametrize("fn", [skewness, kurtosis])
    @pytest.mark.parametrize("n", [1, 2, 10])
    def test_constant_range_is_missing(self, fn, n):
        result = fn(np.full(n, 4.0), 0, n)
        assert result == MISSING
        assert math.isfinite(result)

    def test_right_skew_is_positive(self):
        assert skewness(np.array([1.0, 1.0, 1.0, 10.0]), 0, 4) > 0

    @pytest.mark.parametrize("fn", [skewness, kurtosis])
    def test_near_constant_range_is_not_missing(self, fn):
        v = np.array([1e6, 1e6, np.nextafter(1e6, 2e6)])
        result = fn(v, 0, 3)
        assert result != MISSING
        assert math.isfinite(result)
        assert result > 0

    def test_nan_range_is_missing(self):
        v = np.array([1.0, float("nan"), 2.0])
        assert skewness(v, 0, 3) == MISSING
        assert kurtosis(v, 0, 3) == MISSING


class TestStrictMode:
    """Test caller precondition checks"""

    @pytest.mark.parametrize(
        "fn",
        [total, mean, sd, minimum, maximum, semean, sebinomial, sepoisson, skewness, kurtosis, median, iqr],
    )
    def test_empty_range_raises(self, example_vector, strict_ctx, fn):
        with pytest.raises(ValueError, match="empty"):
            fn(example_vector, 2, 2, strict_ctx)

    def test_out_of_bounds_raises(self, example_vector, strict_ctx):
        with pytest.raises(ValueError, match="outside"):
            total(example_vector, 0, 10, strict_ctx)

    def test_non_integer_bounds_raise(self, example_vector, strict_ctx):
        with pytest.raises(ValueError, match="integers"):
            mean(example_vector, 0.0, 5, strict_ctx)

    def test_numpy_integer_bounds_accepted(self, example_vector, strict_ctx):
        assert total(example_vector, np.int64(0), np.int64(5), strict_ctx) == 22.0
