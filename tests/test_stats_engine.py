import numpy as np

from groupstats.stats import mean, sd
from groupstats.stats_engine import DEFAULT_ENGINE, FnMetric, StatsEngine, build_default_engine
from groupstats.utils import group_ranges


class TestStatsEngine:
    """Test StatsEngine class"""

    def test_engine_creation(self):
        """Test creating a stats engine with metrics"""
        metrics = [
            FnMetric("mean", mean),
            FnMetric("sd", sd),
        ]
        engine = StatsEngine(metrics)
        assert len(engine._metrics) == 2

    def test_engine_compute(self, example_vector, ctx_basic):
        """Test computing all metrics"""
        engine = StatsEngine([FnMetric("mean", mean), FnMetric("sd", sd)])
        result = engine.compute(example_vector, 0, 5, **ctx_basic)
        assert set(result) == {"mean", "sd"}
        assert abs(result["mean"] - 4.4) < 1e-12

    def test_default_engine_build(self):
        """Test building default engine"""
        engine = build_default_engine()
        assert engine is not None
        assert len(engine._metrics) > 0
        assert "percentiles" in engine.available()

    def test_default_engine_compute(self, example_vector, ctx_basic):
        """Test default engine computes all metrics"""
        result = build_default_engine().compute(example_vector, **ctx_basic)
        assert result["sum"] == 22.0
        assert result["min"] == 1.0
        assert result["max"] == 9.0
        assert result["median"] == 3.0
        assert result["iqr"] == 5.0
        assert result["percentiles"][50] == 3.0

    def test_engine_without_percentiles(self):
        """Test building engine without the percentiles metric"""
        engine = build_default_engine(include_percentiles=False)
        result = engine.compute(np.array([1.0, 2.0, 3.0]))
        assert "percentiles" not in result
        assert result["mean"] == 2.0

    def test_default_engine_is_prebuilt(self):
        assert DEFAULT_ENGINE.available() == build_default_engine().available()

    def test_compute_groups(self):
        v = np.array([3.0, 7.0, 1.0, 9.0, 2.0, 4.0, 4.0, 10.0])
        out = DEFAULT_ENGINE.compute_groups(v, group_ranges([0, 5, 8]), select=["sum", "median", "-4"])
        assert out == [
            {"sum": 22.0, "median": 3.0, "-4": 0.0},
            {"sum": 18.0, "median": 4.0, "-4": 0.0},
        ]
