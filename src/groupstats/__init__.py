"""groupstats package public API."""

from .context import StatsContext
from .dispatch import (
    CALLER_STATISTICS,
    STAT_CODES,
    Statistic,
    code_of,
    dispatch_by_code,
    dispatch_by_name,
    resolve_code,
)
from .quantile import iqr, median, percentiles, quantile, quantile_position
from .selection import select
from .stats import (
    kurtosis,
    maximum,
    mean,
    minimum,
    sd,
    sebinomial,
    semean,
    sepoisson,
    skewness,
    total,
)
from .stats_engine import DEFAULT_ENGINE, FnMetric, StatsEngine, build_default_engine
from .utils import MISSING, group_ranges, is_missing

__all__ = [
    "MISSING",
    "is_missing",
    "group_ranges",
    "StatsContext",
    "select",
    "quantile",
    "quantile_position",
    "median",
    "iqr",
    "percentiles",
    "total",
    "mean",
    "sd",
    "minimum",
    "maximum",
    "semean",
    "sebinomial",
    "sepoisson",
    "skewness",
    "kurtosis",
    "Statistic",
    "STAT_CODES",
    "CALLER_STATISTICS",
    "code_of",
    "resolve_code",
    "dispatch_by_name",
    "dispatch_by_code",
    "FnMetric",
    "StatsEngine",
    "build_default_engine",
    "DEFAULT_ENGINE",
]

__version__ = "0.1.0"
