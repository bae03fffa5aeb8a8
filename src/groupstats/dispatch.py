r"""
groupstats.dispatch
===================
Resolve statistic selectors (names or numeric codes) to statistics.

Fixed statistics are listed once in :class:`Statistic` and given a code in
:data:`STAT_CODES`. Negative codes name fixed statistics so that any positive
code can stand for itself as a percentile; ``50`` is both the median's code and
the 50th percentile. The reverse table is built at import time and must be a
bijection.

Some identifiers (``count``, ``percent``, ``first``, ``firstnm``, ``last``,
``lastnm``) are computed by the caller, not by this package. They are accepted
by both dispatch paths and forwarded to a caller-supplied hook when one is
given; otherwise :attr:`StatsContext.missing` is returned.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping, MutableSequence, Optional, Union

from . import stats
from .context import _ensure_ctx
from .utils import parse_percentile

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


StatFn = Callable[..., float]
ExternalFn = Callable[[MutableSequence[float], int, int], float]


class Statistic(str, Enum):
    r"""
    Fixed statistic identifiers, valued by their selector name.

    Attributes
    ----------
    sum, mean, sd, max, min, median, iqr : str
        Reductions computed by :mod:`groupstats.stats`.
    semean, sebinomial, sepoisson : str
        Standard errors (normal, binomial, Poisson).
    skewness, kurtosis : str
        Population moment ratios.
    rawsum : str
        Sum; the caller distinguishes it from ``sum`` by how it treats weights.
    count, percent, first, firstnm, last, lastnm : str
        Computed by the caller; see :data:`CALLER_STATISTICS`.
    """

    sum = "sum"
    mean = "mean"
    sd = "sd"
    max = "max"
    min = "min"
    count = "count"
    percent = "percent"
    median = "median"
    iqr = "iqr"
    first = "first"
    firstnm = "firstnm"
    last = "last"
    lastnm = "lastnm"
    semean = "semean"
    sebinomial = "sebinomial"
    sepoisson = "sepoisson"
    skewness = "skewness"
    kurtosis = "kurtosis"
    rawsum = "rawsum"


STAT_CODES: dict[Statistic, float] = {
    Statistic.sum: -1,
    Statistic.mean: -2,
    Statistic.sd: -3,
    Statistic.max: -4,
    Statistic.min: -5,
    Statistic.count: -6,
    Statistic.percent: -7,
    Statistic.median: 50,
    Statistic.iqr: -9,
    Statistic.first: -10,
    Statistic.firstnm: -11,
    Statistic.last: -12,
    Statistic.lastnm: -13,
    Statistic.semean: -15,
    Statistic.sebinomial: -16,
    Statistic.sepoisson: -17,
    Statistic.skewness: -19,
    Statistic.kurtosis: -20,
    Statistic.rawsum: -21,
}

CALLER_STATISTICS: frozenset[Statistic] = frozenset(
    {
        Statistic.count,
        Statistic.percent,
        Statistic.first,
        Statistic.firstnm,
        Statistic.last,
        Statistic.lastnm,
    }
)

STAT_FUNCTIONS: dict[Statistic, StatFn] = {
    Statistic.sum: stats.total,
    Statistic.mean: stats.mean,
    Statistic.sd: stats.sd,
    Statistic.max: stats.maximum,
    Statistic.min: stats.minimum,
    Statistic.median: stats.median,
    Statistic.iqr: stats.iqr,
    Statistic.semean: stats.semean,
    Statistic.sebinomial: stats.sebinomial,
    Statistic.sepoisson: stats.sepoisson,
    Statistic.skewness: stats.skewness,
    Statistic.kurtosis: stats.kurtosis,
    Statistic.rawsum: stats.total,
}


def _build_code_table(codes: Mapping[Statistic, float]) -> dict[float, Statistic]:
    r"""
    Invert :data:`STAT_CODES`.

    Raises
    ------
    RuntimeError
        If two statistics share a code, or a statistic has no code.
    """
    table: dict[float, Statistic] = {}
    for stat, code in codes.items():
        if code in table:
            raise RuntimeError(f"code {code} is assigned to both {table[code].value} and {stat.value}")
        table[code] = stat
    missing = set(Statistic) - set(codes)
    if missing:
        raise RuntimeError(f"statistics without a code: {sorted(s.value for s in missing)}")
    return table


_CODE_TABLE = _build_code_table(STAT_CODES)

_unmapped = set(Statistic) - CALLER_STATISTICS - set(STAT_FUNCTIONS)
if _unmapped:
    raise RuntimeError(f"statistics without a function: {sorted(s.value for s in _unmapped)}")


def code_of(name: str) -> float:
    r"""
    Internal code for a selector name.

    Parameters
    ----------
    name : str
        A :class:`Statistic` value, or a percentile such as ``"90"``.

    Returns
    -------
    float
        The fixed statistic's code, else the parsed percentile if positive,
        else ``0``.

    Examples
    --------
    >>> code_of("sd")
    -3
    >>> code_of("median")
    50
    >>> code_of("97.5")
    97.5
    >>> code_of("nonsense")
    0
    """
    try:
        return STAT_CODES[Statistic(name)]
    except ValueError:
        q = parse_percentile(name)
        return q if q > 0 else 0


def resolve_code(code: float) -> Union[Statistic, float]:
    r"""
    Map a code to its :class:`Statistic`, or return it as a percentile.

    Examples
    --------
    >>> resolve_code(-2) is Statistic.mean
    True
    >>> resolve_code(90)
    90.0
    """
    stat = _CODE_TABLE.get(code)
    if stat is not None:
        return stat
    return float(code)


def _run(
    stat: Statistic,
    v: MutableSequence[float],
    start: int,
    end: int,
    ctx: Any,
    external: Optional[Mapping[Statistic, ExternalFn]],
) -> float:
    if stat in CALLER_STATISTICS:
        hook = external.get(stat) if external else None
        if hook is None:
            logger.debug(f"Statistic '{stat.value}' is computed by the caller; returning missing")
            return ctx.missing
        return float(hook(v, start, end))
    return STAT_FUNCTIONS[stat](v, start, end, ctx)


def dispatch_by_name(
    name: str,
    v: MutableSequence[float],
    start: int,
    end: int,
    ctx: Any = None,
    external: Optional[Mapping[Statistic, ExternalFn]] = None,
) -> float:
    r"""
    Evaluate the statistic called ``name`` on ``v[start:end]``.

    Parameters
    ----------
    name : str
        Case-sensitive :class:`Statistic` value, or a percentile string.
    v : mutable sequence of float
        Observation vector; may be reordered by percentile statistics.
    start, end : int
        Half-open group range.
    ctx : StatsContext or Mapping, optional
        Shared configuration.
    external : mapping, optional
        Hooks ``fn(v, start, end)`` for :data:`CALLER_STATISTICS`.

    Returns
    -------
    float
        The statistic; ``0.0`` for a name that is neither a statistic nor a
        positive number.

    Raises
    ------
    ValueError
        In strict mode, for a name that does not resolve.

    Examples
    --------
    >>> dispatch_by_name("sum", [3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    22.0
    >>> dispatch_by_name("80", [3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    8.0
    """
    ctx = _ensure_ctx(ctx)
    try:
        stat = Statistic(name)
    except ValueError:
        stat = None
    if stat is not None:
        return _run(stat, v, start, end, ctx, external)

    q = parse_percentile(name)
    if q > 0:
        logger.debug(f"Selector '{name}' parsed as percentile {q}")
        return stats.quantile(v, start, end, q, ctx)

    if ctx.strict:
        raise ValueError(f"Unknown statistic '{name}'")
    logger.debug(f"Selector '{name}' is not a statistic or a positive percentile; returning 0")
    return 0.0


def dispatch_by_code(
    code: float,
    v: MutableSequence[float],
    start: int,
    end: int,
    ctx: Any = None,
    external: Optional[Mapping[Statistic, ExternalFn]] = None,
) -> float:
    r"""
    Evaluate the statistic with internal ``code`` on ``v[start:end]``.

    Parameters
    ----------
    code : float
        A code from :data:`STAT_CODES`, or a positive percentile.
    v, start, end, ctx, external :
        As in :func:`dispatch_by_name`.

    Returns
    -------
    float
        The statistic; ``0.0`` for an unknown code that is not positive.

    Raises
    ------
    ValueError
        In strict mode, for an unknown non-positive code.

    Examples
    --------
    >>> dispatch_by_code(-5, [3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    1.0
    >>> dispatch_by_code(50, [3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    3.0
    """
    ctx = _ensure_ctx(ctx)
    target = resolve_code(code)
    if isinstance(target, Statistic):
        return _run(target, v, start, end, ctx, external)

    if target > 0:
        return stats.quantile(v, start, end, target, ctx)

    if ctx.strict:
        raise ValueError(f"Unknown statistic code {code}")
    logger.debug(f"Code {code} is not a statistic or a positive percentile; returning 0")
    return 0.0


__all__ = [
    "Statistic",
    "STAT_CODES",
    "STAT_FUNCTIONS",
    "CALLER_STATISTICS",
    "code_of",
    "resolve_code",
    "dispatch_by_name",
    "dispatch_by_code",
]
