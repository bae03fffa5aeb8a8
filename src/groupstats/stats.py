r"""
groupstats.stats
================
Per-group descriptive statistics over a ``[start, end)`` range.

Every function has the signature ``fn(v, start, end, ctx=None) -> float`` so
it can be registered with :class:`~groupstats.stats_engine.FnMetric` and the
dispatcher. Statistics that are undefined for a given input return
:attr:`StatsContext.missing` rather than raising.

Common reductions include :func:`total`, :func:`mean`, :func:`sd`,
:func:`minimum` and :func:`maximum`; standard errors :func:`semean`,
:func:`sebinomial` and :func:`sepoisson`; and the population moment ratios
:func:`skewness` and :func:`kurtosis`. :func:`median`, :func:`iqr` and
:func:`quantile` are re-exported from :mod:`groupstats.quantile`.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np
from scipy.stats import moment

from .context import StatsContext, _ensure_ctx
from .quantile import iqr, median, percentiles, quantile
from .utils import all_same, check_range

__all__ = [
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
    "median",
    "iqr",
    "quantile",
    "percentiles",
]


def _prepare(v: Sequence[float], start: int, end: int, ctx: Any) -> StatsContext:
    ctx = _ensure_ctx(ctx)
    if ctx.strict:
        check_range(v, start, end)
    return ctx


def _values(v: Sequence[float], start: int, end: int) -> np.ndarray:
    return np.asarray(v[start:end], dtype=float)


def total(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Sum :math:`\sum_i x_i` over the range.

    Examples
    --------
    >>> total([3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    22.0
    """
    _prepare(v, start, end, ctx)
    return float(np.sum(_values(v, start, end)))


def mean(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Sample mean :math:`\bar X = \frac{1}{N}\sum_i x_i`.

    Examples
    --------
    >>> mean([3.0, 7.0, 1.0, 9.0, 2.0], 0, 5)
    4.4
    """
    _prepare(v, start, end, ctx)
    return float(np.sum(_values(v, start, end))) / (end - start)


def sd(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Sample standard deviation with Bessel correction.

    Parameters
    ----------
    v : sequence of float
        Observation vector.
    start, end : int
        Half-open group range.
    ctx : StatsContext or Mapping, optional
        Uses :attr:`StatsContext.strict`.

    Returns
    -------
    float
        :math:`s = \sqrt{\frac{1}{N-1}\sum_i (x_i-\bar X)^2}`; exactly ``0.0``
        when every value in the range is identical (including :math:`N = 1`).
    """
    _prepare(v, start, end, ctx)
    if all_same(v, start, end):
        return 0.0
    return float(np.std(_values(v, start, end), ddof=1))


def minimum(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    """Smallest value in the range."""
    _prepare(v, start, end, ctx)
    return float(np.min(_values(v, start, end)))


def maximum(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    """Largest value in the range."""
    _prepare(v, start, end, ctx)
    return float(np.max(_values(v, start, end)))


def semean(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Standard error of the mean, :math:`s / \sqrt{N}`.
    """
    return sd(v, start, end, ctx) / math.sqrt(end - start)


def sebinomial(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Binomial standard error :math:`\sqrt{p(1-p)/N}` with :math:`p = \bar X`.

    Returns
    -------
    float
        :attr:`StatsContext.missing` unless every value is exactly 0 or 1.

    Examples
    --------
    >>> round(sebinomial([0.0, 1.0, 1.0, 0.0, 1.0], 0, 5), 6)
    0.219089
    """
    ctx = _prepare(v, start, end, ctx)
    x = _values(v, start, end)
    if not np.all((x == 0) | (x == 1)):
        return ctx.missing
    p = float(np.sum(x)) / x.size
    return math.sqrt(p * (1 - p) / x.size)


def sepoisson(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Poisson standard error, :math:`\sqrt{\operatorname{round}(\sum_i x_i)} / N`.

    Returns
    -------
    float
        :attr:`StatsContext.missing` if any value is negative or the sum is
        not finite.

    Notes
    -----
    The sum is rounded half up to a count before the square root, and the
    result is divided by :math:`N` rather than :math:`\sqrt{N}`.
    """
    ctx = _prepare(v, start, end, ctx)
    x = _values(v, start, end)
    s = float(np.sum(x))
    if np.any(x < 0) or not math.isfinite(s):
        return ctx.missing
    count = math.floor(s + 0.5)
    return math.sqrt(count) / x.size


def _moment_ratio(v: Sequence[float], start: int, end: int, order: int, power: float, missing: float) -> float:
    # Only m2 == 0 is degenerate; near-constant ranges still get a ratio.
    x = _values(v, start, end)
    m2 = float(moment(x, 2))
    if not m2 > 0:
        return missing
    result = float(moment(x, order)) / m2**power
    return result if math.isfinite(result) else missing


def skewness(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Population skewness :math:`m_3 / m_2^{3/2}`.

    Uses central moments with divisor :math:`N` (no small-sample correction).

    Returns
    -------
    float
        :attr:`StatsContext.missing` when all values are identical or the
        second moment is zero.

    Notes
    -----
    Central moments come from :func:`scipy.stats.moment`.

    Examples
    --------
    >>> skewness([1.0, 2.0, 3.0], 0, 3)
    0.0
    """
    ctx = _prepare(v, start, end, ctx)
    if all_same(v, start, end):
        return ctx.missing
    return _moment_ratio(v, start, end, 3, 1.5, ctx.missing)


def kurtosis(v: Sequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Population (non-excess) kurtosis :math:`m_4 / m_2^2`.

    Returns
    -------
    float
        :attr:`StatsContext.missing` when all values are identical or
        :math:`m_2 = 0`.

    Examples
    --------
    >>> kurtosis([0.0, 1.0], 0, 2)
    1.0
    """
    ctx = _prepare(v, start, end, ctx)
    if all_same(v, start, end):
        return ctx.missing
    return _moment_ratio(v, start, end, 4, 2.0, ctx.missing)
