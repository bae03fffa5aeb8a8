r"""
groupstats.quantile
===================
Percentiles of a group's range, built on :func:`~groupstats.selection.select`.

For a range of :math:`N \ge 3` observations and a percentile :math:`q`, the
exact position is

.. math::

   q_\text{dbl} = \frac{qN}{100}
   \quad\text{or}\quad
   q_\text{dbl} = q \cdot \frac{N}{100} \;\;\text{when } 100 \mid N,

with :math:`q_{th} = \lfloor q_\text{dbl} \rfloor` and :math:`q_{foo}` its
nearest integer. If :math:`q_{foo}` maps back onto :math:`q` exactly, the
percentile sits on a rank boundary and the two adjacent order statistics are
averaged; otherwise the lower rank :math:`q_{th}` is used. Positions at or past
the last rank resolve against the maximum, and :math:`q_{th} = 0` resolves to
the minimum.

Every function here may reorder the range in place (see
:attr:`~groupstats.context.StatsContext.inplace`).
"""

from __future__ import annotations

import math
from typing import Any, MutableSequence, NamedTuple

import numpy as np

from .context import StatsContext, _ensure_ctx
from .selection import select
from .utils import check_range

__all__ = [
    "QuantilePosition",
    "quantile_position",
    "quantile",
    "median",
    "iqr",
    "percentiles",
]


class QuantilePosition(NamedTuple):
    r"""
    Rank arithmetic for one percentile of an :math:`N`-element range.

    Attributes
    ----------
    qth : int
        :math:`\lfloor q_\text{dbl} \rfloor`, the lower rank.
    qfoo : int
        :math:`q_\text{dbl}` rounded half away from zero.
    rfoo : bool
        ``True`` when ``qfoo`` scaled back reproduces ``q`` exactly, i.e. the
        result is the average of ranks ``qfoo - 1`` and ``qfoo``.
    dmax : bool
        ``True`` when the rank in use (``qfoo`` if ``rfoo``, else ``qth``)
        reaches the last position ``N - 1``; the maximum stands in for it.
    """

    qth: int
    qfoo: int
    rfoo: bool
    dmax: bool


def _round_half_away(x: float) -> int:
    f = math.floor(abs(x))
    r = f + 1 if abs(x) - f >= 0.5 else f
    return int(math.copysign(r, x))


def quantile_position(n: int, q: float) -> QuantilePosition:
    r"""
    Compute the rank positions used by :func:`quantile`.

    Parameters
    ----------
    n : int
        Group size, :math:`N \ge 3`.
    q : float
        Percentile in :math:`(0, 100]`.

    Returns
    -------
    QuantilePosition

    Notes
    -----
    Sizes that are exact multiples of 100 scale by ``n // 100`` instead of
    dividing by 100, which keeps round group sizes free of representation
    error. The exact equality in ``rfoo`` is intentional.

    Examples
    --------
    >>> quantile_position(4, 50)
    QuantilePosition(qth=2, qfoo=2, rfoo=True, dmax=False)
    >>> quantile_position(5, 50)
    QuantilePosition(qth=2, qfoo=3, rfoo=False, dmax=False)
    """
    if n % 100:
        qdbl = q * n / 100
        qth = math.floor(qdbl)
        qfoo = _round_half_away(qdbl)
        rfoo = (qfoo * 100 / n) == q
    else:
        ndiv = n // 100
        qdbl = q * ndiv
        qth = math.floor(qdbl)
        qfoo = _round_half_away(qdbl)
        rfoo = (qfoo / ndiv) == q

    # q == 100 puts qfoo at n; >= keeps it on the maximum
    dmax = qfoo >= n - 1 if rfoo else qth >= n - 1
    return QuantilePosition(qth, qfoo, rfoo, dmax)


def _scratch(
    v: MutableSequence[float], start: int, end: int, ctx: StatsContext
) -> tuple[MutableSequence[float], int, int]:
    # Copy the range when the caller's order has to survive selection.
    if ctx.inplace:
        return v, start, end
    buf = np.array(v[start:end], dtype=float)
    return buf, 0, buf.size


def _quantile(v: MutableSequence[float], start: int, end: int, q: float) -> float:
    n = end - start

    if n == 1:
        return float(v[start])

    if n == 2:
        a, b = v[start], v[end - 1]
        if q > 50:
            return float(max(a, b))
        if q < 50:
            return float(min(a, b))
        return float((a + b) / 2)

    pos = quantile_position(n, q)

    # rank 0 is not an order statistic; it is the minimum
    if pos.qth == 0:
        return float(np.min(v[start:end]))

    if pos.rfoo:
        if pos.dmax:
            hi = float(np.max(v[start:end]))
        else:
            hi = select(v, start, end, pos.qfoo)
        return (hi + select(v, start, end, pos.qfoo - 1)) / 2

    if pos.dmax:
        return float(np.max(v[start:end]))
    return select(v, start, end, pos.qth)


def quantile(v: MutableSequence[float], start: int, end: int, q: float, ctx: Any = None) -> float:
    r"""
    The ``q``-th percentile of ``v[start:end]``.

    Parameters
    ----------
    v : mutable sequence of float
        Observation vector. Reordered within ``[start, end)`` unless
        ``ctx.inplace`` is False.
    start, end : int
        Half-open group range, ``end - start >= 1``.
    q : float
        Percentile in :math:`(0, 100]` (not a fraction).
    ctx : StatsContext or Mapping, optional
        Uses :attr:`~StatsContext.strict` and :attr:`~StatsContext.inplace`.

    Returns
    -------
    float

    Raises
    ------
    ValueError
        In strict mode, for an invalid range or ``q`` outside :math:`(0, 100]`.

    Notes
    -----
    Two observations: the maximum above the median, the minimum below it and
    their average at it. One observation: that observation.

    Examples
    --------
    >>> import numpy as np
    >>> quantile(np.array([3.0, 7.0, 1.0, 9.0, 2.0]), 0, 5, 50)
    3.0
    >>> quantile(np.array([1.0, 2.0, 3.0, 4.0]), 0, 4, 50)
    2.5
    """
    ctx = _ensure_ctx(ctx)
    if ctx.strict:
        check_range(v, start, end)
        if not 0 < q <= 100:
            raise ValueError(f"percentile must be in (0,100], got {q}")
    v, start, end = _scratch(v, start, end, ctx)
    return _quantile(v, start, end, q)


def median(v: MutableSequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Median of ``v[start:end]``; the 50th percentile under :func:`quantile`.

    Examples
    --------
    >>> median([4.0, 1.0, 3.0, 2.0], 0, 4)
    2.5
    """
    return quantile(v, start, end, 50, ctx)


def iqr(v: MutableSequence[float], start: int, end: int, ctx: Any = None) -> float:
    r"""
    Inter-quartile range :math:`Q_{75} - Q_{25}` of ``v[start:end]``.

    Both quartiles are taken from the same buffer, so the second selection
    starts from the partial order left by the first.
    """
    ctx = _ensure_ctx(ctx)
    if ctx.strict:
        check_range(v, start, end)
    v, start, end = _scratch(v, start, end, ctx)
    return _quantile(v, start, end, 75) - _quantile(v, start, end, 25)


def percentiles(v: MutableSequence[float], start: int, end: int, ctx: Any = None) -> dict[float, float]:
    r"""
    Every percentile listed in :attr:`StatsContext.percentiles`.

    Parameters
    ----------
    v : mutable sequence of float
        Observation vector.
    start, end : int
        Half-open group range.
    ctx : StatsContext or Mapping, optional
        Uses :attr:`~StatsContext.percentiles`, :attr:`~StatsContext.strict`
        and :attr:`~StatsContext.inplace`.

    Returns
    -------
    dict[float, float]
        Mapping :math:`p \mapsto Q_p`, in the order requested.

    Examples
    --------
    >>> percentiles([1.0, 2.0, 3.0, 4.0], 0, 4, {"percentiles": (25, 50)})
    {25: 1.5, 50: 2.5}
    """
    ctx = _ensure_ctx(ctx)
    if ctx.strict:
        check_range(v, start, end)
    v, start, end = _scratch(v, start, end, ctx)
    return {p: _quantile(v, start, end, p) for p in ctx.percentiles}
