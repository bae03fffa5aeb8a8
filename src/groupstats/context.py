r"""
groupstats.context
==================
Configuration object shared by every statistic in the package.

:class:`StatsContext` carries the missing-value sentinel, strictness and
in-place policy. Functions accept a context, a plain ``dict``, or ``None`` and
normalize it with :func:`_ensure_ctx`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .utils import MISSING

__all__ = ["StatsContext"]


@dataclass(slots=True)
class StatsContext:
    r"""
    Shared, explicit configuration for per-group statistics.

    Attributes
    ----------
    missing : float, default :data:`~groupstats.utils.MISSING`
        Sentinel returned when a statistic is undefined for the input
        (non-binary values for :func:`~groupstats.stats.sebinomial`, a constant
        range for :func:`~groupstats.stats.skewness`, ...).
    strict : bool, default False
        If ``True``, out-of-range indices, empty ranges, percentiles outside
        :math:`(0, 100]` and malformed selectors raise :class:`ValueError`
        instead of being treated as caller preconditions.
    inplace : bool, default True
        If ``True``, quantile computations reorder the caller's range. If
        ``False``, they run on a scratch copy and leave the caller's order intact.
    percentiles : tuple of float, default ``(5, 25, 50, 75, 95)``
        Percentiles evaluated by :func:`~groupstats.quantile.percentiles`.

    Notes
    -----
    The context is immutable by convention; prefer :meth:`with_overrides`.

    Examples
    --------
    >>> ctx = StatsContext(strict=True)
    >>> ctx.with_overrides(inplace=False).inplace
    False
    """

    missing: float = MISSING
    strict: bool = False
    inplace: bool = True
    percentiles: tuple[float, ...] = (5, 25, 50, 75, 95)

    def with_overrides(self, **changes) -> "StatsContext":
        r"""
        Return a shallow copy with selected fields replaced.

        Parameters
        ----------
        **changes :
            Field overrides passed to :func:`dataclasses.replace`.

        Returns
        -------
        StatsContext
        """
        return replace(self, **changes)

    def __post_init__(self) -> None:
        r"""
        Validate field ranges.

        Raises
        ------
        ValueError
            If a percentile is outside :math:`(0, 100]` or the sentinel is NaN.
        """
        if any(p <= 0 or p > 100 for p in self.percentiles):
            raise ValueError("percentiles must be in (0,100]")
        if self.missing != self.missing:
            raise ValueError("missing must not be NaN")


def _ensure_ctx(ctx: Any) -> StatsContext:
    r"""
    Normalize arbitrary context inputs into a :class:`StatsContext`.

    Parameters
    ----------
    ctx : Any
        A :class:`StatsContext`, mapping, object with attributes, or ``None``.

    Returns
    -------
    StatsContext

    Raises
    ------
    TypeError
        If ``ctx`` cannot be interpreted as configuration data.
    """
    if isinstance(ctx, StatsContext):
        return ctx

    if ctx is None:
        return StatsContext()

    if isinstance(ctx, dict):
        return StatsContext(**ctx)

    # Fallback: try to read attributes
    try:
        data = dict(vars(ctx))
    except TypeError:
        raise TypeError("ctx must be a StatsContext, dict, None, or an object with attributes")
    return StatsContext(**data)
