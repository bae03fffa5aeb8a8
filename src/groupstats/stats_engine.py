r"""
groupstats.stats_engine
=======================
Evaluate several statistics over one group, or over every group of a vector.

This module defines:

- :class:`FnMetric`: a frozen adapter that names a statistic function.
- :class:`StatsEngine`: an orchestrator that evaluates metrics and selectors.
- :func:`build_default_engine` and :data:`DEFAULT_ENGINE`.

Selectors that are not registered metrics are resolved through
:mod:`groupstats.dispatch`, so percentile names (``"90"``) and numeric codes
(``-3``) can be mixed with metric names in ``select``.

See Also
--------
groupstats.utils.group_ranges
    Converts group boundaries into the ``(start, end)`` pairs used by
    :meth:`StatsEngine.compute_groups`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Mapping,
    MutableSequence,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    Union,
)

from . import stats
from .context import StatsContext, _ensure_ctx
from .dispatch import STAT_FUNCTIONS, ExternalFn, Statistic, dispatch_by_code, dispatch_by_name

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


Selector = Union[str, int, float]


class Metric(Protocol):
    r"""
    Protocol for metric callables used by :class:`StatsEngine`.

    ``metric(v, start, end, ctx) -> Any``

    Attributes
    ----------
    name : str
        Key under which the metric's value is returned.
    """

    name: str

    def __call__(self, v: MutableSequence[float], start: int, end: int, ctx: StatsContext, /) -> Any: ...


T = TypeVar("T")


@dataclass(frozen=True)
class FnMetric(Generic[T]):
    r"""
    Lightweight adapter that binds a ``name`` to a statistic function.

    Parameters
    ----------
    name : str
        Key under which the result is stored by :meth:`StatsEngine.compute`.
    fn : callable
        Function with signature ``fn(v, start, end, ctx) -> T``.
    doc : str, optional
        Short description.

    Examples
    --------
    >>> m = FnMetric("mean", stats.mean)
    >>> m([1.0, 2.0, 3.0], 0, 3, StatsContext())
    2.0
    """

    name: str
    fn: Callable[[MutableSequence[float], int, int, StatsContext], T]
    doc: str = ""

    def __call__(self, v: MutableSequence[float], start: int, end: int, ctx: StatsContext) -> T:
        return self.fn(v, start, end, ctx)


class StatsEngine:
    r"""
    Orchestrator that evaluates a set of statistics over a group's range.

    Parameters
    ----------
    metrics : iterable of Metric
        Callables with a ``name`` and signature ``metric(v, start, end, ctx)``.
    external : mapping, optional
        Hooks for caller-computed statistics, forwarded to the dispatcher.

    Notes
    -----
    Metrics are evaluated in order against the *same* range. Percentile metrics
    reorder that range unless the context sets ``inplace=False``; order-free
    reductions are unaffected.

    Examples
    --------
    >>> eng = StatsEngine([FnMetric("mean", stats.mean), FnMetric("sd", stats.sd)])
    >>> eng.compute([1.0, 2.0, 3.0], 0, 3)
    {'mean': 2.0, 'sd': 1.0}
    """

    def __init__(
        self,
        metrics: Iterable[Metric],
        external: Optional[Mapping[Statistic, ExternalFn]] = None,
    ):
        self._metrics = list(metrics)
        self._by_name = {m.name: m for m in self._metrics}
        self._external = dict(external) if external else None

    def available(self) -> tuple[str, ...]:
        return tuple(m.name for m in self._metrics)

    def _evaluate(
        self, selector: Selector, v: MutableSequence[float], start: int, end: int, ctx: StatsContext
    ) -> Any:
        if isinstance(selector, str):
            metric = self._by_name.get(selector)
            if metric is not None:
                return metric(v, start, end, ctx)
            return dispatch_by_name(selector, v, start, end, ctx, self._external)
        return dispatch_by_code(selector, v, start, end, ctx, self._external)

    def compute(
        self,
        v: MutableSequence[float],
        start: int = 0,
        end: Optional[int] = None,
        ctx: Optional[StatsContext] = None,
        select: Sequence[Selector] | None = None,
        **kwargs: Any,
    ) -> dict[Selector, Any]:
        r"""
        Evaluate registered metrics, or the given selectors, on ``v[start:end]``.

        Parameters
        ----------
        v : mutable sequence of float
            Observation vector.
        start : int, default 0
            First index of the group.
        end : int, optional
            One past the last index; defaults to ``len(v)``.
        ctx : StatsContext, optional
            Context parameters. If None, one is built from **kwargs.
        select : sequence of str or number, optional
            Selectors to evaluate, in order: metric names, statistic names,
            percentile strings or numeric codes. Defaults to every registered
            metric.
        **kwargs :
            Used to build a StatsContext if ctx is None
            (``missing``, ``strict``, ``inplace``, ``percentiles``).

        Returns
        -------
        dict
            Mapping from selector to computed value.

        Raises
        ------
        ValueError
            Propagated from strict-mode validation.
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else StatsContext(**kwargs)
        if end is None:
            end = len(v)

        selectors: Sequence[Selector] = self.available() if select is None else select

        out: dict[Selector, Any] = {}
        for sel in selectors:
            try:
                out[sel] = self._evaluate(sel, v, start, end, ctx)
            except ValueError as e:
                logger.debug(f"Selector {sel!r} rejected: {e}")
                raise
            except Exception:
                logger.exception(f"Error computing statistic {sel!r}")
                continue

        return out

    def compute_groups(
        self,
        v: MutableSequence[float],
        bounds: Iterable[tuple[int, int]],
        ctx: Optional[StatsContext] = None,
        select: Sequence[Selector] | None = None,
        **kwargs: Any,
    ) -> list[dict[Selector, Any]]:
        r"""
        Run :meth:`compute` for each ``(start, end)`` pair, sequentially.

        Parameters
        ----------
        v : mutable sequence of float
            Observation vector holding every group contiguously.
        bounds : iterable of tuple[int, int]
            Group ranges, e.g. from :func:`~groupstats.utils.group_ranges`.
        ctx, select, **kwargs :
            As in :meth:`compute`.

        Returns
        -------
        list of dict
            One result mapping per group, in the order of ``bounds``.

        Examples
        --------
        >>> from groupstats.utils import group_ranges
        >>> eng = build_default_engine()
        >>> eng.compute_groups([1.0, 2.0, 5.0, 5.0], group_ranges([0, 2, 4]), select=["sum"])
        [{'sum': 3.0}, {'sum': 10.0}]
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else StatsContext(**kwargs)
        return [self.compute(v, start, end, ctx=ctx, select=select) for start, end in bounds]


def _summary(fn: Callable[..., Any]) -> str:
    lines = (fn.__doc__ or "").strip().splitlines()
    return lines[0] if lines else ""


def build_default_engine(
    include_percentiles: bool = True,
    external: Optional[Mapping[Statistic, ExternalFn]] = None,
) -> StatsEngine:
    r"""
    Construct a :class:`StatsEngine` with every statistic the package computes.

    Parameters
    ----------
    include_percentiles : bool, default True
        Include :func:`~groupstats.quantile.percentiles` under ``"percentiles"``.
    external : mapping, optional
        Hooks for caller-computed statistics.

    Returns
    -------
    StatsEngine
    """
    metrics: list[Metric] = [
        FnMetric[float](stat.value, fn, _summary(fn)) for stat, fn in STAT_FUNCTIONS.items()
    ]
    if include_percentiles:
        metrics.append(
            FnMetric[dict[float, float]]("percentiles", stats.percentiles, "Percentiles from ctx.percentiles")
        )
    return StatsEngine(metrics, external=external)


# Build a default engine at import time
DEFAULT_ENGINE = build_default_engine()

__all__ = [
    "Metric",
    "FnMetric",
    "StatsEngine",
    "build_default_engine",
    "DEFAULT_ENGINE",
]
