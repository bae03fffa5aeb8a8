r"""
groupstats.selection
====================
In-place partial selection (quickselect) over a range of an observation vector.

:func:`select` moves the ``(k+1)``-th smallest value of ``v[left:right]`` to
position ``left + k`` without sorting the range. Elements before that position
end up ``<=`` it and elements after it ``>=`` it; nothing else about the order
is guaranteed.

Notes
-----
The range is partitioned three ways around a median-of-three pivot
(``< pivot``, ``== pivot``, ``> pivot``) with in-place swaps, and the loop
continues in whichever part contains the target. Ties collapse into the middle
block, so ranges with many repeated values finish early. Expected time is
:math:`O(N)`; auxiliary state is :math:`O(1)`.
"""

from __future__ import annotations

from typing import MutableSequence

from .utils import is_sorted_range

__all__ = ["select"]


def _median_of_three(a: float, b: float, c: float) -> float:
    if a < b:
        if b < c:
            return b
        return c if a < c else a
    if a < c:
        return a
    return c if b < c else b


def _partition3(v: MutableSequence[float], lo: int, hi: int, pivot: float) -> tuple[int, int]:
    r"""
    Three-way partition of ``v[lo:hi]`` around ``pivot``.

    Returns
    -------
    tuple of int
        ``(lt, gt)`` such that ``v[lo:lt] < pivot``, ``v[lt:gt] == pivot`` and
        ``v[gt:hi] > pivot``.
    """
    lt, i, gt = lo, lo, hi
    while i < gt:
        x = v[i]
        if x < pivot:
            v[lt], v[i] = v[i], v[lt]
            lt += 1
            i += 1
        elif x > pivot:
            gt -= 1
            v[gt], v[i] = v[i], v[gt]
        else:
            i += 1
    return lt, gt


def select(v: MutableSequence[float], left: int, right: int, k: int) -> float:
    r"""
    Return the :math:`(k+1)`-th smallest value of ``v[left:right]``.

    Parameters
    ----------
    v : mutable sequence of float
        Observation vector; reordered in place within ``[left, right)``.
    left, right : int
        Half-open range to select from.
    k : int
        Rank relative to ``left``; must satisfy ``0 <= k < right - left``.
        The bound is not checked.

    Returns
    -------
    float
        The value left at ``v[left + k]``.

    Examples
    --------
    >>> import numpy as np
    >>> x = np.array([3.0, 7.0, 1.0, 9.0, 2.0])
    >>> select(x, 0, 5, 2)
    3.0
    >>> bool(x[:2].max() <= x[2] <= x[3:].min())
    True
    """
    target = left + k
    if is_sorted_range(v, left, right):
        return float(v[target])

    lo, hi = left, right
    while hi - lo > 1:
        pivot = _median_of_three(v[lo], v[(lo + hi - 1) // 2], v[hi - 1])
        lt, gt = _partition3(v, lo, hi, pivot)
        if target < lt:
            hi = lt
        elif target >= gt:
            lo = gt
        else:
            break

    return float(v[target])
