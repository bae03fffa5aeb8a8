r"""
groupstats.utils
================
Small helpers shared by the selection, quantile and statistics modules.

This module provides:

- :data:`MISSING`: the missing-value sentinel returned for undefined statistics.
- :func:`all_same` and :func:`is_sorted_range`: linear scans over a range.
- :func:`check_range`: strict validation of a ``[start, end)`` range.
- :func:`parse_percentile`: C ``atof``-style parsing of selector strings.
- :func:`group_ranges`: turn group boundaries into ``(start, end)`` pairs.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

import numpy as np

__all__ = [
    "MISSING",
    "is_missing",
    "all_same",
    "is_sorted_range",
    "check_range",
    "parse_percentile",
    "group_ranges",
]

# 2**1023, the host runtime's system missing value; must stay finite.
MISSING: float = 8.98846567431158e307

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_missing(value: float, missing: float = MISSING) -> bool:
    """Return True when ``value`` is the missing-value sentinel."""
    return value == missing


def all_same(v: Sequence[float], start: int, end: int) -> bool:
    r"""
    Whether every entry of ``v[start:end]`` equals the first one.

    Parameters
    ----------
    v : sequence of float
        Observation vector.
    start, end : int
        Half-open range ``[start, end)``.

    Returns
    -------
    bool
        ``True`` for ranges with a single element.

    Examples
    --------
    >>> all_same([2.0, 2.0, 3.0], 0, 2)
    True
    """
    first = v[start]
    for i in range(start + 1, end):
        if v[i] != first:
            return False
    return True


def is_sorted_range(v: Sequence[float], start: int, end: int) -> bool:
    r"""
    Whether ``v[start:end]`` is in non-decreasing order.

    Examples
    --------
    >>> is_sorted_range([1.0, 2.0, 2.0, 5.0], 0, 4)
    True
    >>> is_sorted_range([3.0, 1.0], 0, 2)
    False
    """
    for i in range(start + 1, end):
        if v[i - 1] > v[i]:
            return False
    return True


def check_range(v: Sequence[float], start: int, end: int) -> None:
    r"""
    Validate a ``[start, end)`` range against ``v``.

    Only called in strict mode; the statistics functions otherwise treat the
    range as a caller precondition.

    Raises
    ------
    ValueError
        If the bounds are not integers, fall outside ``v``, or the range is empty.
    """
    if not isinstance(start, (int, np.integer)) or not isinstance(end, (int, np.integer)):
        raise ValueError(f"range bounds must be integers, got start={start!r}, end={end!r}")
    if start < 0 or end > len(v):
        raise ValueError(f"range [{start}, {end}) is outside a vector of length {len(v)}")
    if end - start < 1:
        raise ValueError(f"range [{start}, {end}) is empty")


def parse_percentile(text: str) -> float:
    r"""
    Parse the leading number of ``text`` the way C ``atof`` does.

    Leading whitespace is skipped and trailing garbage is ignored; a string with
    no numeric prefix parses as ``0.0``.

    Examples
    --------
    >>> parse_percentile("97.5")
    97.5
    >>> parse_percentile("25th")
    25.0
    >>> parse_percentile("mode")
    0.0
    """
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))


def group_ranges(info: Iterable[int]) -> list[tuple[int, int]]:
    r"""
    Convert group boundaries ``[0, e1, e2, ..., n]`` into half-open ranges.

    Parameters
    ----------
    info : iterable of int
        Non-decreasing boundary indices; group ``g`` spans
        ``[info[g], info[g + 1])``.

    Returns
    -------
    list of tuple[int, int]

    Raises
    ------
    ValueError
        If the boundaries decrease.

    Examples
    --------
    >>> group_ranges([0, 3, 5, 9])
    [(0, 3), (3, 5), (5, 9)]
    """
    bounds = [int(b) for b in info]
    ranges = []
    for i, j in zip(bounds[:-1], bounds[1:]):
        if j < i:
            raise ValueError(f"group boundaries must be non-decreasing, got {i} then {j}")
        ranges.append((i, j))
    return ranges
