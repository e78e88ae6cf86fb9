from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from axis_scales.numeric import (
    MAX_PRECISION,
    build_value_set,
    floor_to_precision,
    format_minimal_precision,
    is_special,
    round_to_precision,
)
from axis_scales.scales.base import Formatter, Scale
from axis_scales.scales.linear import LinearScale

LOGGER = logging.getLogger(__name__)

INDEX_SNAP_TOLERANCE = 1e-9


class ValueSetInvariantError(RuntimeError):
    """Raised when the sorted value set backing a percentile scale is corrupt."""


class PercentileScale(Scale):
    """Maps a value to its rank within a sorted value set, then onto the output range.

    The active sub-domain is a pair of indices into the value set. Values between
    two known entries are placed by linear interpolation of their ranks, so axis
    ticks that are not members still land monotonically.
    """

    def __init__(self, values: np.ndarray, max_precision: int = MAX_PRECISION) -> None:
        values = np.asarray(values, dtype=float)
        if values.size < 2:
            raise ValueError(
                f"Percentile scale requires at least two distinct finite values, got {values.size}"
            )
        if values.flags.writeable:
            values = values.copy()
            values.flags.writeable = False
        self._values = values
        self._domain_idx = (0, values.size - 1)
        self._output = LinearScale(domain=(0.0, 1.0))
        self._max_precision = max_precision

    @property
    def values(self) -> np.ndarray:
        return self._values

    def _span(self) -> int:
        lo, hi = self._domain_idx
        return max(hi - lo, 1)

    def apply(self, value: Any) -> float:
        if is_special(value):
            return self._output.apply(-1.0)
        x = float(value)
        lo, hi = self._domain_idx
        if x > self._values[hi]:
            return self._output.apply(1.0)
        if x < self._values[lo]:
            return self._output.apply(0.0)

        upper = lo + int(np.searchsorted(self._values[lo:hi], x, side="left"))
        rank = (upper - lo) / self._span()
        if self._values[upper] != x and upper > lo:
            lower = upper - 1
            lower_value = float(self._values[lower])
            upper_value = float(self._values[upper])
            self._check_bracket(x, lower, upper, lower_value, upper_value)
            fraction = (x - lower_value) / (upper_value - lower_value)
            rank = (lower - lo + fraction) / self._span()
        return self._output.apply(rank)

    def _check_bracket(
        self,
        x: float,
        lower: int,
        upper: int,
        lower_value: float,
        upper_value: float,
    ) -> None:
        context = (
            f"x={x}, lower={lower} ({lower_value}), upper={upper} ({upper_value}), "
            f"domain_idx={self._domain_idx}"
        )
        if lower_value == upper_value:
            raise ValueSetInvariantError(f"Value set entries must be distinct: {context}")
        if not lower_value <= x <= upper_value:
            raise ValueSetInvariantError(f"Value outside its bracket: {context}")

    def invert(self, value: float) -> float:
        lo, hi = self._domain_idx
        position = lo + self._output.invert(value) * (hi - lo)
        position = min(max(position, lo), hi)
        nearest = round(position)
        if abs(position - nearest) <= INDEX_SNAP_TOLERANCE:
            position = nearest
        lower = math.floor(position)
        upper = math.ceil(position)
        if lower == upper:
            return float(self._values[lower])
        fraction = position - lower
        return float(self._values[upper] * fraction + self._values[lower] * (1.0 - fraction))

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self._output.range()
        self._output.range(new_range)
        return self

    def domain_index_range(self, new_domain_idx: Sequence[int] | None = None):
        if new_domain_idx is None:
            return self._domain_idx
        lo, hi = int(new_domain_idx[0]), int(new_domain_idx[1])
        if not 0 <= lo <= hi < self._values.size:
            raise ValueError(
                f"Invalid domain index range ({lo}, {hi}) for {self._values.size} values"
            )
        self._domain_idx = (lo, hi)
        return self

    def domain(self, new_domain: Sequence[float] | None = None):
        if new_domain is None:
            lo, hi = self._domain_idx
            return float(self._values[lo]), float(self._values[hi])

        start, stop = sorted((float(new_domain[0]), float(new_domain[1])))
        # Last entry <= start and first entry >= stop, so the interval is covered.
        lo = int(np.searchsorted(self._values, start, side="right")) - 1
        hi = int(np.searchsorted(self._values, stop, side="left"))
        last = self._values.size - 1
        lo = min(max(lo, 0), last)
        hi = min(max(hi, 0), last)
        if lo == hi:
            lo = max(lo - 1, 0)
            hi = min(hi + 1, last)
        self._domain_idx = (lo, hi)
        LOGGER.debug("Percentile domain (%s, %s) resolved to indices %s", start, stop, self._domain_idx)
        return self

    def copy(self) -> PercentileScale:
        scale = PercentileScale(self._values, max_precision=self._max_precision)
        scale._domain_idx = self._domain_idx
        scale.range(self.range())
        return scale

    def ticks(self, count: int = 10) -> list[float]:
        if count <= 0:
            return []
        lo, hi = self._domain_idx
        span = hi - lo
        if count >= span + 1:
            return self._values[lo : hi + 1].tolist()

        ticks: list[float] = []
        for bucket in range(count):
            start_idx = lo + math.floor(bucket / count * span)
            end_idx = min(lo + math.floor((bucket + 1) / count * span), hi)
            start = float(self._values[start_idx])
            end = float(self._values[end_idx])
            if start == end:
                tick = start
            else:
                previous = ticks[-1] if ticks else start
                precision = 1
                while precision < self._max_precision and floor_to_precision(
                    previous, precision
                ) == floor_to_precision(end, precision):
                    precision += 1
                tick = round_to_precision((previous + end) / 2.0, precision)
            if ticks and ticks[-1] == tick:
                continue
            ticks.append(tick)
        return ticks

    def tick_format(self, count: int | None = None) -> Formatter:
        max_precision = self._max_precision
        return lambda value: format_minimal_precision(value, max_precision=max_precision)


def percentile_scale(values: Iterable[Any], max_precision: int = MAX_PRECISION) -> PercentileScale:
    """Build a percentile scale from a raw column (non-finite entries are dropped)."""
    return PercentileScale(build_value_set(values), max_precision=max_precision)
