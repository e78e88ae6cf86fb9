from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

import numpy as np

from axis_scales.numeric import is_special
from axis_scales.scales.base import Formatter, Scale

DEFAULT_TICK_COUNT = 10


def tick_step(start: float, stop: float, count: int) -> float:
    """Return a 1, 2 or 5 times power-of-ten step giving about `count` ticks."""
    step = abs(stop - start) / max(count, 1)
    power = math.floor(math.log10(step))
    error = step / 10.0**power
    if error >= math.sqrt(50.0):
        factor = 10
    elif error >= math.sqrt(10.0):
        factor = 5
    elif error >= math.sqrt(2.0):
        factor = 2
    else:
        factor = 1
    return factor * 10.0**power


def step_decimals(step: float) -> int:
    return max(0, -math.floor(math.log10(step)))


def linear_ticks(start: float, stop: float, count: int) -> list[float]:
    if count <= 0:
        return []
    if start == stop:
        return [float(start)]
    low, high = min(start, stop), max(start, stop)
    step = tick_step(low, high, count)
    indices = np.arange(math.ceil(low / step), math.floor(high / step) + 1, dtype=float)
    ticks = np.round(indices * step, step_decimals(step)).tolist()
    return ticks if start < stop else ticks[::-1]


class LinearScale(Scale):
    """Affine map from a numeric domain onto the output range."""

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range: Sequence[float] = (0.0, 1.0),
    ) -> None:
        self._domain = (float(domain[0]), float(domain[1]))
        self._range = (float(range[0]), float(range[1]))

    def apply(self, value: Any) -> float:
        if is_special(value):
            return math.nan
        d0, d1 = self._domain
        r0, r1 = self._range
        if d0 == d1:
            return (r0 + r1) / 2.0
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, value: float) -> float:
        d0, d1 = self._domain
        r0, r1 = self._range
        if r0 == r1:
            return (d0 + d1) / 2.0
        return d0 + (float(value) - r0) / (r1 - r0) * (d1 - d0)

    def domain(self, new_domain: Sequence[float] | None = None):
        if new_domain is None:
            return self._domain
        self._domain = (float(new_domain[0]), float(new_domain[1]))
        return self

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self._range
        self._range = (float(new_range[0]), float(new_range[1]))
        return self

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[float]:
        return linear_ticks(self._domain[0], self._domain[1], count)

    def tick_format(self, count: int | None = None) -> Formatter:
        d0, d1 = self._domain
        if d0 == d1:
            return lambda value: f"{float(value):g}"
        decimals = step_decimals(tick_step(d0, d1, count or DEFAULT_TICK_COUNT))
        return lambda value: f"{float(value):.{decimals}f}"

    def copy(self) -> LinearScale:
        return LinearScale(domain=self._domain, range=self._range)
