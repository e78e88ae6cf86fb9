from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from axis_scales.config import DEFAULT_OUTLIER_LABEL, DEFAULT_OUTLIER_RESERVED_SIZE
from axis_scales.numeric import is_special
from axis_scales.scales.base import Formatter, Scale


class OutlierScale(Scale):
    """Adds a slot for NaN/inf/null values at the `range[1]` end of any scale.

    Ascending range (range[0] < range[1])::

        [ inner scale values ][ nan/inf ]
        ^                    ^          ^
        range[0]   range[0] + size      range[1]

    Descending range::

        [ nan/inf ][ inner scale values ]
        ^          ^                    ^
        range[1]   range[0] - size      range[0]

    where ``size = |range[1] - range[0]| - reserved_size``. The reservation is
    recomputed from the inner scale's current range on every call.
    """

    def __init__(
        self,
        inner: Scale,
        reserved_size: float = DEFAULT_OUTLIER_RESERVED_SIZE,
        label: str = DEFAULT_OUTLIER_LABEL,
    ) -> None:
        self.inner = inner
        self.reserved_size = reserved_size
        self.label = label

    def _check_width(self, r0: float, r1: float) -> float:
        size = abs(float(r1) - float(r0)) - self.reserved_size
        if size <= 0:
            raise ValueError(
                f"Output range ({r0}, {r1}) must be wider than the reserved outlier slot "
                f"({self.reserved_size})"
            )
        return size

    def _ordinary_size(self) -> float:
        return self._check_width(*self.inner.range())

    def apply(self, value: Any) -> float:
        r0, r1 = self.inner.range()
        if is_special(value):
            return r1
        size = self._ordinary_size()
        relative = (self.inner.apply(value) - r0) / (r1 - r0) * size
        return r0 + relative if r0 < r1 else r0 - relative

    def invert(self, value: float) -> Any:
        r0, r1 = self.inner.range()
        size = self._ordinary_size()
        if r0 < r1:
            if value > r0 + size:
                # No single inverse for special values; report the domain end.
                return self.inner.domain()[-1]
            offset = value - r0
        else:
            if value < r0 - size:
                return self.inner.domain()[-1]
            offset = r0 - value
        return self.inner.invert(offset / size * (r1 - r0) + r0)

    def domain(self, new_domain: Sequence[Any] | None = None):
        if new_domain is None:
            return self.inner.domain()
        self.inner.domain(new_domain)
        return self

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self.inner.range()
        self._check_width(new_range[0], new_range[1])
        self.inner.range(new_range)
        return self

    def ticks(self, count: int = 10) -> list[Any]:
        ticks = list(self.inner.ticks(count - 1))
        ticks.append(math.nan)
        return ticks

    def tick_format(self, count: int | None = None) -> Formatter:
        inner_format = self.inner.tick_format(count)
        label = self.label

        def format_tick(value: Any) -> str:
            if is_special(value):
                return label
            return inner_format(value)

        return format_tick

    def copy(self) -> OutlierScale:
        return OutlierScale(self.inner.copy(), reserved_size=self.reserved_size, label=self.label)
