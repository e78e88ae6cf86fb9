from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

import pandas as pd

from axis_scales.numeric import is_special
from axis_scales.scales.base import Formatter, Scale
from axis_scales.scales.time import TimeScale, from_epoch_seconds


class WrapScale(Scale):
    """Presents `inner` over another domain representation.

    `to_inner` converts an outer domain value to the inner scale's representation
    and `to_outer` converts back. All positional math stays in the inner scale.
    """

    def __init__(
        self,
        inner: Scale,
        to_inner: Callable[[Any], Any],
        to_outer: Callable[[Any], Any],
    ) -> None:
        self.inner = inner
        self.to_inner = to_inner
        self.to_outer = to_outer

    def apply(self, value: Any) -> float:
        return self.inner.apply(self.to_inner(value))

    def domain(self, new_domain: Sequence[Any] | None = None):
        if new_domain is None:
            inner_domain = self.inner.domain()
            return self.to_outer(inner_domain[0]), self.to_outer(inner_domain[-1])
        self.inner.domain([self.to_inner(new_domain[0]), self.to_inner(new_domain[-1])])
        return self

    def invert(self, value: float) -> Any:
        return self.to_outer(self.inner.invert(value))

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self.inner.range()
        self.inner.range(new_range)
        return self

    def ticks(self, count: int = 10) -> list[Any]:
        return [self.to_outer(tick) for tick in self.inner.ticks(count)]

    def tick_format(self, count: int | None = None) -> Formatter:
        inner_format = self.inner.tick_format(count)
        to_inner = self.to_inner
        return lambda value: inner_format(to_inner(value))

    def copy(self) -> WrapScale:
        return WrapScale(self.inner.copy(), self.to_inner, self.to_outer)


def timestamp_to_datetime(timestamp: Any) -> Any:
    if isinstance(timestamp, datetime):
        return timestamp
    if is_special(timestamp):
        return pd.NaT
    return from_epoch_seconds(float(timestamp))


def datetime_to_timestamp(value: Any) -> float:
    timestamp = pd.Timestamp(value)
    if timestamp is pd.NaT:
        return math.nan
    return timestamp.timestamp()


def timestamp_scale() -> WrapScale:
    """Time scale driven by epoch seconds instead of datetimes."""
    return WrapScale(TimeScale(), timestamp_to_datetime, datetime_to_timestamp)
