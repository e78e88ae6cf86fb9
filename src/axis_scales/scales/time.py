from __future__ import annotations

import bisect
import math
from collections.abc import Sequence
from typing import Any

import pandas as pd

from axis_scales.numeric import SPECIAL_STRINGS, is_special
from axis_scales.scales.base import Formatter, Scale
from axis_scales.scales.linear import linear_ticks, tick_step

SECOND = 1.0
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY

# (approximate duration in seconds, pandas frequency, calendar-anchored)
TICK_INTERVALS: list[tuple[float, str, bool]] = [
    (SECOND, "1s", False),
    (5 * SECOND, "5s", False),
    (15 * SECOND, "15s", False),
    (30 * SECOND, "30s", False),
    (MINUTE, "1min", False),
    (5 * MINUTE, "5min", False),
    (15 * MINUTE, "15min", False),
    (30 * MINUTE, "30min", False),
    (HOUR, "1h", False),
    (3 * HOUR, "3h", False),
    (6 * HOUR, "6h", False),
    (12 * HOUR, "12h", False),
    (DAY, "1D", False),
    (2 * DAY, "2D", False),
    (WEEK, "W-SUN", True),
    (MONTH, "MS", True),
    (3 * MONTH, "QS-JAN", True),
]
TICK_DURATIONS = [duration for duration, _freq, _anchored in TICK_INTERVALS]


def to_utc(value: Any) -> pd.Timestamp:
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is None:
        return timestamp.tz_localize("UTC")
    return timestamp.tz_convert("UTC")


def is_missing_time(value: Any) -> bool:
    # Only the literal special spellings count as missing for strings.
    if isinstance(value, str):
        return value in SPECIAL_STRINGS
    return is_special(value)


def from_epoch_millis(millis: float) -> pd.Timestamp:
    return pd.Timestamp(millis, unit="ms", tz="UTC")


def from_epoch_seconds(seconds: float) -> pd.Timestamp:
    return from_epoch_millis(seconds * 1000.0)


def multi_format(timestamp: pd.Timestamp) -> str:
    """Label a tick by the coarsest calendar unit it is not aligned to."""
    if timestamp.microsecond:
        return timestamp.strftime(".%f")[:4]
    if timestamp.second:
        return timestamp.strftime(":%S")
    if timestamp.minute or timestamp.hour:
        return timestamp.strftime("%H:%M")
    if timestamp.day != 1:
        return timestamp.strftime("%b %d")
    if timestamp.month != 1:
        return timestamp.strftime("%B")
    return timestamp.strftime("%Y")


class TimeScale(Scale):
    """Linear scale over UTC timestamps with calendar-aligned ticks."""

    def __init__(
        self,
        domain: Sequence[Any] = ("2000-01-01", "2000-01-02"),
        range: Sequence[float] = (0.0, 1.0),
    ) -> None:
        self._domain = (to_utc(domain[0]), to_utc(domain[1]))
        self._range = (float(range[0]), float(range[1]))

    def _seconds(self) -> tuple[float, float]:
        return self._domain[0].timestamp(), self._domain[1].timestamp()

    def apply(self, value: Any) -> float:
        if is_missing_time(value):
            return math.nan
        d0, d1 = self._seconds()
        r0, r1 = self._range
        if d0 == d1:
            return (r0 + r1) / 2.0
        return r0 + (to_utc(value).timestamp() - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, value: float) -> pd.Timestamp:
        d0, d1 = self._seconds()
        r0, r1 = self._range
        if r0 == r1:
            return from_epoch_seconds((d0 + d1) / 2.0)
        return from_epoch_seconds(d0 + (float(value) - r0) / (r1 - r0) * (d1 - d0))

    def domain(self, new_domain: Sequence[Any] | None = None):
        if new_domain is None:
            return self._domain
        self._domain = (to_utc(new_domain[0]), to_utc(new_domain[1]))
        return self

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self._range
        self._range = (float(new_range[0]), float(new_range[1]))
        return self

    def ticks(self, count: int = 10) -> list[pd.Timestamp]:
        if count <= 0:
            return []
        start, stop = sorted(self._domain)
        ticks = _calendar_ticks(start, stop, count)
        return ticks if self._domain[0] <= self._domain[1] else ticks[::-1]

    def tick_format(self, count: int | None = None) -> Formatter:
        return lambda value: multi_format(to_utc(value))

    def copy(self) -> TimeScale:
        return TimeScale(domain=self._domain, range=self._range)


def _calendar_ticks(start: pd.Timestamp, stop: pd.Timestamp, count: int) -> list[pd.Timestamp]:
    span = stop.timestamp() - start.timestamp()
    if span == 0:
        return [start]
    target = span / count
    if target < SECOND:
        millis = linear_ticks(start.timestamp() * 1000.0, stop.timestamp() * 1000.0, count)
        return [from_epoch_millis(value) for value in millis]

    index = bisect.bisect_left(TICK_DURATIONS, target)
    if index == len(TICK_DURATIONS):
        return _year_ticks(start, stop, count)
    if index > 0 and target / TICK_DURATIONS[index - 1] < TICK_DURATIONS[index] / target:
        index -= 1

    _duration, freq, anchored = TICK_INTERVALS[index]
    first = start.ceil("D") if anchored else start.ceil(freq)
    return list(pd.date_range(start=first, end=stop, freq=freq))


def _year_ticks(start: pd.Timestamp, stop: pd.Timestamp, count: int) -> list[pd.Timestamp]:
    span_years = (stop.timestamp() - start.timestamp()) / YEAR
    step = max(1, round(tick_step(0.0, span_years, count)))
    first_year = start.year
    if start > pd.Timestamp(year=first_year, month=1, day=1, tz="UTC"):
        first_year += 1
    first_year = math.ceil(first_year / step) * step
    return [
        pd.Timestamp(year=year, month=1, day=1, tz="UTC")
        for year in range(first_year, stop.year + 1, step)
    ]
