from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any

from axis_scales.scales.base import Formatter, Scale

EMPTY_LABEL = "(empty)"


def categorical_label(value: Any) -> str:
    if value is None or value == "":
        return EMPTY_LABEL
    return str(value)


class PointScale(Scale):
    """Evenly spaced points for an ordered list of categories."""

    def __init__(
        self,
        domain: Sequence[Any] = (),
        range: Sequence[float] = (0.0, 1.0),
    ) -> None:
        self._domain: list[str] = []
        self._index: dict[str, int] = {}
        self._range = (float(range[0]), float(range[1]))
        self.domain(domain)

    def _step(self) -> float:
        r0, r1 = self._range
        return (r1 - r0) / max(1, len(self._domain) - 1)

    def _position(self, index: int) -> float:
        r0, r1 = self._range
        if len(self._domain) == 1:
            return (r0 + r1) / 2.0
        return r0 + index * self._step()

    def apply(self, value: Any) -> float:
        index = self._index.get(categorical_label(value))
        if index is None:
            return math.nan
        return self._position(index)

    def invert(self, value: float) -> str | None:
        if not self._domain:
            return None
        positions = [self._position(index) for index in range(len(self._domain))]
        nearest = min(range(len(positions)), key=lambda index: abs(positions[index] - value))
        return self._domain[nearest]

    def domain(self, new_domain: Sequence[Any] | None = None):
        if new_domain is None:
            return list(self._domain)
        labels: list[str] = []
        for value in new_domain:
            label = categorical_label(value)
            if label not in labels:
                labels.append(label)
        self._domain = labels
        self._index = {label: index for index, label in enumerate(labels)}
        return self

    def range(self, new_range: Sequence[float] | None = None):
        if new_range is None:
            return self._range
        self._range = (float(new_range[0]), float(new_range[1]))
        return self

    def ticks(self, count: int = 10) -> list[str]:
        return list(self._domain)

    def tick_format(self, count: int | None = None) -> Formatter:
        return categorical_label

    def copy(self) -> PointScale:
        return PointScale(domain=self._domain, range=self._range)


def categorical_scale(values: Iterable[Any]) -> PointScale:
    """Point scale over the sorted distinct labels of a raw column."""
    labels = sorted({categorical_label(value) for value in values})
    return PointScale(domain=labels)
