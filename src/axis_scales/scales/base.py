from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

Formatter = Callable[[Any], str]


class Scale:
    """Maps domain values to output coordinates and back.

    Setters (`domain(d)`, `range(r)`) return the scale itself so calls can be
    chained; called without an argument they return the current value.
    Calling a scale is the same as calling `apply`.
    """

    def apply(self, value: Any) -> float:
        raise NotImplementedError

    def __call__(self, value: Any) -> float:
        return self.apply(value)

    def domain(self, new_domain: Sequence[Any] | None = None) -> Any:
        raise NotImplementedError

    def range(self, new_range: Sequence[float] | None = None) -> Any:
        raise NotImplementedError

    def invert(self, value: float) -> Any:
        raise NotImplementedError

    def ticks(self, count: int = 10) -> list[Any]:
        raise NotImplementedError

    def tick_format(self, count: int | None = None) -> Formatter:
        raise NotImplementedError

    def copy(self) -> Scale:
        raise NotImplementedError
