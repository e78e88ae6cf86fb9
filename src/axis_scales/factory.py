from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Literal

from axis_scales.config import AppConfig
from axis_scales.numeric import build_value_set, is_special
from axis_scales.scales.base import Scale
from axis_scales.scales.linear import LinearScale
from axis_scales.scales.outliers import OutlierScale
from axis_scales.scales.percentile import PercentileScale
from axis_scales.scales.point import categorical_scale
from axis_scales.scales.wrap import timestamp_scale

LOGGER = logging.getLogger(__name__)

ScaleKind = Literal["percentile", "linear", "timestamp", "categorical"]
SCALE_KINDS: tuple[str, ...] = ("percentile", "linear", "timestamp", "categorical")


def count_special(values: Iterable[Any]) -> int:
    return sum(1 for value in values if is_special(value))


def _numeric_scale(values: list[Any], kind: str, config: AppConfig) -> Scale:
    value_set = build_value_set(values)
    if kind == "percentile":
        return PercentileScale(value_set, max_precision=config.ticks.max_precision)
    if value_set.size == 0:
        raise ValueError(f"Column has no finite values for a {kind} scale")
    domain = (float(value_set[0]), float(value_set[-1]))
    if kind == "linear":
        return LinearScale(domain=domain)
    return timestamp_scale().domain(domain)


def build_column_scale(
    values: Iterable[Any],
    kind: ScaleKind = "percentile",
    config: AppConfig | None = None,
    output_range: Sequence[float] | None = None,
) -> Scale:
    """Build the scale used to lay out one data column on an axis."""
    if kind not in SCALE_KINDS:
        raise ValueError(f"Unknown scale kind: {kind!r}. Expected one of {', '.join(SCALE_KINDS)}")
    config = config or AppConfig()
    values = list(values)

    if kind == "categorical":
        scale: Scale = categorical_scale(values)
    else:
        scale = _numeric_scale(values, kind, config)
        n_special = count_special(values)
        if n_special and config.outliers.enabled:
            LOGGER.debug("Reserving outlier slot for %d special values", n_special)
            scale = OutlierScale(
                scale,
                reserved_size=config.outliers.reserved_size,
                label=config.outliers.label,
            )

    scale.range(output_range if output_range is not None else config.output_range)
    return scale
