from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterable
from typing import Any

import numpy as np
import pandas as pd

LOGGER = logging.getLogger(__name__)

SPECIAL_STRINGS = frozenset({"", "inf", "-inf", "NaN"})
MAX_PRECISION = 20


def is_special(value: Any) -> bool:
    """Return True for missing or non-finite inputs (NaN, +/-inf, None, NA, NaT, blank)."""
    if isinstance(value, str):
        if value in SPECIAL_STRINGS:
            return True
        try:
            return not math.isfinite(float(value))
        except ValueError:
            return True
    # Covers None, pd.NA, pd.NaT and numpy NaT/NaN scalars.
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return True
    if isinstance(value, numbers.Real):
        return not math.isfinite(value)
    return value is None or value is pd.NaT


def floor_to_precision(value: float, precision: int) -> float:
    """Round toward zero keeping `precision` significant digits."""
    if value < 0:
        return -floor_to_precision(-value, precision)
    if value == 0:
        return 0.0
    power = 10.0 ** (precision - 1 - math.floor(math.log10(value)))
    return math.floor(value * power) / power


def round_to_precision(value: float, precision: int) -> float:
    return float(f"{value:.{precision}g}")


def minimal_precision(value: float, max_precision: int = MAX_PRECISION) -> int:
    precision = 1
    while precision < max_precision and round_to_precision(value, precision) != value:
        precision += 1
    return precision


def format_minimal_precision(value: float, max_precision: int = MAX_PRECISION) -> str:
    """Render `value` with the fewest significant digits that still parse back to it."""
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    precision = minimal_precision(value, max_precision=max_precision)
    return np.format_float_positional(
        value,
        precision=precision,
        unique=False,
        fractional=False,
        trim="-",
    )


def build_value_set(values: Iterable[Any]) -> np.ndarray:
    """Parse a raw column into a sorted, deduplicated, read-only array of finite floats."""
    raw = pd.Series(list(values), dtype=object)
    parsed = pd.to_numeric(raw, errors="coerce").to_numpy(dtype=float, na_value=np.nan)
    finite = parsed[np.isfinite(parsed)]
    value_set = np.unique(finite)
    value_set.flags.writeable = False
    dropped = int(raw.size - finite.size)
    if dropped:
        LOGGER.debug("Dropped %d non-finite or unparseable entries", dropped)
    LOGGER.debug("Built value set with %d distinct values", value_set.size)
    return value_set
