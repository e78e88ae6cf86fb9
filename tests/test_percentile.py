from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from axis_scales.scales.percentile import (
    PercentileScale,
    ValueSetInvariantError,
    percentile_scale,
)

VALUES = [1, 2, 3, 4, 5, 100]


def _scale() -> PercentileScale:
    return percentile_scale(VALUES).range([0, 500])


def test_percentile_scale_maps_members_to_their_rank() -> None:
    scale = _scale()

    assert scale(1) == 0.0
    assert scale.apply(100) == 500.0
    assert scale(3) == pytest.approx(200.0)
    assert scale(4) == pytest.approx(300.0)
    assert scale(4) < scale(50) < scale(100)


def test_percentile_scale_interpolates_between_members() -> None:
    scale = _scale()

    # 50 sits 45/95 of the way from 5 (rank 4) to 100 (rank 5).
    assert scale(50) == pytest.approx((4 + 45 / 95) / 5 * 500)
    assert scale(2.5) == pytest.approx(150.0)


def test_percentile_scale_clamps_out_of_domain_and_marks_special_values() -> None:
    scale = _scale()

    assert scale(1000) == 500.0
    assert scale(-5) == 0.0
    for special in (math.nan, math.inf, -math.inf, None, "", "inf", "NaN", pd.NA, pd.NaT):
        assert scale(special) == -500.0


def test_percentile_scale_is_monotonic() -> None:
    scale = _scale()
    positions = [scale(x) for x in np.linspace(1, 100, 400)]
    assert all(a <= b for a, b in zip(positions, positions[1:]))


def test_percentile_scale_invert_round_trips() -> None:
    scale = _scale()
    for value in VALUES:
        assert scale.invert(scale(value)) == value

    recovered = scale.invert(scale(50))
    assert 5 <= recovered <= 100
    assert recovered == pytest.approx(50.0)
    assert scale.invert(-100) == 1.0
    assert scale.invert(900) == 100.0


def test_percentile_scale_requires_two_distinct_values() -> None:
    with pytest.raises(ValueError, match="at least two distinct finite values"):
        percentile_scale([1, 1.0, "nan", None])


def test_percentile_scale_domain_restricts_active_indices() -> None:
    scale = _scale()
    assert scale.domain() == (1.0, 100.0)

    assert scale.domain([2, 5]) is scale
    assert scale.domain() == (2.0, 5.0)
    assert scale.domain_index_range() == (1, 4)
    assert scale(2) == 0.0
    assert scale(5) == 500.0
    assert scale(3.5) == pytest.approx(250.0)
    assert scale.invert(250.0) == pytest.approx(3.5)


def test_percentile_scale_domain_covers_requested_interval() -> None:
    scale = _scale()

    scale.domain([2.5, 4.5])
    assert scale.domain_index_range() == (1, 4)
    assert scale.domain() == (2.0, 5.0)
    assert 0.0 < scale(2.5) < scale(4.5) < 500.0
    assert scale(4.5) == pytest.approx(2.5 / 3 * 500)

    scale.domain([1, 100])
    assert scale.domain() == (1.0, 100.0)


def test_percentile_scale_domain_widens_collapsed_interval() -> None:
    scale = _scale()

    scale.domain([3, 3])
    assert scale.domain_index_range() == (1, 3)

    scale.domain([3.2, 3.8])
    assert scale.domain() == (3.0, 4.0)

    scale.domain([1000, 2000])
    assert scale.domain_index_range() == (4, 5)

    scale.domain([-10, 0.5])
    assert scale.domain_index_range() == (0, 1)


def test_percentile_scale_domain_index_range_validates_bounds() -> None:
    scale = _scale()
    assert scale.domain_index_range([2, 4]) is scale
    assert scale.domain() == (3.0, 5.0)

    with pytest.raises(ValueError, match="Invalid domain index range"):
        scale.domain_index_range([3, 1])
    with pytest.raises(ValueError, match="Invalid domain index range"):
        scale.domain_index_range([0, 6])


def test_percentile_scale_copy_is_independent_but_shares_values() -> None:
    scale = _scale()
    clone = scale.copy()

    clone.range([0, 100]).domain([2, 4])

    assert scale.range() == (0.0, 500.0)
    assert scale.domain() == (1.0, 100.0)
    assert clone.range() == (0.0, 100.0)
    assert clone.domain() == (2.0, 4.0)
    assert clone.values is scale.values


def test_percentile_ticks_returns_all_values_when_count_covers_domain() -> None:
    scale = _scale()
    assert scale.ticks(10) == [1.0, 2.0, 3.0, 4.0, 5.0, 100.0]
    assert scale.ticks(6) == [1.0, 2.0, 3.0, 4.0, 5.0, 100.0]
    assert scale.ticks(0) == []


def test_percentile_ticks_pick_round_midpoints() -> None:
    scale = _scale()
    assert scale.ticks(2) == [2.0, 50.0]
    assert scale.ticks(1) == [50.0]


def test_percentile_ticks_respect_count_and_skip_repeats() -> None:
    scale = percentile_scale(np.arange(1000) ** 1.5)
    for count in (1, 3, 5, 7, 10, 25):
        ticks = scale.ticks(count)
        assert 0 < len(ticks) <= count
        assert all(a != b for a, b in zip(ticks, ticks[1:]))

    few_distinct = percentile_scale([0, 0.001, 0.002, 1000, 1000.001, 1000.002, 1000.003])
    ticks = few_distinct.ticks(5)
    assert len(ticks) <= 5
    assert all(a != b for a, b in zip(ticks, ticks[1:]))


def test_percentile_tick_format_uses_minimal_precision() -> None:
    formatter = _scale().tick_format()
    assert formatter(50.0) == "50"
    assert formatter(2.5) == "2.5"
    assert formatter(0.125) == "0.125"


def test_percentile_scale_reports_corrupt_value_set() -> None:
    scale = PercentileScale(np.array([0.0, np.nan, 10.0]))
    with pytest.raises(ValueSetInvariantError, match="outside its bracket"):
        scale(5.0)
