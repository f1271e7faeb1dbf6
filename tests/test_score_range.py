from fractions import Fraction

import pytest

from sekai_bot.models import ScoreRangeRow
from sekai_bot.scoring.score_range import (
    CONSUMPTION_MULTIPLIERS,
    SCORE_BONUS_STEP,
    calculate_score_ranges,
    points_for,
    render_score_ranges,
    round_half_away_from_zero,
)

SAMPLE_POINTS = [100, 300, 600, 1000, 2500, 5000, 12345, 19980]


@pytest.mark.parametrize(
    "value, expected",
    [
        (Fraction(5, 2), 3),
        (Fraction(-5, 2), -3),
        (Fraction(1, 2), 1),
        (Fraction(12, 5), 2),
        (Fraction(-12, 5), -2),
        (Fraction(0), 0),
    ],
)
def test_round_half_away_from_zero(value, expected):
    assert round_half_away_from_zero(value) == expected


@pytest.mark.parametrize("required_points", SAMPLE_POINTS)
def test_rows_respect_score_window_and_bonus_bounds(required_points):
    rows = calculate_score_ranges(required_points)
    assert rows
    for row in rows:
        assert row.score_max - row.score_min == SCORE_BONUS_STEP - 1
        assert 0 <= row.score_min <= row.score_max <= 3_000_000
        assert 0 <= row.bonus_percent <= 435
        assert row.consumption_tier in CONSUMPTION_MULTIPLIERS


@pytest.mark.parametrize("required_points", SAMPLE_POINTS)
def test_rows_strictly_ordered_by_tier_then_bonus(required_points):
    rows = calculate_score_ranges(required_points)
    keys = [(r.consumption_tier, r.bonus_percent) for r in rows]
    assert all(a < b for a, b in zip(keys, keys[1:]))

    lines = render_score_ranges(rows)
    assert len(lines) == len(set(lines)) == len(rows)


@pytest.mark.parametrize("required_points", SAMPLE_POINTS)
def test_rows_reproduce_required_points_within_rounding(required_points):
    for row in calculate_score_ranges(required_points):
        score_bonus = row.score_min // SCORE_BONUS_STEP
        multiplier = CONSUMPTION_MULTIPLIERS[row.consumption_tier]
        error = abs(points_for(score_bonus, row.bonus_percent, row.consumption_tier) - required_points)
        assert error <= Fraction((100 + score_bonus) * multiplier, 200)


def test_known_row_for_1000_points():
    rows = calculate_score_ranges(1000)
    # (100 + 87) × 5.35 × 1 = 1000.45
    assert ScoreRangeRow(bonus_percent=435, consumption_tier=0, score_min=1_740_000, score_max=1_759_999) in rows


def test_same_bonus_keeps_closest_score_window():
    rows = [r for r in calculate_score_ranges(300) if r.consumption_tier == 0 and r.bonus_percent == 21]
    # x=147 → 298.87pt, x=148 → 300.08pt
    assert rows == [ScoreRangeRow(bonus_percent=21, consumption_tier=0, score_min=2_960_000, score_max=2_979_999)]


def test_score_bonus_150_is_out_of_range():
    for points in SAMPLE_POINTS:
        assert all(r.score_min < 150 * SCORE_BONUS_STEP for r in calculate_score_ranges(points))


def test_zero_and_negative_points_yield_nothing():
    assert calculate_score_ranges(0) == []
    assert calculate_score_ranges(-10) == []


def test_unreachable_points_yield_nothing():
    # 最大は (100+149) × 5.35 × 15 ≈ 19981pt
    assert calculate_score_ranges(30000) == []


def test_render_row():
    row = ScoreRangeRow(bonus_percent=435, consumption_tier=0, score_min=1_740_000, score_max=1_759_999)
    assert row.render() == "435% | 0 | 1,740,000 | 1,759,999"


def test_render_suppresses_duplicate_lines():
    row = ScoreRangeRow(bonus_percent=10, consumption_tier=1, score_min=0, score_max=19_999)
    assert render_score_ranges([row, row]) == ["10% | 1 | 0 | 19,999"]
