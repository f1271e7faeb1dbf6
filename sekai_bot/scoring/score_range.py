"""イベントポイント逆算

獲得ポイント = (100 + スコアボーナス) × (1 + イベントボーナス / 100) × 炊き倍率
を、必要ポイントから逆算してスコア範囲とイベントボーナスの組み合わせを列挙します。
"""

import logging
from fractions import Fraction

from sekai_bot.models import ScoreRangeRow

logger = logging.getLogger(__name__)

# 炊き数 → 倍率 (炊き数 0 ~ 3 のみ)
CONSUMPTION_MULTIPLIERS: dict[int, int] = {0: 1, 1: 5, 2: 10, 3: 15}

# スコアボーナス = floor(スコア / 20000)
SCORE_BONUS_STEP = 20_000
MAX_SCORE_BONUS = 150

MIN_BONUS_PERCENT = 0
MAX_BONUS_PERCENT = 435

SCORE_MIN = 0
SCORE_MAX = 3_000_000


def round_half_away_from_zero(value: Fraction) -> int:
    """0から遠い方へ四捨五入"""
    magnitude = abs(value)
    rounded = int(magnitude + Fraction(1, 2))  # 非負なので int() は floor
    return rounded if value >= 0 else -rounded


def points_for(score_bonus: int, bonus_percent: int, consumption_tier: int) -> Fraction:
    """スコアボーナス・イベントボーナス・炊き数から獲得ポイントを計算（端数処理なし）"""
    multiplier = CONSUMPTION_MULTIPLIERS[consumption_tier]
    return Fraction((100 + score_bonus) * (100 + bonus_percent) * multiplier, 100)


def calculate_score_ranges(required_points: int) -> list[ScoreRangeRow]:
    """必要ポイントを満たす (イベントボーナス, 炊き数, スコア範囲) を列挙

    同じ (炊き数, イベントボーナス) に複数のスコア範囲が該当した場合は、
    逆算したポイントが必要ポイントに最も近い範囲（同点ならスコアの低い方）を残す。

    Args:
        required_points: 目標のイベントポイント

    Returns:
        炊き数昇順 → イベントボーナス昇順に並んだ行
    """
    if required_points < 0:
        return []

    best: dict[tuple[int, int], tuple[Fraction, ScoreRangeRow]] = {}

    for tier, multiplier in CONSUMPTION_MULTIPLIERS.items():
        for score_bonus in range(MAX_SCORE_BONUS + 1):
            rate = Fraction(required_points, (100 + score_bonus) * multiplier)
            bonus_percent = round_half_away_from_zero((rate - 1) * 100)
            if not MIN_BONUS_PERCENT <= bonus_percent <= MAX_BONUS_PERCENT:
                continue

            score_min = score_bonus * SCORE_BONUS_STEP
            score_max = score_min + SCORE_BONUS_STEP - 1
            if score_min < SCORE_MIN or score_max > SCORE_MAX:
                continue

            row = ScoreRangeRow(
                bonus_percent=bonus_percent,
                consumption_tier=tier,
                score_min=score_min,
                score_max=score_max,
            )
            error = abs(points_for(score_bonus, bonus_percent, tier) - required_points)
            key = (tier, bonus_percent)
            # 走査はスコア昇順なので、誤差が同じなら先に見つかった方を残す
            if key not in best or error < best[key][0]:
                best[key] = (error, row)

    rows = [row for _, row in best.values()]
    rows.sort(key=lambda r: (r.consumption_tier, r.bonus_percent))

    if not rows:
        logger.debug(
            "No score range matched",
            extra={"required_points": required_points}
        )

    return rows


def render_score_ranges(rows: list[ScoreRangeRow]) -> list[str]:
    """行を表示用文字列に変換（同一行は除外）"""
    lines: list[str] = []
    seen: set[str] = set()
    for row in rows:
        line = row.render()
        if line in seen:
            continue
        seen.add(line)
        lines.append(line)
    return lines
