"""/calc コマンドハンドラー

必要イベントポイントからスコア範囲を逆算し、8行ずつのページで表示します。
"""

import logging
from typing import Optional

import discord

from sekai_bot.handlers.responses import respond
from sekai_bot.scoring.score_range import calculate_score_ranges, render_score_ranges
from sekai_bot.state.pagination_store import PaginationStore
from sekai_bot.ui.pagination import PageNavigationView, paginate

logger = logging.getLogger(__name__)

TABLE_HEADER = "イベントボーナス | 炊き数 | スコア下限 | スコア上限"
NO_RESULT_MESSAGE = "条件に合う結果がありませんでした。"
EXPIRED_MESSAGE = "ページ情報が見つかりません。もう一度 /calc を実行してください。"


class CalcHandler:
    """/calc のビジネスロジック

    責務:
    - スコア範囲の計算とページ整形
    - ページ送り状態の登録（stage → commit）
    - 「前へ」「次へ」ボタンの処理
    """

    def __init__(self, pagination_store: PaginationStore, page_size: int = 8):
        """初期化

        Args:
            pagination_store: ページ送り状態ストア
            page_size: 1ページあたりの行数
        """
        self.pagination_store = pagination_store
        self.page_size = page_size

        logger.info("CalcHandler initialized")

    def build_pages(self, required_points: int) -> list[str]:
        """計算結果を表示用ページに整形

        Args:
            required_points: 目標のイベントポイント

        Returns:
            整形済みページ（該当なしなら空）
        """
        lines = render_score_ranges(calculate_score_ranges(required_points))
        return [
            "\n".join([
                f"**必要PT**: {required_points} | Page {page.number}/{page.total}",
                "```",
                TABLE_HEADER,
                *page.lines,
                "```",
            ])
            for page in paginate(lines, self.page_size)
        ]

    async def on_command(self, interaction: discord.Interaction, required_points: int) -> None:
        """/calc required_points"""
        pages = self.build_pages(required_points)

        logger.info(
            "Calc requested",
            extra={"required_points": required_points, "page_count": len(pages)}
        )

        if not pages:
            await respond(interaction, NO_RESULT_MESSAGE)
            return

        # 送信後のメッセージIDが分かるまではインタラクションIDで保持
        self.pagination_store.stage(interaction.id, pages)
        await respond(interaction, pages[0], view=PageNavigationView(0, len(pages)))

        try:
            message = await interaction.original_response()
        except discord.HTTPException as e:
            logger.error(
                "Failed to fetch calc response message",
                extra={"interaction_id": interaction.id, "error": str(e)},
                exc_info=True,
            )
            return

        self.pagination_store.commit(interaction.id, message.id)

    async def on_navigate(self, interaction: discord.Interaction) -> None:
        """calc:prev / calc:next ボタン"""
        custom_id = (interaction.data or {}).get("custom_id", "")
        direction = _parse_direction(custom_id)
        if direction is None or interaction.message is None:
            logger.debug("Ignoring calc component", extra={"custom_id": custom_id})
            return

        result = self.pagination_store.advance(interaction.message.id, direction)
        if result is None:
            await respond(interaction, EXPIRED_MESSAGE, ephemeral=True)
            return

        page, current_page, total_pages = result
        await interaction.response.edit_message(
            content=page,
            view=PageNavigationView(current_page, total_pages),
        )


def _parse_direction(custom_id: str) -> Optional[str]:
    """custom_id ("calc:prev" など) から移動方向を取り出す"""
    _, _, direction = custom_id.partition(":")
    if direction in ("prev", "next"):
        return direction
    return None
