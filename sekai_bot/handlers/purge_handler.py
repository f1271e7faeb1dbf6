"""/purge コマンドハンドラー

指定した件数のメッセージを一括削除します。
ただし 14日以上前のメッセージは除外されます（Bulk Delete API制限）。
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, TypeVar

import discord

from sekai_bot.exceptions import BotError, CommandValidationError, DiscordAPIError
from sekai_bot.handlers.responses import respond, respond_error

logger = logging.getLogger(__name__)

M = TypeVar("M")


def clamp_count(requested: Optional[int], minimum: int = 1, maximum: int = 100) -> int:
    """削除件数を Bulk Delete の上限に合わせてクランプ"""
    if not requested:
        return minimum
    return max(minimum, min(requested, maximum))


def select_bulk_deletable(
    messages: Iterable[M],
    now: datetime,
    max_age_days: int = 14,
) -> list[M]:
    """一括削除できる（作成から max_age_days 日以内の）メッセージだけを返す"""
    cutoff = now - timedelta(days=max_age_days)
    return [m for m in messages if m.created_at >= cutoff]


class PurgeHandler:
    """/purge のビジネスロジック"""

    def __init__(self, min_count: int = 1, max_count: int = 100, max_age_days: int = 14):
        self.min_count = min_count
        self.max_count = max_count
        self.max_age_days = max_age_days

        logger.info("PurgeHandler initialized")

    async def on_command(self, interaction: discord.Interaction, count: int) -> None:
        """/purge count"""
        try:
            deleted = await self.purge(interaction, count)
        except BotError as e:
            await respond_error(interaction, e)
            return

        await respond(interaction, f"{deleted}件のメッセージを削除しました。", ephemeral=True)

    async def purge(self, interaction: discord.Interaction, count: int) -> int:
        """
        Returns:
            削除した件数

        Raises:
            CommandValidationError: ギルドのテキストチャンネル以外で実行された場合、
                または削除できるメッセージが無い場合
            DiscordAPIError: 取得・削除に失敗した場合
        """
        channel = interaction.channel
        if channel is None or interaction.guild is None:
            raise CommandValidationError("テキストチャンネルでのみ使用できます。")

        delete_count = clamp_count(count, self.min_count, self.max_count)

        # 取得・削除には時間がかかるため先に応答を保留
        await interaction.response.defer(ephemeral=True, thinking=True)

        try:
            messages = [m async for m in channel.history(limit=delete_count)]
            recent = select_bulk_deletable(
                messages,
                now=datetime.now(timezone.utc),
                max_age_days=self.max_age_days,
            )

            if not recent:
                raise CommandValidationError(
                    f"{self.max_age_days}日以上前のメッセージは一括削除できません。",
                    details={"channel_id": channel.id, "requested_count": delete_count},
                )

            await channel.delete_messages(recent)

        except (discord.HTTPException, discord.ClientException) as e:
            logger.error(
                "Failed to purge messages",
                extra={"channel_id": channel.id, "requested_count": delete_count},
                exc_info=True,
            )
            raise DiscordAPIError(
                "メッセージ削除に失敗しました。権限や日数制限を確認してください。",
                details={"channel_id": channel.id, "error": str(e)},
            ) from e

        logger.info(
            "Messages purged",
            extra={
                "channel_id": channel.id,
                "requested_count": delete_count,
                "deleted_count": len(recent),
            }
        )
        return len(recent)
