"""インタラクション応答ヘルパー

応答済み（defer 済み）かどうかを見て、初回応答とフォローアップを使い分けます。
"""

import logging
from typing import Optional

import discord

from sekai_bot.exceptions import (
    BotError,
    CatalogUnavailableError,
    CommandValidationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Discordのメッセージ本文の上限
MESSAGE_MAX_LENGTH = 2000

GENERIC_FAILURE_MESSAGE = "エラーが発生しました。"


def truncate_content(content: str, limit: int = MESSAGE_MAX_LENGTH) -> str:
    """本文を上限文字数に収める"""
    if len(content) <= limit:
        return content
    return content[:limit - 1] + "…"


async def respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    ephemeral: bool = False,
    embed: Optional[discord.Embed] = None,
    view: Optional[discord.ui.View] = None,
) -> None:
    """インタラクションに応答（エフェメラル可）"""
    kwargs: dict = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = truncate_content(content)
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view

    if interaction.response.is_done():
        await interaction.followup.send(**kwargs)
    else:
        await interaction.response.send_message(**kwargs)


async def respond_error(interaction: discord.Interaction, error: BotError) -> None:
    """Bot例外の種類に応じてユーザーへ通知

    - 引数エラー: 実行者にのみ表示
    - 見つからない: 通常表示（エラーログは残さない）
    - それ以外: ログに残して実行者にのみ表示
    """
    if isinstance(error, CommandValidationError):
        logger.info(
            "Command validation failed",
            extra={"error": error.message, **error.details}
        )
        await respond(interaction, error.message, ephemeral=True)
        return

    if isinstance(error, NotFoundError):
        logger.info(
            "Lookup miss",
            extra={"error": error.message, **error.details}
        )
        await respond(interaction, error.message, ephemeral=True)
        return

    if isinstance(error, CatalogUnavailableError):
        logger.warning(
            "Catalog unavailable",
            extra={"error": error.message, **error.details}
        )
        await respond(interaction, error.message, ephemeral=True)
        return

    logger.error(
        "Command failed",
        extra={"error": error.message, **error.details},
    )
    await respond(interaction, error.message or GENERIC_FAILURE_MESSAGE, ephemeral=True)
