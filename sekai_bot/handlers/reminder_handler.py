"""/taki コマンドハンドラー

毎時30分の「炊きましょう🔥」リマインドを、実行したチャンネルで開始/終了します。
"""

import logging

import discord

from sekai_bot.exceptions import BotError, CommandValidationError
from sekai_bot.handlers.responses import respond, respond_error
from sekai_bot.state.reminder_registry import ReminderRegistry

logger = logging.getLogger(__name__)


class ReminderHandler:
    """/taki s | e のビジネスロジック"""

    def __init__(self, registry: ReminderRegistry):
        self.registry = registry

        logger.info("ReminderHandler initialized")

    async def on_command(self, interaction: discord.Interaction, subcommand: str) -> None:
        try:
            message = self.toggle(interaction.channel_id, subcommand)
        except BotError as e:
            await respond_error(interaction, e)
            return

        await respond(interaction, message)

    def toggle(self, channel_id: int | None, subcommand: str) -> str:
        """
        Raises:
            CommandValidationError: チャンネル外での実行、または不明なサブコマンド
        """
        if not subcommand:
            raise CommandValidationError("サブコマンドが指定されていません。")
        if channel_id is None:
            raise CommandValidationError("テキストチャンネルでのみ使用できます。")

        if subcommand == "s":
            self.registry.subscribe(channel_id)
            return "リマインドを開始しました。"
        if subcommand == "e":
            self.registry.unsubscribe(channel_id)
            return "リマインドを終了しました。"

        raise CommandValidationError(f"不明なサブコマンド: {subcommand}")
