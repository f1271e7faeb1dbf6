"""/roomid コマンドハンドラー

監視中のテキストチャンネルに5桁の部屋番号が投稿されたら、
ボイスチャンネルと通知チャンネルの名前を部屋番号入りに変更します。
"""

import logging
import re

import discord

from sekai_bot.exceptions import BotError, CommandValidationError
from sekai_bot.handlers.responses import respond, respond_error
from sekai_bot.models import MonitorBinding
from sekai_bot.state.monitor_registry import MonitorRegistry

logger = logging.getLogger(__name__)

# 5桁だけにマッチする
ROOM_ID_PATTERN = re.compile(r"^[0-9]{5}$")


def parse_channel_id(raw: str) -> str:
    """チャンネル指定の文字列からIDを取り出す

    例: "<#1234567890>" → "1234567890", "#1234567890" → "1234567890"
    """
    s = raw.strip()
    if s.startswith("<#") and s.endswith(">"):
        s = s[2:-1]
    if s.startswith("#"):
        s = s[1:]
    return s


def voice_channel_name(room_id: str) -> str:
    return f"部屋番号【{room_id}】"


def notify_channel_name(room_id: str) -> str:
    return f"🔒│【{room_id}】"


class RoomIdHandler:
    """/roomid と部屋番号投稿のビジネスロジック"""

    def __init__(self, client: discord.Client, registry: MonitorRegistry):
        """初期化

        Args:
            client: チャンネル取得に使うクライアント
            registry: 監視設定レジストリ
        """
        self.client = client
        self.registry = registry

        logger.info("RoomIdHandler initialized")

    async def on_command(
        self,
        interaction: discord.Interaction,
        subcommand: str,
        voice_channel_id: str = "",
        notify_channel_id: str = "",
    ) -> None:
        """/roomid start | end"""
        try:
            if subcommand == "start":
                message = self.start(interaction.channel_id, voice_channel_id, notify_channel_id)
            elif subcommand == "end":
                message = self.end(interaction.channel_id)
            else:
                raise CommandValidationError(f"不明なサブコマンド: {subcommand}")
        except BotError as e:
            await respond_error(interaction, e)
            return

        await respond(interaction, message)

    def start(self, text_channel_id: int | None, raw_voice_id: str, raw_notify_id: str) -> str:
        """監視を開始

        Raises:
            CommandValidationError: チャンネル指定が不正な場合
        """
        if text_channel_id is None:
            raise CommandValidationError("テキストチャンネルでのみ実行できます。")

        voice_id_str = parse_channel_id(raw_voice_id)
        notify_id_str = parse_channel_id(raw_notify_id)
        if not voice_id_str or not notify_id_str:
            raise CommandValidationError("正しいチャンネルIDを指定してください。")

        try:
            voice_id = int(voice_id_str)
            notify_id = int(notify_id_str)
        except ValueError as e:
            raise CommandValidationError(
                "チャンネルIDは数値を指定してください。",
                details={"voice_channel_id": raw_voice_id, "notify_channel_id": raw_notify_id},
            ) from e

        self.registry.start(text_channel_id, voice_id, notify_id)
        return f"監視を開始しました。\n対象チャンネル <#{voice_id}> <#{notify_id}>"

    def end(self, text_channel_id: int | None) -> str:
        if text_channel_id is None:
            raise CommandValidationError("テキストチャンネルでのみ実行できます。")
        self.registry.end(text_channel_id)
        return "監視を終了しました。"

    async def on_message(self, message: discord.Message) -> None:
        """監視対象のテキストチャンネルに5桁の数字が投稿されたときの処理"""
        binding = self.registry.get(message.channel.id)
        if binding is None:
            return
        if message.author.bot:
            return

        room_id = message.content.strip()
        if not ROOM_ID_PATTERN.match(room_id):
            return

        await self.apply_room_id(binding, room_id)

    async def apply_room_id(self, binding: MonitorBinding, room_id: str) -> bool:
        """チャンネル名を変更して通知

        Returns:
            成功した場合True（失敗はログに残して握りつぶす）
        """
        new_voice_name = voice_channel_name(room_id)
        try:
            voice_channel = await self._resolve_channel(binding.voice_channel_id)
            await voice_channel.edit(name=new_voice_name)

            notify_channel = await self._resolve_channel(binding.notify_channel_id)
            await notify_channel.edit(name=notify_channel_name(room_id))

            await notify_channel.send(f"ボイスチャンネルを{new_voice_name}に変更しました。")

        except discord.HTTPException:
            logger.error(
                "Failed to rename channels",
                extra={
                    "room_id": room_id,
                    "voice_channel_id": binding.voice_channel_id,
                    "notify_channel_id": binding.notify_channel_id,
                },
                exc_info=True,
            )
            return False

        logger.info(
            "Room id applied",
            extra={"room_id": room_id, "text_channel_id": binding.text_channel_id}
        )
        return True

    async def _resolve_channel(self, channel_id: int):
        """キャッシュに無ければAPIから取得"""
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        return channel
