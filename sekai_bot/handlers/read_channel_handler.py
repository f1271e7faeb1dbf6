"""/readchannel コマンドハンドラー

設定されたチャンネル（CHANNEL_ID）の最新メッセージを取得して表示します。
"""

import logging
from typing import Optional

import discord

from sekai_bot.exceptions import BotError, CommandValidationError, DiscordAPIError
from sekai_bot.handlers.responses import respond, respond_error

logger = logging.getLogger(__name__)


class ReadChannelHandler:
    """/readchannel のビジネスロジック"""

    def __init__(
        self,
        client: discord.Client,
        channel_id: Optional[int],
        default_limit: int = 10,
        max_limit: int = 100,
    ):
        """初期化

        Args:
            client: チャンネル取得に使うクライアント
            channel_id: 読み取り対象のチャンネルID（未設定ならコマンドは無効）
            default_limit: 件数未指定時の取得件数
            max_limit: 取得件数の上限
        """
        self.client = client
        self.channel_id = channel_id
        self.default_limit = default_limit
        self.max_limit = max_limit

        logger.info(
            "ReadChannelHandler initialized",
            extra={"channel_id": channel_id}
        )

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        return max(1, min(limit, self.max_limit))

    async def on_command(self, interaction: discord.Interaction, limit: Optional[int] = None) -> None:
        """/readchannel [limit]"""
        fetch_limit = self.clamp_limit(limit)
        try:
            if self.channel_id is None:
                raise CommandValidationError("読み取り対象のチャンネルが設定されていません。")

            await interaction.response.defer(thinking=True)
            lines = await self.read_latest(fetch_limit)
        except BotError as e:
            await respond_error(interaction, e)
            return

        body = "\n".join(lines) or "メッセージがありませんでした。"
        await respond(interaction, f"以下が最新{fetch_limit}件のメッセージです:\n{body}")

    async def read_latest(self, limit: int) -> list[str]:
        """
        Returns:
            "[表示名] 本文" 形式の行（新しい順）

        Raises:
            DiscordAPIError: チャンネル・メッセージ取得に失敗した場合
        """
        try:
            channel = self.client.get_channel(self.channel_id)
            if channel is None:
                channel = await self.client.fetch_channel(self.channel_id)
            messages = [m async for m in channel.history(limit=limit)]
        except discord.HTTPException as e:
            logger.error(
                "Error fetching messages",
                extra={"channel_id": self.channel_id},
                exc_info=True,
            )
            raise DiscordAPIError(
                "メッセージ取得でエラーが発生しました。",
                details={"channel_id": self.channel_id, "error": str(e)},
            ) from e

        guild = getattr(channel, "guild", None)
        lines = []
        for message in messages:
            name = await self._display_name(guild, message.author)
            lines.append(f"[{name}] {message.content}")
        return lines

    async def _display_name(self, guild: Optional[discord.Guild], author: discord.abc.User) -> str:
        """ギルドでのニックネーム、無ければユーザー名。取得できなければユーザーID"""
        if guild is None:
            return author.name

        member = guild.get_member(author.id)
        if member is None:
            try:
                member = await guild.fetch_member(author.id)
            except discord.HTTPException:
                # ユーザーが既にサーバーを抜けている等
                logger.info("Cannot fetch member info", extra={"member_id": author.id})
                return str(author.id)

        return member.nick or member.name
