"""/checkrole コマンドハンドラー

指定したロールを持つメンバーの名前一覧を表示します。
"""

import logging

import discord

from sekai_bot.exceptions import (
    BotError,
    CommandValidationError,
    DiscordAPIError,
    RoleMembersNotFoundError,
)
from sekai_bot.handlers.responses import respond, respond_error

logger = logging.getLogger(__name__)


def display_name(member: discord.Member) -> str:
    """ニックネーム、無ければユーザー名"""
    return member.nick or member.name or "Unknown"


def format_role_members(role_id: int, names: list[str]) -> str:
    """メンバー一覧メッセージを整形"""
    return "\n".join([
        f"**ロールID**: {role_id}",
        f"**メンバー数**: {len(names)}",
        "```",
        *(f"- {name}" for name in names),
        "```",
    ])


class CheckRoleHandler:
    """/checkrole のビジネスロジック"""

    def __init__(self, fetch_limit: int = 1000):
        self.fetch_limit = fetch_limit

        logger.info("CheckRoleHandler initialized")

    async def on_command(self, interaction: discord.Interaction, role: discord.Role) -> None:
        """/checkrole role"""
        try:
            content = await self.list_members(interaction.guild, role)
        except BotError as e:
            await respond_error(interaction, e)
            return

        await respond(interaction, content)

    async def list_members(self, guild: discord.Guild | None, role: discord.Role) -> str:
        """
        Raises:
            CommandValidationError: ギルド外で実行された場合
            RoleMembersNotFoundError: 該当メンバーがいない場合
            DiscordAPIError: メンバー取得に失敗した場合
        """
        if guild is None:
            raise CommandValidationError("このコマンドはギルド内でのみ使用できます。")

        try:
            members = [m async for m in guild.fetch_members(limit=self.fetch_limit)]
        except (discord.HTTPException, discord.ClientException) as e:
            logger.error(
                "Failed to fetch role members",
                extra={"guild_id": guild.id, "role_id": role.id},
                exc_info=True,
            )
            raise DiscordAPIError(
                "メンバー取得に失敗しました。権限や環境を確認してください。",
                details={"guild_id": guild.id, "role_id": role.id, "error": str(e)},
            ) from e

        names = [
            display_name(member)
            for member in members
            if any(r.id == role.id for r in member.roles)
        ]

        if not names:
            raise RoleMembersNotFoundError(
                "このロールを持つメンバーはいません。",
                details={"guild_id": guild.id, "role_id": role.id},
            )

        logger.info(
            "Role members listed",
            extra={"guild_id": guild.id, "role_id": role.id, "member_count": len(names)}
        )
        return format_role_members(role.id, names)
