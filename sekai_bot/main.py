"""
Discord Bot メインファイル
"""

import asyncio
import logging
from typing import Optional

import discord
from discord import app_commands

from sekai_bot.catalog.song_catalog import load_song_catalog
from sekai_bot.config import BotSettings, get_settings
from sekai_bot.handlers import (
    CalcHandler,
    CheckRoleHandler,
    EfficiencyHandler,
    PurgeHandler,
    ReadChannelHandler,
    ReminderHandler,
    RoomIdHandler,
)
from sekai_bot.jobs.reminder_job import ReminderJob
from sekai_bot.jobs.self_ping import SelfPingJob
from sekai_bot.router import InteractionRouter
from sekai_bot.state.monitor_registry import MonitorRegistry
from sekai_bot.state.pagination_store import PaginationStore
from sekai_bot.state.reminder_registry import ReminderRegistry
from status_api.main import serve as serve_status_api

# ロガー設定
logger = logging.getLogger(__name__)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True  # 部屋番号の検出に必要
    intents.members = True  # /checkrole のメンバー一覧取得に必要
    return intents


class SekaiBot(discord.Client):
    """コミュニティサーバー管理Bot

    責務:
    - Discord クライアントのライフサイクル管理
    - 状態オブジェクトとハンドラーの生成（依存性注入）
    - イベントルーティング（InteractionRouter への委譲）
    - ギルドごとのコマンド登録
    """

    def __init__(self, settings: Optional[BotSettings] = None) -> None:
        super().__init__(intents=build_intents())
        self.settings = settings or get_settings()
        self.tree: app_commands.CommandTree = app_commands.CommandTree(self)

        # 状態（プロセス内のみ・再起動で消える）
        self.pagination_store = PaginationStore(
            pending_ttl=self.settings.pending_page_ttl,
            max_messages=self.settings.pagination_max_messages,
        )
        self.monitor_registry = MonitorRegistry()
        self.reminder_registry = ReminderRegistry()

        # ハンドラーの初期化（依存性注入）
        self.calc_handler = CalcHandler(
            pagination_store=self.pagination_store,
            page_size=self.settings.page_size,
        )
        self.purge_handler = PurgeHandler(
            min_count=self.settings.purge_min_count,
            max_count=self.settings.purge_max_count,
            max_age_days=self.settings.bulk_delete_max_age_days,
        )
        self.room_id_handler = RoomIdHandler(client=self, registry=self.monitor_registry)
        self.check_role_handler = CheckRoleHandler(
            fetch_limit=self.settings.role_member_fetch_limit,
        )
        self.reminder_handler = ReminderHandler(registry=self.reminder_registry)
        self.efficiency_handler = EfficiencyHandler(
            catalog=load_song_catalog(self.settings.music_data_path),
            jacket_url_template=self.settings.jacket_url_template,
            max_choices=self.settings.autocomplete_max_choices,
            default_choices=self.settings.autocomplete_default_count,
        )
        self.read_channel_handler = ReadChannelHandler(
            client=self,
            channel_id=self.settings.channel_id,
            default_limit=self.settings.read_channel_default_limit,
            max_limit=self.settings.purge_max_count,
        )

        self.router = build_router(self)

        # 定期ジョブ
        self.reminder_job = ReminderJob(
            client=self,
            registry=self.reminder_registry,
            timezone=self.settings.reminder_timezone,
            minute=self.settings.reminder_minute,
            text=self.settings.reminder_text,
        )
        self.self_ping_job: Optional[SelfPingJob] = None
        if self.settings.deploy_url:
            self.self_ping_job = SelfPingJob(
                deploy_url=self.settings.deploy_url,
                interval_minutes=self.settings.self_ping_interval_minutes,
                timeout=self.settings.self_ping_timeout,
            )

        self._http_task: Optional[asyncio.Task] = None

        logger.info("SekaiBot initialized")

    async def setup_hook(self) -> None:
        """起動時にHTTPサーバーと定期ジョブを開始"""
        self._http_task = asyncio.create_task(
            serve_status_api(self.settings.http_host, self.settings.port)
        )
        self.reminder_job.start()
        if self.self_ping_job is not None:
            self.self_ping_job.start()

    async def close(self) -> None:
        if self._http_task is not None:
            self._http_task.cancel()
        await super().close()

    async def sync_guild_commands(self, guild: discord.abc.Snowflake) -> None:
        """ギルドにコマンドを登録（グローバル登録より反映が速い）"""
        try:
            self.tree.copy_global_to(guild=guild)
            commands = await self.tree.sync(guild=guild)
        except discord.HTTPException:
            logger.error(
                "Failed to register commands",
                extra={"guild_id": guild.id},
                exc_info=True,
            )
            return

        logger.info(
            "Registered commands in guild",
            extra={"guild_id": guild.id, "commands": [c.name for c in commands]}
        )

    async def on_ready(self) -> None:
        """Bot起動時の処理"""
        logger.info(
            "Bot is ready. Registering slash commands for existing guilds...",
            extra={"user": str(self.user), "guild_count": len(self.guilds)}
        )
        for guild in self.guilds:
            await self.sync_guild_commands(guild)

    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("Joined new guild", extra={"guild_id": guild.id})
        await self.sync_guild_commands(guild)

    async def on_message(self, message: discord.Message) -> None:
        """メッセージ受信時の処理 - ルーティングのみ"""
        if message.author == self.user:
            return

        try:
            await self.router.dispatch_message(message)
        except Exception as e:
            logger.error(
                "Error handling message",
                extra={"message_id": message.id, "error": str(e)},
                exc_info=True,
            )

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """ボタン操作のルーティング（スラッシュコマンドは CommandTree 経由）"""
        if interaction.type is not discord.InteractionType.component:
            return

        try:
            await self.router.dispatch_component(interaction)
        except Exception as e:
            logger.error(
                "Error handling component",
                extra={"interaction_id": interaction.id, "error": str(e)},
                exc_info=True,
            )


def build_router(bot: SekaiBot) -> InteractionRouter:
    """コマンド名・custom_id とハンドラーの対応表を作成"""
    router = InteractionRouter()
    router.add_command("calc", bot.calc_handler.on_command)
    router.add_command("purge", bot.purge_handler.on_command)
    router.add_command("roomid", bot.room_id_handler.on_command)
    router.add_command("checkrole", bot.check_role_handler.on_command)
    router.add_command("taki", bot.reminder_handler.on_command)
    router.add_command("efficiency", bot.efficiency_handler.on_command)
    router.add_command("readchannel", bot.read_channel_handler.on_command)
    router.add_component("calc:", bot.calc_handler.on_navigate)
    router.add_message_listener(bot.room_id_handler.on_message)
    return router


def register_commands(bot: SekaiBot) -> None:
    """スラッシュコマンドを定義（引数の型チェックはDiscord側で行われる）"""
    tree = bot.tree
    router = bot.router

    @tree.command(name="calc", description="指定したイベントポイントを稼ぐためのスコア範囲を計算します")
    @app_commands.describe(required_points="目標のイベントポイント数 (例: 600)")
    async def calc_command(
        interaction: discord.Interaction,
        required_points: app_commands.Range[int, 0],
    ) -> None:
        await router.dispatch_command("calc", interaction, required_points=required_points)

    @tree.command(name="purge", description="指定した件数のメッセージを一括削除します (1~100)")
    @app_commands.describe(count="削除したいメッセージ数")
    @app_commands.guild_only()
    async def purge_command(interaction: discord.Interaction, count: int) -> None:
        await router.dispatch_command("purge", interaction, count=count)

    roomid = app_commands.Group(
        name="roomid",
        description="5桁番号が投稿されたらボイスチャンネル名を更新します",
        guild_only=True,
    )

    @roomid.command(name="start", description="このテキストチャンネルで監視を開始")
    @app_commands.describe(
        voice_channel_id="番号を設定したいボイスチャンネルID",
        notify_channel_id="番号変更を通知するテキストチャンネルID",
    )
    async def roomid_start(
        interaction: discord.Interaction,
        voice_channel_id: str,
        notify_channel_id: str,
    ) -> None:
        await router.dispatch_command(
            "roomid",
            interaction,
            subcommand="start",
            voice_channel_id=voice_channel_id,
            notify_channel_id=notify_channel_id,
        )

    @roomid.command(name="end", description="このテキストチャンネルでの監視を終了")
    async def roomid_end(interaction: discord.Interaction) -> None:
        await router.dispatch_command("roomid", interaction, subcommand="end")

    tree.add_command(roomid)

    @tree.command(name="checkrole", description="指定したロールを持つメンバーの名前一覧を表示します")
    @app_commands.describe(role="対象のロール")
    @app_commands.guild_only()
    async def checkrole_command(interaction: discord.Interaction, role: discord.Role) -> None:
        await router.dispatch_command("checkrole", interaction, role=role)

    taki = app_commands.Group(
        name="taki",
        description="毎時30分に『炊きましょう🔥』リマインドを開始/終了します",
    )

    @taki.command(name="s", description="リマインド開始")
    async def taki_start(interaction: discord.Interaction) -> None:
        await router.dispatch_command("taki", interaction, subcommand="s")

    @taki.command(name="e", description="リマインド終了")
    async def taki_end(interaction: discord.Interaction) -> None:
        await router.dispatch_command("taki", interaction, subcommand="e")

    tree.add_command(taki)

    @tree.command(name="efficiency", description="楽曲名から効率難易度＆ジャケット画像を表示します")
    @app_commands.describe(title="楽曲名（日本語 / ローマ字 どちらでも可）")
    async def efficiency_command(interaction: discord.Interaction, title: str) -> None:
        await router.dispatch_command("efficiency", interaction, title=title)

    @efficiency_command.autocomplete("title")
    async def efficiency_autocomplete(
        interaction: discord.Interaction,
        current: str,
    ) -> list[app_commands.Choice[str]]:
        return bot.efficiency_handler.autocomplete(current)

    @tree.command(name="readchannel", description="特定チャンネルの最新メッセージを取得します")
    @app_commands.describe(limit="何件取得しますか？ (1～100)")
    async def readchannel_command(
        interaction: discord.Interaction,
        limit: Optional[app_commands.Range[int, 1, 100]] = None,
    ) -> None:
        await router.dispatch_command("readchannel", interaction, limit=limit)


def create_bot(settings: Optional[BotSettings] = None) -> SekaiBot:
    bot = SekaiBot(settings)
    register_commands(bot)
    return bot


def main() -> None:
    """
    メインエントリーポイント：Discord Botを起動する

    環境変数 DISCORD_TOKEN から Bot トークンを読み込み、
    Discord への接続を確立して Bot を実行する。
    """
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logger.info("Starting Discord Bot")
    bot = create_bot(settings)
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
