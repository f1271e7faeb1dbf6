"""/efficiency コマンドハンドラー

楽曲名から効率難易度とジャケット画像を表示します。
"""

import logging
from typing import Optional

import discord
from discord import app_commands

from sekai_bot.catalog.song_catalog import SongCatalog
from sekai_bot.exceptions import BotError, CatalogUnavailableError, CommandValidationError, SongNotFoundError
from sekai_bot.handlers.responses import respond, respond_error
from sekai_bot.models import SongRecord

logger = logging.getLogger(__name__)

NO_MATCH_CHOICE_NAME = "一致する曲が見つかりません"
DEFAULT_JACKET_URL = (
    "https://storage.sekai.best/sekai-jp-assets/music/jacket/{asset}/{asset}.webp"
)


class EfficiencyHandler:
    """/efficiency のビジネスロジック

    責務:
    - 楽曲名（タイトル/読み）からの検索
    - オートコンプリート候補の生成
    - 結果Embedの生成
    """

    def __init__(
        self,
        catalog: Optional[SongCatalog],
        jacket_url_template: str = DEFAULT_JACKET_URL,
        max_choices: int = 25,
        default_choices: int = 5,
    ):
        """初期化

        Args:
            catalog: 楽曲カタログ（読み込めなかった場合はNone）
            jacket_url_template: ジャケット画像URLのテンプレート（{asset} を置換）
            max_choices: オートコンプリート候補の上限
            default_choices: 未入力時の候補数
        """
        self.catalog = catalog
        self.jacket_url_template = jacket_url_template
        self.max_choices = max_choices
        self.default_choices = default_choices

        logger.info(
            "EfficiencyHandler initialized",
            extra={"catalog_loaded": catalog is not None}
        )

    def _require_catalog(self) -> SongCatalog:
        if self.catalog is None:
            raise CatalogUnavailableError("楽曲データが読み込まれていないため利用できません。")
        return self.catalog

    def lookup(self, raw_title: str) -> SongRecord:
        """
        Raises:
            CommandValidationError: 楽曲名が空の場合
            CatalogUnavailableError: 楽曲データが無い場合
            SongNotFoundError: 該当する楽曲が無い場合
        """
        title = (raw_title or "").strip()
        if not title:
            raise CommandValidationError("楽曲名が指定されていません。")

        song = self._require_catalog().find(title)
        if song is None:
            raise SongNotFoundError(
                f"**{title}** が見つかりませんでした。",
                details={"query": title},
            )
        return song

    def build_embed(self, song: SongRecord) -> discord.Embed:
        difficulty = song.priority[0] if song.priority else "情報なし"
        embed = discord.Embed(
            title=song.title,
            description=f"**効率難易度** : {difficulty}",
        )
        if song.asset_bundle_name:
            embed.set_image(url=self.jacket_url_template.format(asset=song.asset_bundle_name))
        return embed

    async def on_command(self, interaction: discord.Interaction, title: str) -> None:
        """/efficiency title"""
        try:
            song = self.lookup(title)
        except BotError as e:
            await respond_error(interaction, e)
            return

        logger.info("Efficiency looked up", extra={"song_id": song.id, "query": title})
        await respond(interaction, embed=self.build_embed(song))

    def autocomplete(self, current: str) -> list[app_commands.Choice[str]]:
        """入力中の文字列から候補を生成"""
        if self.catalog is None:
            return []

        songs = self.catalog.search(
            current,
            limit=self.max_choices,
            default_count=self.default_choices,
        )
        if not songs:
            # 候補が空だとクライアント側で何も表示されないため、入力値をそのまま返す
            value = current[:100]
            return [app_commands.Choice(name=NO_MATCH_CHOICE_NAME, value=value)] if value else []

        return [
            app_commands.Choice(name=song.title[:100], value=song.title[:100])
            for song in songs
        ]
