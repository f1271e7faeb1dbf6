"""Bot設定管理モジュール

必須なのは DISCORD_TOKEN のみ。任意の環境変数が無い場合は
対応する機能だけが無効になる。
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Bot設定クラス

    環境変数（または .env / .env.local）から設定を読み込み、型チェックとバリデーションを実行します。
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # === 環境変数 ===
    discord_token: str
    channel_id: Optional[int] = None  # /readchannel の読み取り対象
    deploy_url: Optional[str] = None  # セルフPing先（未設定なら無効）
    http_host: str = "0.0.0.0"
    port: int = 8000
    music_data_path: str = "musicDifficulty.json"
    log_level: str = "INFO"

    # === ハードコード定数（環境変数不要） ===
    @property
    def page_size(self) -> int:
        """/calc の1ページあたりの行数"""
        return 8

    @property
    def pending_page_ttl(self) -> float:
        """メッセージID確定前のページ保持期間（秒）"""
        return 15 * 60.0

    @property
    def pagination_max_messages(self) -> int:
        """ページ送り状態を保持するメッセージ数の上限"""
        return 1000

    @property
    def reminder_timezone(self) -> str:
        return "Asia/Tokyo"

    @property
    def reminder_minute(self) -> int:
        """リマインドを送る「分」"""
        return 30

    @property
    def reminder_text(self) -> str:
        return "炊きましょう🔥"

    @property
    def purge_min_count(self) -> int:
        return 1

    @property
    def purge_max_count(self) -> int:
        """Bulk Delete APIの上限"""
        return 100

    @property
    def bulk_delete_max_age_days(self) -> int:
        """Bulk Delete できるメッセージの最大経過日数"""
        return 14

    @property
    def read_channel_default_limit(self) -> int:
        return 10

    @property
    def self_ping_interval_minutes(self) -> int:
        return 4

    @property
    def self_ping_timeout(self) -> float:
        """セルフPingのタイムアウト（秒）"""
        return 10.0

    @property
    def autocomplete_default_count(self) -> int:
        """未入力時に表示する候補数"""
        return 5

    @property
    def autocomplete_max_choices(self) -> int:
        """Discordのオートコンプリート候補の上限"""
        return 25

    @property
    def role_member_fetch_limit(self) -> int:
        return 1000

    @property
    def jacket_url_template(self) -> str:
        return (
            "https://storage.sekai.best/sekai-jp-assets/music/jacket/"
            "{asset}/{asset}.webp"
        )


# グローバル設定インスタンス
_settings: BotSettings | None = None


def get_settings() -> BotSettings:
    """設定インスタンスを取得（シングルトン）"""
    global _settings
    if _settings is None:
        _settings = BotSettings()
    return _settings


def reload_settings() -> BotSettings:
    """設定を再読み込み（主にテスト用）"""
    global _settings
    _settings = BotSettings()
    return _settings
