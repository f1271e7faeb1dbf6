"""ステータスAPI設定管理モジュール

HTTPサーバーのホスト・ポートはBot設定（HTTP_HOST / PORT）と共通の環境変数を使う。
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """ステータスAPI設定クラス"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    http_host: str = "0.0.0.0"
    port: int = 8000

    # === ハードコード定数（環境変数不要） ===
    @property
    def api_title(self) -> str:
        return "Sekai Bot Status API"

    @property
    def api_version(self) -> str:
        """APIバージョン"""
        return "1.0.0"

    @property
    def root_message(self) -> str:
        return "Bot is running!"


# グローバル設定インスタンス
_settings: APISettings | None = None


def get_settings() -> APISettings:
    """設定インスタンスを取得（シングルトン）"""
    global _settings
    if _settings is None:
        _settings = APISettings()
    return _settings


def reload_settings() -> APISettings:
    """設定を再読み込み（主にテスト用）"""
    global _settings
    _settings = APISettings()
    return _settings
