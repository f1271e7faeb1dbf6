"""データ更新ツールの設定

楽曲マスタ・タグのJSONと効率表スプレッドシートの取得先を環境変数から読み込む。
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolSettings(BaseSettings):
    """データ更新ツール設定クラス"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    music_info_url: str
    music_tag_url: str
    spreadsheet_id: str
    sheet_name: str = "効率表"
    music_data_path: str = "musicDifficulty.json"

    @property
    def sheet_range(self) -> str:
        return "B1:F"

    @property
    def similarity_threshold(self) -> float:
        """あいまい一致とみなす類似度の下限"""
        return 0.8

    @property
    def request_timeout(self) -> float:
        return 30.0

    @property
    def sheet_url(self) -> str:
        return f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_id}/gviz/tq"
