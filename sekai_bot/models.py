"""Bot用型定義

計算結果・監視設定・楽曲データなど、Bot内部で受け渡す値の型を定義します。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from typing_extensions import TypedDict


@dataclass(frozen=True)
class ScoreRangeRow:
    """必要ポイントを満たすスコア範囲の1行"""
    bonus_percent: int  # イベントボーナス（%）
    consumption_tier: int  # 炊き数（ライブボーナス消費数）
    score_min: int
    score_max: int

    def render(self) -> str:
        """表示用の1行に整形"""
        return (
            f"{self.bonus_percent}% | {self.consumption_tier} | "
            f"{self.score_min:,} | {self.score_max:,}"
        )


@dataclass
class PaginationState:
    """ページ送り中のメッセージの状態"""
    pages: list[str]
    current_page: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class MonitorBinding:
    """部屋番号監視の設定"""
    text_channel_id: int
    voice_channel_id: int
    notify_channel_id: int


@dataclass(frozen=True)
class SongRecord:
    """楽曲データ（musicDifficulty.json の1要素）"""
    id: int
    title: str
    pronunciation: str
    asset_bundle_name: str
    priority: list[str] = field(default_factory=list)
    compromise: list[str] = field(default_factory=list)
    encore: list[str] = field(default_factory=list)
    music_tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SongRecord:
        """JSONの1要素から生成（キー名はデータファイルに合わせる）"""
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            pronunciation=str(data.get("pronunciation", "")),
            asset_bundle_name=str(data.get("assetbundleName", "")),
            priority=list(data.get("priority") or []),
            compromise=list(data.get("compromise") or []),
            encore=list(data.get("encore") or []),
            music_tags=list(data.get("musicTag") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "pronunciation": self.pronunciation,
            "assetbundleName": self.asset_bundle_name,
            "musicTag": list(self.music_tags),
            "compromise": list(self.compromise),
            "priority": list(self.priority),
            "encore": list(self.encore),
        }


class HealthPayload(TypedDict):
    """セルフPingで受け取るヘルスチェック結果"""
    status: str
    timestamp: str
    uptime: float
