"""APIレスポンスの型定義"""

from typing_extensions import TypedDict


class HealthResponse(TypedDict):
    """ヘルスチェックレスポンス"""
    status: str
    timestamp: str  # ISO 8601 (UTC)
    uptime: float  # 起動からの経過秒数
