"""部屋番号監視の設定管理

テキストチャンネルごとに、名前を変更するボイスチャンネルと通知先チャンネルを保持します。
"""

import logging
from typing import Optional

from sekai_bot.models import MonitorBinding

logger = logging.getLogger(__name__)


class MonitorRegistry:
    """監視設定レジストリ"""

    def __init__(self) -> None:
        # テキストチャンネルID -> 監視設定
        self._bindings: dict[int, MonitorBinding] = {}

    def start(
        self,
        text_channel_id: int,
        voice_channel_id: int,
        notify_channel_id: int,
    ) -> MonitorBinding:
        """監視を開始（既存の設定は上書き）"""
        binding = MonitorBinding(
            text_channel_id=text_channel_id,
            voice_channel_id=voice_channel_id,
            notify_channel_id=notify_channel_id,
        )
        self._bindings[text_channel_id] = binding
        logger.info(
            "Room id monitor started",
            extra={
                "text_channel_id": text_channel_id,
                "voice_channel_id": voice_channel_id,
                "notify_channel_id": notify_channel_id,
            }
        )
        return binding

    def end(self, text_channel_id: int) -> bool:
        """監視を終了

        Returns:
            監視中だった場合True
        """
        removed = self._bindings.pop(text_channel_id, None)
        if removed:
            logger.info(
                "Room id monitor ended",
                extra={"text_channel_id": text_channel_id}
            )
        return removed is not None

    def get(self, text_channel_id: int) -> Optional[MonitorBinding]:
        return self._bindings.get(text_channel_id)

    def __len__(self) -> int:
        return len(self._bindings)
