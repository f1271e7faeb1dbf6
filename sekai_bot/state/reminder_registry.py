"""リマインド送信先の管理"""

import logging

logger = logging.getLogger(__name__)


class ReminderRegistry:
    """「炊きましょう」リマインドを購読しているチャンネルの集合"""

    def __init__(self) -> None:
        self._channel_ids: set[int] = set()

    def subscribe(self, channel_id: int) -> None:
        self._channel_ids.add(channel_id)
        logger.info("Reminder subscribed", extra={"channel_id": channel_id})

    def unsubscribe(self, channel_id: int) -> None:
        self._channel_ids.discard(channel_id)
        logger.info("Reminder unsubscribed", extra={"channel_id": channel_id})

    def channel_ids(self) -> list[int]:
        """送信中に購読状態が変わっても良いようにコピーを返す"""
        return sorted(self._channel_ids)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._channel_ids

    def __len__(self) -> int:
        return len(self._channel_ids)
