"""定期リマインドジョブ

1分ごとに時刻を確認し、指定の「分」であれば購読中の全チャンネルへ送信します。
処理が遅れてその分を過ぎた場合、その回のリマインドは送られません。
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

import discord
from discord.ext import tasks

from sekai_bot.state.reminder_registry import ReminderRegistry

logger = logging.getLogger(__name__)


class ReminderJob:
    """毎時の「炊きましょう」リマインド"""

    def __init__(
        self,
        client: discord.Client,
        registry: ReminderRegistry,
        timezone: str = "Asia/Tokyo",
        minute: int = 30,
        text: str = "炊きましょう🔥",
    ) -> None:
        self.client = client
        self.registry = registry
        self.tz = ZoneInfo(timezone)
        self.minute = minute
        self.text = text

    def is_due(self, now: datetime) -> bool:
        """1分間隔のティックのうち、対象の「分」に入った1回だけTrue"""
        return now.astimezone(self.tz).minute == self.minute

    async def send_reminders(self) -> int:
        """購読中の全チャンネルへ送信

        Returns:
            送信に成功したチャンネル数
        """
        sent = 0
        for channel_id in self.registry.channel_ids():
            try:
                channel = self.client.get_channel(channel_id)
                if channel is None:
                    channel = await self.client.fetch_channel(channel_id)
                await channel.send(self.text)
                sent += 1
            except discord.HTTPException:
                logger.error(
                    "Failed to send reminder",
                    extra={"channel_id": channel_id},
                    exc_info=True,
                )
        return sent

    @tasks.loop(seconds=60)
    async def tick(self) -> None:
        now = datetime.now(self.tz)
        if not self.is_due(now):
            return

        sent = await self.send_reminders()
        logger.info(
            "Reminder tick fired",
            extra={"sent_count": sent, "subscribed_count": len(self.registry)}
        )

    @tick.before_loop
    async def before_tick(self) -> None:
        await self.client.wait_until_ready()

    def start(self) -> None:
        """多重起動しない"""
        if not self.tick.is_running():
            self.tick.start()
            logger.info("Reminder job started", extra={"minute": self.minute})
