"""セルフPingジョブ

スリープするホスティング環境向けに、デプロイ先の /health を定期的に叩きます。
"""

import logging
from typing import Optional

import httpx
from discord.ext import tasks

from sekai_bot.models import HealthPayload

logger = logging.getLogger(__name__)


class SelfPingJob:
    """{deploy_url}/health への定期アクセス"""

    def __init__(self, deploy_url: str, interval_minutes: float = 4, timeout: float = 10.0) -> None:
        self.health_url = f"{deploy_url.rstrip('/')}/health"
        self.timeout = timeout
        self.ping.change_interval(minutes=interval_minutes)

    async def ping_once(self) -> Optional[HealthPayload]:
        """1回だけPingする

        Returns:
            ヘルスチェック結果（失敗時はNone）
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.health_url)
                response.raise_for_status()
                data: HealthPayload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Self-ping failed",
                extra={"url": self.health_url, "error": str(e)},
            )
            return None

        logger.info(
            "Self-ping successful",
            extra={"url": self.health_url, "timestamp": data.get("timestamp")}
        )
        return data

    @tasks.loop(minutes=4)
    async def ping(self) -> None:
        await self.ping_once()

    def start(self) -> None:
        if not self.ping.is_running():
            self.ping.start()
            logger.info("Starting self-ping loop", extra={"url": self.health_url})
