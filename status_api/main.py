"""Sekai Bot ステータスAPI

稼働監視（アップタイム監視・セルフPing）のためのエンドポイントだけを提供します。
Bot本体のイベントループ上で uvicorn により起動されます。
"""

import asyncio
import logging
import time
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from status_api.config import get_settings
from status_api.models.responses import HealthResponse

logger = logging.getLogger(__name__)

# 設定読み込み
settings = get_settings()

# 起動時刻（uptime計算用）
_started_at = time.monotonic()

# FastAPIアプリケーション初期化
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
)


# === エンドポイント ===

@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """ルートエンドポイント"""
    return settings.root_message


@app.get("/health")
async def health_check() -> HealthResponse:
    """ヘルスチェックエンドポイント

    サービスの稼働状態を確認します。
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.monotonic() - _started_at,
    )


def create_server(host: str | None = None, port: int | None = None) -> uvicorn.Server:
    """Botと同じイベントループで動かすための uvicorn サーバーを作成"""
    config = uvicorn.Config(
        app,
        host=host or settings.http_host,
        port=port or settings.port,
        log_level="warning",
    )
    return uvicorn.Server(config)


async def serve(host: str | None = None, port: int | None = None) -> None:
    """ステータスAPIを起動（キャンセルされるまで戻らない）"""
    server = create_server(host, port)
    logger.info(
        "HTTP server running",
        extra={"host": server.config.host, "port": server.config.port}
    )
    try:
        await server.serve()
    except asyncio.CancelledError:
        server.should_exit = True
        raise
    except (OSError, SystemExit) as e:
        # uvicorn はポート使用中などで SystemExit を送出する
        logger.error(
            "HTTP server closed",
            extra={"error": str(e)},
            exc_info=True,
        )


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    uvicorn.run(
        "status_api.main:app",
        host=settings.http_host,
        port=settings.port,
        log_level="info",
    )
