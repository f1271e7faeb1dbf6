import httpx

from sekai_bot.jobs import self_ping
from sekai_bot.jobs.self_ping import SelfPingJob


def _patch_transport(monkeypatch, handler):
    """SelfPingJob が作る AsyncClient の通信先をモックに差し替える"""
    original = httpx.AsyncClient

    def factory(**kwargs):
        return original(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(self_ping.httpx, "AsyncClient", factory)


def test_health_url_strips_trailing_slash():
    assert SelfPingJob("https://bot.example/").health_url == "https://bot.example/health"
    assert SelfPingJob("https://bot.example").health_url == "https://bot.example/health"


async def test_ping_once_returns_payload(monkeypatch):
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(
            200,
            json={"status": "ok", "timestamp": "2025-01-01T00:00:00+00:00", "uptime": 12.5},
        )

    _patch_transport(monkeypatch, handler)

    payload = await SelfPingJob("https://bot.example").ping_once()

    assert payload == {"status": "ok", "timestamp": "2025-01-01T00:00:00+00:00", "uptime": 12.5}
    assert requested == ["https://bot.example/health"]


async def test_ping_once_failure_returns_none(monkeypatch):
    _patch_transport(monkeypatch, lambda request: httpx.Response(503))

    assert await SelfPingJob("https://bot.example").ping_once() is None


async def test_ping_once_connection_error_returns_none(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _patch_transport(monkeypatch, handler)

    assert await SelfPingJob("https://bot.example").ping_once() is None
