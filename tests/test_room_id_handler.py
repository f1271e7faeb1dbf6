from types import SimpleNamespace

import pytest

from fakes import make_http_exception, make_interaction

from sekai_bot.exceptions import CommandValidationError
from sekai_bot.handlers.room_id_handler import RoomIdHandler, parse_channel_id
from sekai_bot.state.monitor_registry import MonitorRegistry


class FakeChannel:
    def __init__(self, channel_id: int) -> None:
        self.id = channel_id
        self.name = ""
        self.sent: list[str] = []
        self.edit_error: Exception | None = None

    async def edit(self, name: str) -> None:
        if self.edit_error is not None:
            raise self.edit_error
        self.name = name

    async def send(self, content: str) -> None:
        self.sent.append(content)


class FakeClient:
    """get_channel はキャッシュ、fetch_channel はAPI取得を模倣"""

    def __init__(self, cached: list[FakeChannel], remote: list[FakeChannel] = ()) -> None:
        self.cached = {c.id: c for c in cached}
        self.remote = {c.id: c for c in remote}
        self.fetched: list[int] = []

    def get_channel(self, channel_id: int):
        return self.cached.get(channel_id)

    async def fetch_channel(self, channel_id: int):
        self.fetched.append(channel_id)
        return self.remote[channel_id]


def _message(channel_id: int, content: str, bot: bool = False):
    return SimpleNamespace(
        channel=SimpleNamespace(id=channel_id),
        content=content,
        author=SimpleNamespace(bot=bot),
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("<#1234567890>", "1234567890"),
        ("#1234567890", "1234567890"),
        ("  1234567890 ", "1234567890"),
        ("", ""),
    ],
)
def test_parse_channel_id(raw, expected):
    assert parse_channel_id(raw) == expected


def test_start_registers_binding():
    registry = MonitorRegistry()
    handler = RoomIdHandler(FakeClient([]), registry)

    message = handler.start(100, "<#200>", "#300")

    binding = registry.get(100)
    assert (binding.voice_channel_id, binding.notify_channel_id) == (200, 300)
    assert message == "監視を開始しました。\n対象チャンネル <#200> <#300>"


@pytest.mark.parametrize(
    "text_channel, voice, notify",
    [(None, "200", "300"), (100, "", "300"), (100, "abc", "300")],
)
def test_start_rejects_invalid_arguments(text_channel, voice, notify):
    registry = MonitorRegistry()
    with pytest.raises(CommandValidationError):
        RoomIdHandler(FakeClient([]), registry).start(text_channel, voice, notify)
    assert len(registry) == 0


async def test_end_command_removes_binding():
    registry = MonitorRegistry()
    registry.start(2001, 200, 300)
    interaction = make_interaction(channel_id=2001)

    await RoomIdHandler(FakeClient([]), registry).on_command(interaction, subcommand="end")

    assert registry.get(2001) is None
    assert interaction.response.sent == [{"content": "監視を終了しました。", "ephemeral": False}]


async def test_start_command_with_bad_id_is_ephemeral():
    interaction = make_interaction()

    await RoomIdHandler(FakeClient([]), MonitorRegistry()).on_command(
        interaction, subcommand="start", voice_channel_id="voice", notify_channel_id="300"
    )

    assert interaction.response.sent == [{"content": "チャンネルIDは数値を指定してください。", "ephemeral": True}]


async def test_room_id_renames_channels_and_notifies():
    voice, notify = FakeChannel(200), FakeChannel(300)
    client = FakeClient([voice], remote=[notify])
    registry = MonitorRegistry()
    registry.start(100, 200, 300)

    await RoomIdHandler(client, registry).on_message(_message(100, "12345"))

    assert voice.name == "部屋番号【12345】"
    assert notify.name == "🔒│【12345】"
    assert notify.sent == ["ボイスチャンネルを部屋番号【12345】に変更しました。"]
    assert client.fetched == [300]


@pytest.mark.parametrize("content", ["1234", "123456", "12a45", "部屋 12345"])
async def test_non_room_id_messages_ignored(content):
    voice, notify = FakeChannel(200), FakeChannel(300)
    registry = MonitorRegistry()
    registry.start(100, 200, 300)

    await RoomIdHandler(FakeClient([voice, notify]), registry).on_message(_message(100, content))

    assert voice.name == "" and notify.sent == []


async def test_unmonitored_channel_ignored():
    voice = FakeChannel(200)
    registry = MonitorRegistry()
    registry.start(100, 200, 300)

    await RoomIdHandler(FakeClient([voice]), registry).on_message(_message(999, "12345"))

    assert voice.name == ""


async def test_rename_failure_is_logged_not_raised():
    voice, notify = FakeChannel(200), FakeChannel(300)
    voice.edit_error = make_http_exception(403)
    registry = MonitorRegistry()
    binding = registry.start(100, 200, 300)

    handler = RoomIdHandler(FakeClient([voice, notify]), registry)

    assert not await handler.apply_room_id(binding, "12345")
    assert notify.sent == []
