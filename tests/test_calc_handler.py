from types import SimpleNamespace

from fakes import make_interaction

from sekai_bot.handlers.calc_handler import (
    EXPIRED_MESSAGE,
    NO_RESULT_MESSAGE,
    TABLE_HEADER,
    CalcHandler,
)
from sekai_bot.state.pagination_store import PaginationStore
from sekai_bot.ui.pagination import PageNavigationView


def test_build_pages_layout():
    handler = CalcHandler(PaginationStore(), page_size=8)
    pages = handler.build_pages(1000)

    assert len(pages) > 1
    first = pages[0].split("\n")
    assert first[0] == f"**必要PT**: 1000 | Page 1/{len(pages)}"
    assert first[1] == "```"
    assert first[2] == TABLE_HEADER
    assert first[-1] == "```"
    assert len(first) == 8 + 4


def test_build_pages_empty_when_unreachable():
    assert CalcHandler(PaginationStore()).build_pages(30000) == []


async def test_on_command_sends_first_page_and_commits():
    store = PaginationStore()
    handler = CalcHandler(store)
    interaction = make_interaction(id=42)

    await handler.on_command(interaction, required_points=1000)

    (sent,) = interaction.response.sent
    assert sent["content"].startswith("**必要PT**: 1000 | Page 1/")
    assert isinstance(sent["view"], PageNavigationView)
    assert sent["view"].previous_button.disabled

    # インタラクションID 42 → メッセージID 5001 に付け替えられている
    assert store.get(5001) is not None
    assert store.get_stats()["pending"] == 0


async def test_on_command_without_results():
    store = PaginationStore()
    interaction = make_interaction()

    await CalcHandler(store).on_command(interaction, required_points=0)

    assert interaction.response.sent == [{"content": NO_RESULT_MESSAGE, "ephemeral": False}]
    assert store.get_stats() == {"pending": 0, "messages": 0}


async def test_on_navigate_edits_message():
    store = PaginationStore()
    handler = CalcHandler(store)
    await handler.on_command(make_interaction(id=42), required_points=1000)
    total = store.get(5001).page_count

    interaction = make_interaction(
        data={"custom_id": "calc:next"},
        message=SimpleNamespace(id=5001),
    )
    await handler.on_navigate(interaction)

    (edit,) = interaction.response.edits
    assert edit["content"].startswith(f"**必要PT**: 1000 | Page 2/{total}")
    assert not edit["view"].previous_button.disabled


async def test_on_navigate_unknown_message():
    interaction = make_interaction(
        data={"custom_id": "calc:prev"},
        message=SimpleNamespace(id=777),
    )
    await CalcHandler(PaginationStore()).on_navigate(interaction)

    assert interaction.response.sent == [{"content": EXPIRED_MESSAGE, "ephemeral": True}]


async def test_on_navigate_ignores_unknown_direction():
    interaction = make_interaction(
        data={"custom_id": "calc:last"},
        message=SimpleNamespace(id=5001),
    )
    await CalcHandler(PaginationStore()).on_navigate(interaction)

    assert interaction.response.sent == []
    assert interaction.response.edits == []
