from types import SimpleNamespace

import pytest

from sekai_bot.router import InteractionRouter


class Recorder:
    """呼び出し引数を記録する非同期ハンドラー"""

    def __init__(self) -> None:
        self.calls = []

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))


async def test_command_dispatched_by_exact_name():
    router = InteractionRouter()
    calc = Recorder()
    router.add_command("calc", calc)

    interaction = SimpleNamespace(id=1)
    assert await router.dispatch_command("calc", interaction, required_points=600)
    assert calc.calls == [((interaction,), {"required_points": 600})]

    assert not await router.dispatch_command("calculate", interaction)
    assert not await router.dispatch_command(None, interaction)
    assert len(calc.calls) == 1


async def test_component_dispatched_by_prefix():
    router = InteractionRouter()
    calc_nav = Recorder()
    router.add_component("calc:", calc_nav)

    interaction = SimpleNamespace(data={"custom_id": "calc:next"})
    assert await router.dispatch_component(interaction)
    assert calc_nav.calls == [((interaction,), {})]


async def test_unmatched_component_is_ignored():
    router = InteractionRouter()
    router.add_component("calc:", Recorder())

    assert not await router.dispatch_component(SimpleNamespace(data={"custom_id": "other:next"}))
    assert not await router.dispatch_component(SimpleNamespace(data={}))
    assert not await router.dispatch_component(SimpleNamespace(data=None))


def test_longest_prefix_wins():
    router = InteractionRouter()
    general, specific = Recorder(), Recorder()
    router.add_component("calc:", general)
    router.add_component("calc:page:", specific)

    assert router.resolve_component("calc:page:next") is specific
    assert router.resolve_component("calc:next") is general


def test_duplicate_registration_rejected():
    router = InteractionRouter()
    router.add_command("calc", Recorder())
    router.add_component("calc:", Recorder())

    with pytest.raises(ValueError):
        router.add_command("calc", Recorder())
    with pytest.raises(ValueError):
        router.add_component("calc:", Recorder())


async def test_message_listeners_called_in_order():
    router = InteractionRouter()
    order = []

    async def first(message):
        order.append(("first", message.id))

    async def second(message):
        order.append(("second", message.id))

    router.add_message_listener(first)
    router.add_message_listener(second)
    await router.dispatch_message(SimpleNamespace(id=7))

    assert order == [("first", 7), ("second", 7)]
