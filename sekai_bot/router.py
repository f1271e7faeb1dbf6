"""インタラクションルーター

受信したイベントを、コマンド名（完全一致）または custom_id（前方一致）で
ただ1つのハンドラーへ振り分けます。該当しないイベントは無視します。
"""

import logging
from typing import Any, Awaitable, Callable, Optional

import discord

logger = logging.getLogger(__name__)

InteractionCallback = Callable[..., Awaitable[Any]]
MessageCallback = Callable[[discord.Message], Awaitable[Any]]


class InteractionRouter:
    """コマンド名・custom_id 前方一致・メッセージリスナーのルーティングテーブル"""

    def __init__(self) -> None:
        self._commands: dict[str, InteractionCallback] = {}
        self._component_prefixes: list[tuple[str, InteractionCallback]] = []
        self._message_listeners: list[MessageCallback] = []

    def add_command(self, name: str, callback: InteractionCallback) -> None:
        if name in self._commands:
            raise ValueError(f"Command already registered: {name}")
        self._commands[name] = callback

    def add_component(self, prefix: str, callback: InteractionCallback) -> None:
        """custom_id の前方一致で呼ばれるハンドラーを登録

        より長い（具体的な）プレフィックスが優先される。
        """
        if any(existing == prefix for existing, _ in self._component_prefixes):
            raise ValueError(f"Component prefix already registered: {prefix}")
        self._component_prefixes.append((prefix, callback))
        self._component_prefixes.sort(key=lambda item: len(item[0]), reverse=True)

    def add_message_listener(self, callback: MessageCallback) -> None:
        self._message_listeners.append(callback)

    def resolve_command(self, name: Optional[str]) -> Optional[InteractionCallback]:
        if not name:
            return None
        return self._commands.get(name)

    def resolve_component(self, custom_id: Optional[str]) -> Optional[InteractionCallback]:
        if not custom_id:
            return None
        for prefix, callback in self._component_prefixes:
            if custom_id.startswith(prefix):
                return callback
        return None

    async def dispatch_command(
        self,
        name: Optional[str],
        interaction: discord.Interaction,
        **options: Any,
    ) -> bool:
        """コマンド名でハンドラーを呼び出す

        Returns:
            ハンドラーが見つかった場合True
        """
        callback = self.resolve_command(name)
        if callback is None:
            logger.debug("Unrouted command ignored", extra={"command": name})
            return False
        await callback(interaction, **options)
        return True

    async def dispatch_component(self, interaction: discord.Interaction) -> bool:
        """ボタン等のコンポーネント操作を custom_id でハンドラーへ振り分ける"""
        data = interaction.data or {}
        custom_id = data.get("custom_id")
        callback = self.resolve_component(custom_id)
        if callback is None:
            logger.debug("Unrouted component ignored", extra={"custom_id": custom_id})
            return False
        await callback(interaction)
        return True

    async def dispatch_message(self, message: discord.Message) -> None:
        """全メッセージリスナーへ順に通知"""
        for listener in self._message_listeners:
            await listener(message)
