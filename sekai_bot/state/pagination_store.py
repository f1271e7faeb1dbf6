"""ページ送り状態の管理

/calc の結果ページを、送信したメッセージのIDごとに保持します。

メッセージIDは送信後にしか分からないため、
1. 送信前にインタラクションIDをキーとして stage() し、
2. 送信後にメッセージIDが分かった時点で commit() する
という2段階で登録します。
"""

import logging
import time
from typing import Callable, Literal, Optional

from sekai_bot.models import PaginationState

logger = logging.getLogger(__name__)

Direction = Literal["prev", "next"]


class PaginationStore:
    """ページ送り状態ストア

    再起動で消えるインメモリ状態のみを扱う。
    commit されずに残った stage 済みエントリは、次の stage() 時に TTL を過ぎたものから破棄する。
    commit 済みの状態は max_messages 件を上限とし、超えた分は古いメッセージから破棄する。
    """

    def __init__(
        self,
        pending_ttl: float = 15 * 60.0,
        max_messages: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """初期化

        Args:
            pending_ttl: stage 済みエントリの保持期間（秒）
            max_messages: 保持する commit 済みメッセージ数の上限
            clock: 現在時刻を返す関数（テスト用に差し替え可能）
        """
        self.pending_ttl = pending_ttl
        self.max_messages = max_messages
        self._clock = clock

        # 保留キー -> (登録時刻, ページ)
        self._pending: dict[int, tuple[float, list[str]]] = {}

        # メッセージID -> ページ送り状態（挿入順 = commit 順）
        self._states: dict[int, PaginationState] = {}

        logger.info("PaginationStore initialized")

    def stage(self, pending_key: int, pages: list[str]) -> None:
        """メッセージ送信前にページを仮登録

        Args:
            pending_key: 一時キー（インタラクションID）
            pages: 整形済みのページ
        """
        self.evict_stale_pending()
        self._pending[pending_key] = (self._clock(), list(pages))
        logger.debug(
            "Pages staged",
            extra={"pending_key": pending_key, "page_count": len(pages)}
        )

    def commit(self, pending_key: int, message_id: int) -> bool:
        """仮登録したページをメッセージIDに紐付け直す

        Args:
            pending_key: stage() に渡した一時キー
            message_id: 送信したメッセージのID

        Returns:
            紐付けた場合True（未登録のキーなら何もせずFalse）
        """
        entry = self._pending.pop(pending_key, None)
        if entry is None:
            logger.debug(
                "Commit for unknown pending key ignored",
                extra={"pending_key": pending_key, "message_id": message_id}
            )
            return False

        _, pages = entry
        self._states[message_id] = PaginationState(pages=pages)
        self._evict_oldest_messages()
        logger.info(
            "Pages committed",
            extra={
                "pending_key": pending_key,
                "message_id": message_id,
                "page_count": len(pages),
            }
        )
        return True

    def advance(self, message_id: int, direction: Direction) -> Optional[tuple[str, int, int]]:
        """ページを前後に移動

        Args:
            message_id: ページ送り中のメッセージID
            direction: "prev" または "next"

        Returns:
            (表示するページ, 現在のページ番号(0始まり), 総ページ数)。
            未登録のメッセージならNone。
        """
        state = self._states.get(message_id)
        if state is None or not state.pages:
            return None

        step = -1 if direction == "prev" else 1
        last = state.page_count - 1
        state.current_page = max(0, min(state.current_page + step, last))

        logger.debug(
            "Page advanced",
            extra={
                "message_id": message_id,
                "direction": direction,
                "current_page": state.current_page,
            }
        )

        return state.pages[state.current_page], state.current_page, state.page_count

    def get(self, message_id: int) -> Optional[PaginationState]:
        return self._states.get(message_id)

    def evict_stale_pending(self) -> int:
        """TTLを過ぎた stage 済みエントリを破棄

        Returns:
            破棄した件数
        """
        deadline = self._clock() - self.pending_ttl
        stale = [key for key, (staged_at, _) in self._pending.items() if staged_at < deadline]
        for key in stale:
            del self._pending[key]

        if stale:
            logger.info(
                "Evicted stale pending pages",
                extra={"evicted_count": len(stale)}
            )
        return len(stale)

    def _evict_oldest_messages(self) -> None:
        """上限を超えた commit 済み状態を古い順に破棄"""
        evicted = 0
        while len(self._states) > self.max_messages:
            del self._states[next(iter(self._states))]
            evicted += 1

        if evicted:
            logger.info(
                "Evicted oldest paginated messages",
                extra={"evicted_count": evicted}
            )

    def get_stats(self) -> dict[str, int]:
        """統計情報を取得"""
        return {
            "pending": len(self._pending),
            "messages": len(self._states),
        }
