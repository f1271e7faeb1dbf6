"""ページ送りUIコンポーネント

行リストのページ分割と、「◀ 前へ」「次へ ▶」ボタンを持つViewを提供します。
"""

import logging
from dataclasses import dataclass

import discord
from discord.ui import Button, View

logger = logging.getLogger(__name__)

# ボタンの custom_id は "calc:" 名前空間でルーティングされる
PREV_CUSTOM_ID = "calc:prev"
NEXT_CUSTOM_ID = "calc:next"


@dataclass(frozen=True)
class Page:
    """1ページ分の行と位置情報"""
    number: int  # 1始まり
    total: int
    lines: tuple[str, ...]

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total


def chunk_lines(lines: list[str], chunk_size: int) -> list[list[str]]:
    """行配列を指定した数ずつに分割する"""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive: {chunk_size}")
    return [lines[i:i + chunk_size] for i in range(0, len(lines), chunk_size)]


def paginate(lines: list[str], page_size: int = 8) -> list[Page]:
    """行リストをページに分割

    Args:
        lines: 表示する行
        page_size: 1ページあたりの行数

    Returns:
        ページのリスト（行が無ければ空）
    """
    chunks = chunk_lines(lines, page_size)
    total = len(chunks)
    return [
        Page(number=i + 1, total=total, lines=tuple(chunk))
        for i, chunk in enumerate(chunks)
    ]


class PageNavigationView(View):
    """ページ送りボタンを持つView

    ボタン押下は on_interaction 経由で InteractionRouter が処理するため、
    このViewはボタンの表示と有効/無効の切り替えだけを担う。
    """

    def __init__(self, current_page: int, total_pages: int):
        """初期化

        Args:
            current_page: 表示中のページ（0始まり）
            total_pages: 総ページ数
        """
        super().__init__()

        self.add_item(
            Button(
                style=discord.ButtonStyle.primary,
                label="◀ 前へ",
                custom_id=PREV_CUSTOM_ID,
                disabled=current_page <= 0,
            )
        )
        self.add_item(
            Button(
                style=discord.ButtonStyle.primary,
                label="次へ ▶",
                custom_id=NEXT_CUSTOM_ID,
                disabled=current_page >= total_pages - 1,
            )
        )

        logger.debug(
            "PageNavigationView created",
            extra={"current_page": current_page, "total_pages": total_pages}
        )

    @property
    def previous_button(self) -> Button:
        return self.children[0]

    @property
    def next_button(self) -> Button:
        return self.children[1]
