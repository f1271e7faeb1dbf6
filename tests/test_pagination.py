import math

import pytest

from sekai_bot.ui.pagination import (
    NEXT_CUSTOM_ID,
    PREV_CUSTOM_ID,
    PageNavigationView,
    chunk_lines,
    paginate,
)


@pytest.mark.parametrize("line_count", [1, 7, 8, 9, 16, 17, 40])
def test_page_count_and_round_trip(line_count):
    lines = [f"line {i}" for i in range(line_count)]
    pages = paginate(lines, page_size=8)

    assert len(pages) == math.ceil(line_count / 8)
    assert [line for page in pages for line in page.lines] == lines
    assert [page.number for page in pages] == list(range(1, len(pages) + 1))
    assert all(page.total == len(pages) for page in pages)


def test_navigation_flags():
    pages = paginate([str(i) for i in range(17)], page_size=8)

    assert not pages[0].has_previous
    assert pages[0].has_next
    assert pages[1].has_previous and pages[1].has_next
    assert pages[2].has_previous
    assert not pages[2].has_next


def test_single_page_has_no_navigation():
    (page,) = paginate(["only"], page_size=8)
    assert not page.has_previous
    assert not page.has_next


def test_no_lines_no_pages():
    assert paginate([], page_size=8) == []


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        chunk_lines(["a"], 0)


async def test_view_disables_prev_on_first_page():
    view = PageNavigationView(current_page=0, total_pages=3)

    assert view.previous_button.custom_id == PREV_CUSTOM_ID
    assert view.next_button.custom_id == NEXT_CUSTOM_ID
    assert view.previous_button.disabled
    assert not view.next_button.disabled


async def test_view_disables_next_on_last_page():
    view = PageNavigationView(current_page=2, total_pages=3)

    assert not view.previous_button.disabled
    assert view.next_button.disabled
