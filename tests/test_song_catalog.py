import json

import pytest

from sekai_bot.catalog.song_catalog import SongCatalog, load_song_catalog
from sekai_bot.exceptions import CatalogUnavailableError
from sekai_bot.models import SongRecord


@pytest.fixture
def catalog(songs_file):
    return SongCatalog.from_file(songs_file)


def test_find_by_title_is_case_insensitive(catalog):
    song = catalog.find("tell your world")
    assert song is not None
    assert song.id == 1
    assert song.asset_bundle_name == "jacket_s_001"


def test_find_by_pronunciation(catalog):
    assert catalog.find("ろき").title == "ロキ"


def test_find_trims_whitespace(catalog):
    assert catalog.find("  テオ ").id == 3


def test_find_returns_none_on_miss(catalog):
    assert catalog.find("存在しない曲") is None
    assert catalog.find("") is None


def test_empty_query_returns_first_five(catalog):
    assert [s.id for s in catalog.search("")] == [1, 2, 3, 4, 5]


def test_substring_search_covers_title_and_pronunciation(catalog):
    # "わーるど" は読み、"world" はタイトルにだけ含まれる
    assert [s.id for s in catalog.search("わーるど")] == [1, 5]
    assert [s.id for s in catalog.search("WORLD")] == [1]


def test_search_no_match_is_empty(catalog):
    assert catalog.search("zzz") == []


def test_search_respects_limit():
    songs = [
        SongRecord(id=i, title=f"Song {i}", pronunciation=f"そんぐ{i}", asset_bundle_name="")
        for i in range(40)
    ]
    result = SongCatalog(songs).search("song")
    assert len(result) == 25
    assert [s.id for s in result] == list(range(25))


def test_small_catalog_returns_fewer_defaults():
    songs = [SongRecord(id=1, title="A", pronunciation="a", asset_bundle_name="")]
    assert len(SongCatalog(songs).search("")) == 1


def test_missing_file_raises(tmp_path):
    with pytest.raises(CatalogUnavailableError):
        SongCatalog.from_file(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogUnavailableError):
        SongCatalog.from_file(path)


def test_invalid_utf8_raises(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b'[{"id":1,"title":"\xff\xfe"}]')
    with pytest.raises(CatalogUnavailableError):
        SongCatalog.from_file(path)


def test_unreadable_path_raises(tmp_path):
    # ディレクトリは exists() だが open() できない
    with pytest.raises(CatalogUnavailableError):
        SongCatalog.from_file(tmp_path)


def test_load_song_catalog_returns_none_for_invalid_utf8(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b'[{"id":1,"title":"\xff\xfe"}]')
    assert load_song_catalog(path) is None


def test_non_list_json_raises(tmp_path):
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"id": 1}), encoding="utf-8")
    with pytest.raises(CatalogUnavailableError):
        SongCatalog.from_file(path)


def test_load_song_catalog_returns_none_when_unavailable(tmp_path):
    assert load_song_catalog(tmp_path / "missing.json") is None


def test_load_song_catalog(songs_file):
    assert len(load_song_catalog(songs_file)) == 6
