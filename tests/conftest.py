import json

import pytest

from fakes import SONGS


@pytest.fixture
def songs_file(tmp_path):
    path = tmp_path / "musicDifficulty.json"
    path.write_text(json.dumps(SONGS, ensure_ascii=False), encoding="utf-8")
    return path
