"""
楽曲データの読み込みと検索を行うモジュール

musicDifficulty.json を起動時に1度だけ読み込み、
タイトル・読みを小文字化した索引で検索する。
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from sekai_bot.exceptions import CatalogUnavailableError
from sekai_bot.models import SongRecord

logger = logging.getLogger(__name__)


class SongCatalog:
    """楽曲データを保持・検索するクラス"""

    def __init__(self, songs: List[SongRecord]) -> None:
        """
        Args:
            songs: データファイルの並び順どおりの楽曲リスト
        """
        self._songs: List[SongRecord] = list(songs)

        # 同じキーが複数ある場合は先に出現した楽曲を優先
        self._title_index: Dict[str, SongRecord] = {}
        self._pronunciation_index: Dict[str, SongRecord] = {}
        for song in self._songs:
            self._title_index.setdefault(song.title.lower(), song)
            if song.pronunciation:
                self._pronunciation_index.setdefault(song.pronunciation.lower(), song)

    @classmethod
    def from_file(cls, path: str | Path) -> "SongCatalog":
        """
        JSONファイルから楽曲データを読み込む

        Args:
            path: musicDifficulty.json のパス

        Returns:
            読み込んだカタログ

        Raises:
            CatalogUnavailableError: ファイルが存在しない、または不正な形式の場合
        """
        file_path = Path(path)
        if not file_path.exists():
            raise CatalogUnavailableError(
                f"楽曲データが見つかりません: {file_path}",
                details={"path": str(file_path)},
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise CatalogUnavailableError(
                f"楽曲データを読み込めません: {file_path}",
                details={"path": str(file_path), "error": str(e)},
            ) from e
        except ValueError as e:
            # JSONDecodeError / UnicodeDecodeError はどちらも ValueError
            raise CatalogUnavailableError(
                f"楽曲データの形式が不正です: {file_path}",
                details={"path": str(file_path), "error": str(e)},
            ) from e

        if not isinstance(data, list):
            raise CatalogUnavailableError(
                f"楽曲データの形式が不正です: expected list, got {type(data).__name__}",
                details={"path": str(file_path)},
            )

        try:
            songs = [SongRecord.from_dict(entry) for entry in data]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogUnavailableError(
                f"楽曲データに不正な要素があります: {file_path}",
                details={"path": str(file_path), "error": str(e)},
            ) from e

        logger.info(
            "Song catalog loaded",
            extra={"path": str(file_path), "song_count": len(songs)}
        )
        return cls(songs)

    def find(self, query: str) -> Optional[SongRecord]:
        """タイトル、次に読みの完全一致（大文字小文字無視）で検索"""
        key = query.strip().lower()
        if not key:
            return None
        return self._title_index.get(key) or self._pronunciation_index.get(key)

    def search(self, query: str, limit: int = 25, default_count: int = 5) -> List[SongRecord]:
        """
        オートコンプリート用の部分一致検索

        Args:
            query: 入力中の文字列
            limit: 返す最大件数
            default_count: 未入力時に返す件数

        Returns:
            データファイルの並び順で、タイトルか読みに query を含む楽曲
        """
        key = query.strip().lower()
        if not key:
            return self._songs[:default_count]

        matches: List[SongRecord] = []
        for song in self._songs:
            if key in song.title.lower() or key in song.pronunciation.lower():
                matches.append(song)
                if len(matches) >= limit:
                    break
        return matches

    def __len__(self) -> int:
        return len(self._songs)


def load_song_catalog(path: str | Path) -> Optional[SongCatalog]:
    """
    楽曲データを読み込む。読み込めない場合は /efficiency だけを無効にするためNoneを返す。
    """
    try:
        return SongCatalog.from_file(path)
    except CatalogUnavailableError as e:
        logger.warning(
            "Song catalog unavailable; /efficiency is disabled",
            extra={"error": e.message, **e.details}
        )
        return None
