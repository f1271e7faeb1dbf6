#!/usr/bin/env python3
"""
楽曲データ更新スクリプト

楽曲マスタ・楽曲タグ・効率表（Googleスプレッドシート）を取得し、
/efficiency が読み込む musicDifficulty.json を更新する。

効率表の行は、タイトル完全一致 → NFKC正規化後の一致 → 編集距離による類似度 の順で対応付ける。
既に効率情報が入っている楽曲は上書きしない。

Usage:
    python -m tools.update_difficulty
"""

import asyncio
import json
import logging
import re
import sys
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from sekai_bot.models import SongRecord
from tools.config import ToolSettings

logger = logging.getLogger(__name__)

GVIZ_PATTERN = re.compile(r"setResponse\(([\s\S]+)\);")


class DatasetFetchError(Exception):
    """楽曲データ・効率表の取得エラー"""
    pass


@dataclass(frozen=True)
class EfficiencyRow:
    """効率表の1行"""
    title: str
    compromise: str
    priority: str
    encore: str


@dataclass
class MergeReport:
    """更新結果の集計"""
    missing_before: int = 0  # 既存データで効率情報が空だった楽曲数
    missing_after: int = 0  # 更新後も効率情報が空の楽曲数


def normalize(s: str) -> str:
    return unicodedata.normalize("NFKC", s).strip().lower()


def levenshtein(a: str, b: str) -> int:
    """編集距離"""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """正規化した文字列の類似度 (0.0〜1.0)"""
    na, nb = normalize(a), normalize(b)
    longest = max(len(na), len(nb))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(na, nb) / longest


def parse_gviz_response(text: str) -> list[EfficiencyRow]:
    """gviz (tqx=out:json) 形式のレスポンスを効率表の行に変換

    1行目はヘッダーとして読み飛ばす。

    Raises:
        DatasetFetchError: 想定外の形式の場合
    """
    match = GVIZ_PATTERN.search(text)
    if not match:
        raise DatasetFetchError("Unexpected sheet format")

    try:
        data = json.loads(match.group(1))
        rows = data["table"]["rows"][1:]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise DatasetFetchError(f"Unexpected sheet format: {e}") from e

    def cell(cells: list[Optional[dict[str, Any]]], index: int) -> str:
        if index >= len(cells) or not cells[index]:
            return ""
        value = cells[index].get("v")
        return "" if value is None else str(value)

    result = []
    for row in rows:
        cells = row.get("c") or []
        result.append(EfficiencyRow(
            title=cell(cells, 0),
            compromise=cell(cells, 1),
            priority=cell(cells, 2),
            encore=cell(cells, 4),
        ))
    return result


def find_efficiency(
    title: str,
    sheet: dict[str, EfficiencyRow],
    threshold: float = 0.8,
) -> Optional[EfficiencyRow]:
    """タイトルに対応する効率表の行を探す"""
    row = sheet.get(title)
    if row:
        return row

    normalized = normalize(title)
    for key, candidate in sheet.items():
        if normalize(key) == normalized:
            return candidate

    best_key, best_sim = "", 0.0
    for key in sheet:
        sim = similarity(title, key)
        if sim > best_sim:
            best_key, best_sim = key, sim
    if best_sim >= threshold:
        return sheet[best_key]
    return None


def _merge_records(
    musics: list[dict[str, Any]],
    tags: list[dict[str, Any]],
    sheet_rows: list[EfficiencyRow],
    existing: list[SongRecord],
    threshold: float = 0.8,
) -> tuple[list[SongRecord], MergeReport]:
    """統合処理の本体（入力不正による例外は merge_records で変換する）"""
    tag_map: dict[int, list[str]] = {}
    for tag in tags:
        tag_map.setdefault(int(tag["musicId"]), []).append(str(tag["musicTag"]))

    sheet: dict[str, EfficiencyRow] = {}
    for row in sheet_rows:
        sheet[row.title] = row

    existing_map = {record.title: record for record in existing}
    report = MergeReport()
    merged: list[SongRecord] = []

    for music in musics:
        title = str(music["title"])
        compromise: list[str] = []
        priority: list[str] = []
        encore: list[str] = []

        previous = existing_map.get(title)
        if previous:
            compromise = list(previous.compromise)
            priority = list(previous.priority)
            encore = list(previous.encore)
            if not previous.compromise:
                report.missing_before += 1

        if not compromise:
            eff = find_efficiency(title, sheet, threshold)
            if eff:
                compromise = [eff.compromise]
                priority = [eff.priority]
                encore = [eff.encore]
            else:
                report.missing_after += 1
                logger.info("Efficiency not found", extra={"title": title})

        merged.append(SongRecord(
            id=int(music["id"]),
            title=title,
            pronunciation=str(music.get("pronunciation", "")),
            asset_bundle_name=str(music.get("assetbundleName", "")),
            priority=priority,
            compromise=compromise,
            encore=encore,
            music_tags=tag_map.get(int(music["id"]), []),
        ))

    return merged, report


def merge_records(
    musics: list[dict[str, Any]],
    tags: list[dict[str, Any]],
    sheet_rows: list[EfficiencyRow],
    existing: list[SongRecord],
    threshold: float = 0.8,
) -> tuple[list[SongRecord], MergeReport]:
    """楽曲マスタを基準に、タグ・既存の効率情報・効率表を統合する

    Raises:
        DatasetFetchError: 楽曲マスタ・タグに必須キーの欠けた要素や不正な値がある場合
    """
    try:
        return _merge_records(musics, tags, sheet_rows, existing, threshold)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DatasetFetchError(f"Malformed upstream entry: {e!r}") from e


def load_existing(path: Path) -> list[SongRecord]:
    """既存の musicDifficulty.json を読み込む（無ければ空）"""
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            return [SongRecord.from_dict(entry) for entry in json.load(f)]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable dataset", extra={"path": str(path), "error": str(e)})
        return []


def write_records(path: Path, records: list[SongRecord]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise DatasetFetchError(f"Failed to fetch {url}: {e}") from e


async def fetch_efficiency(client: httpx.AsyncClient, settings: ToolSettings) -> list[EfficiencyRow]:
    params = {"tqx": "out:json", "sheet": settings.sheet_name, "range": settings.sheet_range}
    try:
        response = await client.get(settings.sheet_url, params=params)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise DatasetFetchError(f"Failed to fetch sheet: {e}") from e
    return parse_gviz_response(response.text)


async def run(settings: ToolSettings) -> MergeReport:
    async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as client:
        musics, tags, sheet_rows = await asyncio.gather(
            fetch_json(client, settings.music_info_url),
            fetch_json(client, settings.music_tag_url),
            fetch_efficiency(client, settings),
        )

    path = Path(settings.music_data_path)
    merged, report = merge_records(
        musics,
        tags,
        sheet_rows,
        load_existing(path),
        threshold=settings.similarity_threshold,
    )
    write_records(path, merged)
    return report


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        report = asyncio.run(run(ToolSettings()))
    except DatasetFetchError as e:
        logger.error("Update failed: %s", e)
        return 1

    logger.info(
        "✔ 更新完了 - 更新対象となった空コンプライス数: %d / 更新後も未登録残存数: %d",
        report.missing_before,
        report.missing_after,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
