"""レスポンス (ResultSet) の組み立て."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from ffmeta.models import JobRecord, ResultSet
from ffmeta.roles import group_jobs


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _non_empty(rows: Iterable[JobRecord]) -> list[JobRecord]:
    return [r for r in rows if r.job.strip()]


def assemble(
    zone_id: int,
    page_label: str,
    rows: Iterable[JobRecord],
    boss_id: int | str | None = None,
    url: str | None = None,
    boss_name: str | None = None,
) -> ResultSet:
    """スクレイプ結果から ResultSet を組み立てる.

    timestamp はデータ収集時刻ではなくレスポンス組み立て時刻。
    boss_name はボス見出しから取れた場合だけ渡す (ゾーン名で代用しない)。
    """
    return ResultSet(
        zone=zone_id,
        zone_name=page_label,
        boss_name=boss_name if boss_id else None,
        url=url,
        timestamp=now_iso(),
        groups=group_jobs(_non_empty(rows)),
    )


def assemble_stored(record_id: int, payload: dict) -> ResultSet:
    """保存済みペイロードから ResultSet を組み立てる.

    zoneName / bossName / timestamp はペイロードの値をそのまま使う。
    timestamp が無い場合だけ現在時刻を入れる。分類は毎回やり直す。
    """
    rows = [JobRecord.from_dict(d) for d in payload.get("jobs") or [] if isinstance(d, dict)]
    return ResultSet(
        record_id=record_id,
        zone_name=payload.get("zoneName") or "",
        boss_name=payload.get("bossName"),
        timestamp=payload.get("timestamp") or now_iso(),
        groups=group_jobs(_non_empty(rows)),
    )


def to_payload(result: ResultSet) -> dict:
    """ResultSet を保存用ペイロードに変換する (グループは保存しない)."""
    return {
        "zone": result.zone,
        "zoneName": result.zone_name,
        "bossName": result.boss_name,
        "url": result.url,
        "timestamp": result.timestamp,
        "jobs": [r.to_dict() for r in result.all_records()],
    }
