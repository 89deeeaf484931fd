"""表示用の数値計算 (人気シェア・ベスト比・バー幅)."""

from __future__ import annotations

import math
from urllib.parse import parse_qs, urlparse

from ffmeta.models import JobRecord, ResultSet


def parse_number(text: str | None) -> float | None:
    """桁区切り付きテキストを数値にする. 解釈できなければ None."""
    if text is None:
        return None
    cleaned = str(text).replace(",", "").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def is_boss_result(result: ResultSet) -> bool:
    """ボス単位の結果 (score が DPS) かどうか."""
    if result.url:
        return "boss" in parse_qs(urlparse(result.url).query)
    return bool(result.boss_name)


def popularity_shares(records: list[JobRecord]) -> list[float]:
    """グループ内の count 合計に対する各ジョブのシェア (%)."""
    counts = [parse_number(r.count) or 0 for r in records]
    total = sum(counts)
    if total <= 0:
        return [0.0 for _ in records]
    return [c / total * 100 for c in counts]


def best_record(records: list[JobRecord]) -> JobRecord | None:
    best = None
    best_value = None
    for r in records:
        value = parse_number(r.score)
        if value is None:
            continue
        if best_value is None or value > best_value:
            best, best_value = r, value
    return best


def percent_of_best(record: JobRecord, best: JobRecord | None) -> float:
    if best is None:
        return 0.0
    value = parse_number(record.score)
    best_value = parse_number(best.score)
    if value is None or not best_value or best_value <= 0:
        return 0.0
    return value / best_value * 100


def max_boss_score(result: ResultSet) -> float:
    """全グループ通しての最大 DPS (0 除算回避のため最低 1)."""
    values = [parse_number(r.score) or 0 for r in result.all_records()]
    return max([1.0, *values])


def bar_width(record: JobRecord, boss_page: bool, max_score: float = 100.0) -> float:
    """バーの幅 (%). ゾーン単位はスコアそのもの、ボス単位は最大 DPS 比."""
    value = parse_number(record.score)
    if value is None:
        return 0.0
    if boss_page:
        value = value / max_score * 100
    return max(0.0, min(value, 100.0))


def summarize(result: ResultSet) -> dict:
    """グループごとの表示用指標をまとめる."""
    boss_page = is_boss_result(result)
    max_score = max_boss_score(result) if boss_page else 100.0

    summary: dict = {"bossPage": boss_page, "groups": {}}
    for group, records in result.groups.items():
        best = best_record(records)
        shares = popularity_shares(records)
        summary["groups"][group] = {
            "best": best.job if best else None,
            "jobs": [
                {
                    "job": r.job,
                    "share": round(share, 1),
                    "percentOfBest": round(percent_of_best(r, best), 1),
                    "barWidth": round(bar_width(r, boss_page, max_score), 1),
                }
                for r, share in zip(records, shares)
            ],
        }
    return summary
