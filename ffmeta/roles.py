"""ジョブ名 → ロールグループの分類."""

from __future__ import annotations

from collections.abc import Iterable

from ffmeta.models import JobRecord

# 表示順もこの順序
ROLE_GROUPS: dict[str, tuple[str, ...]] = {
    "melee": ("viper", "monk", "dragoon", "samurai", "ninja", "reaper"),
    "caster": ("red mage", "black mage", "pictomancer", "summoner"),
    "ranged": ("dancer", "machinist", "bard"),
    "tank": ("warrior", "gunbreaker", "dark knight", "paladin"),
    "healer": ("astrologian", "scholar", "white mage", "sage"),
}


def normalize_job(job_name: str) -> str:
    return (job_name or "").strip().lower()


def classify(job_name: str) -> str | None:
    """ジョブ名のロールグループを返す. 該当なしは None."""
    name = normalize_job(job_name)
    for group, names in ROLE_GROUPS.items():
        if name in names:
            return group
    return None


def empty_groups() -> dict[str, list[JobRecord]]:
    return {group: [] for group in ROLE_GROUPS}


def group_jobs(records: Iterable[JobRecord]) -> dict[str, list[JobRecord]]:
    """レコードをロールグループごとに振り分ける.

    グループ内の相対順序は入力順を保つ。分類できないジョブは捨てる。
    5 つのキーは常に存在する (空リストの場合あり)。
    """
    groups = empty_groups()
    for record in records:
        group = classify(record.job)
        if group is not None:
            groups[group].append(record)
    return groups
