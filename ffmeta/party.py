"""パーティ構成計算 — 8 人構成の合計 DPS がボスの基準に届くか見積もる."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field

from ffmeta.metrics import is_boss_result, parse_number
from ffmeta.models import ResultSet
from ffmeta.roles import ROLE_GROUPS, classify, normalize_job

PARTY_SIZE = 8

# 標準構成: タンク 2 / ヒーラー 2 / DPS 4
STANDARD_COMPOSITION = {"tank": 2, "healer": 2, "dps": 4}


class PartyError(ValueError):
    """パーティ指定が不正."""


@dataclass
class PartyMember:
    job: str
    role: str
    dps: float


@dataclass
class PartyEstimate:
    members: list[PartyMember]
    threshold: float
    total_dps: float
    roles: dict[str, int] = field(default_factory=dict)

    @property
    def meets(self) -> bool:
        return self.total_dps >= self.threshold

    @property
    def standard(self) -> bool:
        return _role_summary(self.roles) == STANDARD_COMPOSITION

    def to_dict(self) -> dict:
        return {
            "members": [
                {"job": m.job, "role": m.role, "dps": m.dps} for m in self.members
            ],
            "threshold": self.threshold,
            "totalDps": self.total_dps,
            "meets": self.meets,
            "margin": self.total_dps - self.threshold,
            "roles": dict(self.roles),
            "standardComposition": self.standard,
        }


def _role_summary(roles: dict[str, int]) -> dict[str, int]:
    return {
        "tank": roles.get("tank", 0),
        "healer": roles.get("healer", 0),
        "dps": sum(n for role, n in roles.items() if role not in ("tank", "healer")),
    }


def _dps_table(result: ResultSet) -> dict[str, tuple[str, float]]:
    """正規化ジョブ名 → (表示名, DPS). 重複行は先頭を採用する."""
    table: dict[str, tuple[str, float]] = {}
    for r in result.all_records():
        key = normalize_job(r.job)
        value = parse_number(r.score)
        if key in table or value is None:
            continue
        table[key] = (r.job, value)
    return table


def validate_party(jobs, threshold) -> tuple[list[str], float]:
    """データ取得前に検査できる部分 (人数・閾値) を検査する.

    Returns:
        (ジョブ名リスト, 閾値)

    Raises:
        PartyError: jobs がリストでない・人数違い・閾値が正の有限値でない
    """
    if not isinstance(jobs, list):
        raise PartyError("jobs must be a list")
    if len(jobs) != PARTY_SIZE:
        raise PartyError(f"Party must have exactly {PARTY_SIZE} jobs (got {len(jobs)})")

    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise PartyError(f"Invalid threshold: {threshold!r}") from None
    if not math.isfinite(value):
        raise PartyError(f"Invalid threshold: {threshold!r}")
    if value <= 0:
        raise PartyError("Threshold must be positive")
    return [str(j) for j in jobs], value


def estimate_party(result: ResultSet, jobs: list[str], threshold) -> PartyEstimate:
    """選んだ 8 ジョブの DPS 合計を threshold と比較する.

    Raises:
        PartyError: validate_party の条件・未知のジョブ・ボス単位でない結果
    """
    jobs, threshold = validate_party(jobs, threshold)

    if not is_boss_result(result):
        raise PartyError("Party estimate requires boss-specific DPS data")

    table = _dps_table(result)
    members: list[PartyMember] = []
    for job in jobs:
        entry = table.get(normalize_job(job))
        role = classify(job)
        if entry is None or role is None:
            raise PartyError(f"No DPS data for job: {job}")
        name, dps = entry
        members.append(PartyMember(job=name, role=role, dps=dps))

    roles = Counter(m.role for m in members)
    return PartyEstimate(
        members=members,
        threshold=threshold,
        total_dps=sum(m.dps for m in members),
        roles={group: roles.get(group, 0) for group in ROLE_GROUPS},
    )
