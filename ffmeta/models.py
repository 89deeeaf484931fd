"""データモデル定義."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class JobRecord:
    """統計テーブルの1行 (1ジョブ分) を表す."""

    job: str  # 表示名 (例: Dragoon)
    score: str  # パーセンタイル or DPS (桁区切り付きテキスト)
    count: str  # 集計件数 (桁区切り付きテキスト)

    @classmethod
    def from_dict(cls, d: dict) -> JobRecord:
        return cls(
            job=str(d.get("job") or ""),
            score=str(d.get("score") or ""),
            count=str(d.get("count") or ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ResultSet:
    """1 クエリ分の組み立て済みレスポンス."""

    zone_name: str
    timestamp: str  # ISO 8601
    groups: dict[str, list[JobRecord]] = field(default_factory=dict)
    zone: int | None = None  # スクレイプ経路のみ
    record_id: int | None = None  # 保存済みレコード経路のみ
    boss_name: str | None = None
    url: str | None = None  # スクレイプ経路のみ

    def all_records(self) -> list[JobRecord]:
        return [r for records in self.groups.values() for r in records]

    def to_dict(self) -> dict:
        """API レスポンス用の dict に変換する.

        スクレイプ経路は zone/url、保存済み経路は id/bossName を含む。
        スクレイプ経路の boss_name は保存用ペイロードにだけ載る。
        """
        d: dict = {}
        if self.zone is not None:
            d["zone"] = self.zone
        d["zoneName"] = self.zone_name
        if self.record_id is not None:
            d["bossName"] = self.boss_name
            d["id"] = self.record_id
        if self.url is not None:
            d["url"] = self.url
        d["timestamp"] = self.timestamp
        d["groups"] = {
            group: [r.to_dict() for r in records]
            for group, records in self.groups.items()
        }
        return d
