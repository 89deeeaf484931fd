"""ffmeta — メインエントリーポイント.

サブコマンド:
  serve   API サーバーを起動
  collect 全ゾーン・ボスの統計ページを取得して DB に保存
  fetch   1 ページ取得して JSON を標準出力へ

collect の処理フロー:
  1. 設定済みゾーン × (ゾーン全体 + 各ボス) の取得対象を列挙
  2. 各対象の統計ページをスクレイプ
  3. ResultSet を保存用ペイロードに変換して DB に挿入
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import datetime

from ffmeta.assembler import to_payload
from ffmeta.config import LOG_DIR, SERVER_HOST, SERVER_PORT, ZONES
from ffmeta.db import StoreError, insert_record
from ffmeta.scraper import fetch_result


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"ffmeta_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def collect_targets(zones: dict = ZONES) -> list[tuple[int, int | None]]:
    """(zone_id, boss_id) の取得対象一覧. boss_id=None はゾーン全体."""
    targets: list[tuple[int, int | None]] = []
    for zone_id, zone in zones.items():
        targets.append((zone_id, None))
        for boss_id in zone.get("bosses", ()):
            targets.append((zone_id, boss_id))
    return targets


def run() -> int:
    """全対象を取得して保存する. 戻り値は失敗件数."""
    logger = logging.getLogger(__name__)
    logger.info("=== 統計データ収集 開始 ===")
    start_time = time.time()

    targets = collect_targets()
    logger.info("取得対象: %d ページ", len(targets))

    error_count = 0
    stored_count = 0
    for zone_id, boss_id in targets:
        logger.info("取得中: zone=%s, boss=%s", zone_id, boss_id)
        try:
            result = fetch_result(zone_id, boss_id)
        except Exception as e:
            error_count += 1
            logger.error("スキップ: zone=%s, boss=%s, error=%s", zone_id, boss_id, e)
            continue

        jobs = sum(len(records) for records in result.groups.values())
        logger.info("  %s → %d ジョブ", result.zone_name or "(名称なし)", jobs)
        try:
            insert_record(to_payload(result))
        except StoreError as e:
            error_count += 1
            logger.error("保存失敗: zone=%s, boss=%s, error=%s", zone_id, boss_id, e)
            continue
        stored_count += 1

    elapsed = time.time() - start_time
    logger.info("=== 統計データ収集 完了 ===")
    logger.info("保存: %d 件, エラー: %d 件, 所要時間: %.1f 秒",
                stored_count, error_count, elapsed)
    return error_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ffmeta", description="FFXIV raid meta dashboard backend")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="API サーバーを起動")
    serve.add_argument("--host", default=SERVER_HOST)
    serve.add_argument("--port", type=int, default=SERVER_PORT)
    serve.add_argument("--source", choices=["scrape", "store"], default=None)

    sub.add_parser("collect", help="統計ページを取得して DB に保存")

    fetch = sub.add_parser("fetch", help="1 ページ取得して JSON を出力")
    fetch.add_argument("--zone", type=int, required=True, choices=sorted(ZONES))
    fetch.add_argument("--boss", type=int, default=None)
    return parser


def cli(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "serve":
        from ffmeta.app import create_app

        create_app(args.source).run(host=args.host, port=args.port)
        return 0

    if args.command == "collect":
        return 1 if run() else 0

    result = fetch_result(args.zone, args.boss)
    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(cli())
