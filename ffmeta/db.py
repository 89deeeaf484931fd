"""Supabase データベース操作モジュール.

保存済みの統計データは FFLOGS_TABLE に 1 行 1 ページで格納する。
data カラムは JSON 文字列でも JSON 値でもよい (読み出し時に正規化する)。
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache

from supabase import create_client

from ffmeta.assembler import assemble_stored
from ffmeta.config import FFLOGS_TABLE, SUPABASE_SECRET_KEY, SUPABASE_URL
from ffmeta.models import ResultSet

logger = logging.getLogger(__name__)

PAYLOAD_COLUMN = "data"


class StoreError(Exception):
    """ストア側のエラー."""


class PayloadError(StoreError):
    """保存済みペイロードが壊れている."""


class RecordNotFound(Exception):
    """指定 ID のレコードが存在しない."""


@lru_cache(maxsize=1)
def _client():
    if not SUPABASE_URL or not SUPABASE_SECRET_KEY:
        raise StoreError("SUPABASE_URL / SUPABASE_SECRET_KEY が未設定です")
    return create_client(SUPABASE_URL, SUPABASE_SECRET_KEY)


def _table(name: str = FFLOGS_TABLE):
    """統計データテーブルを参照する."""
    return _client().table(name)


def list_records() -> list[dict]:
    """保存済みレコードを全件そのまま返す."""
    try:
        resp = _table().select("*").execute()
    except StoreError:
        raise
    except Exception as e:
        logger.error("全件取得失敗: %s", e)
        raise StoreError(str(e)) from e
    return resp.data


def get_record(record_id: int) -> dict:
    """ID を指定して 1 レコード取得する.

    Raises:
        RecordNotFound: 該当レコードなし
        StoreError: ストア側のエラー
    """
    try:
        resp = _table().select("*").eq("id", record_id).limit(1).execute()
    except StoreError:
        raise
    except Exception as e:
        logger.error("レコード取得失敗: id=%s, error=%s", record_id, e)
        raise StoreError(str(e)) from e

    if not resp.data:
        raise RecordNotFound(f"id={record_id} のレコードはありません")
    return resp.data[0]


def load_payload(record: dict) -> dict:
    """レコードの data カラムを dict に正規化する.

    文字列なら JSON としてパースし、dict ならそのまま返す。
    それ以外・パース失敗は PayloadError。
    """
    raw = record.get(PAYLOAD_COLUMN)
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PayloadError(f"JSON パースエラー: {e}") from e
    if not isinstance(raw, dict):
        raise PayloadError(f"data カラムの型が不正です: {type(raw).__name__}")
    return raw


def lookup(record_id: int) -> ResultSet:
    """保存済みレコードから ResultSet を組み立てる."""
    record = get_record(record_id)
    payload = load_payload(record)
    return assemble_stored(record_id, payload)


def insert_record(payload: dict) -> int | None:
    """ペイロードを 1 レコードとして挿入し、採番された ID を返す."""
    try:
        resp = _table().insert({PAYLOAD_COLUMN: payload}).execute()
    except StoreError:
        raise
    except Exception as e:
        logger.error("レコード挿入失敗: %s", e)
        raise StoreError(str(e)) from e

    record_id = resp.data[0].get("id") if resp.data else None
    logger.info("%s に挿入: id=%s", FFLOGS_TABLE, record_id)
    return record_id
