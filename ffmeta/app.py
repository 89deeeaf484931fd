"""Flask アプリケーション — /api/fflogs と /api/party.

/api/fflogs は FFLOGS_SOURCE により提供元を切り替える:
  scrape: ?zone=&boss= でライブスクレイプ
  store:  ?id= で保存済みレコードを参照 (id なしは全件)
どちらも /api/fflogs/live, /api/fflogs/stored で常に参照できる。
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ffmeta.config import ALLOWED_ZONES, FFLOGS_SOURCE
from ffmeta.db import PayloadError, RecordNotFound, StoreError, list_records, lookup
from ffmeta.metrics import summarize
from ffmeta.models import ResultSet
from ffmeta.party import PartyError, estimate_party, validate_party
from ffmeta.scraper import fetch_result

logger = logging.getLogger(__name__)

SOURCES = ("scrape", "store")


class ApiError(Exception):
    """エラーレスポンスとして返す例外."""

    def __init__(self, status: int, error: str, details: str | None = None):
        super().__init__(error)
        self.status = status
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


def parse_zone(raw: str | None) -> int:
    if not raw:
        raise ApiError(400, "Zone parameter is required")
    try:
        zone_id = int(raw)
    except ValueError:
        zone_id = None
    if zone_id not in ALLOWED_ZONES:
        zones = " and ".join(str(z) for z in sorted(ALLOWED_ZONES))
        raise ApiError(400, f"Invalid zone ID. Only zones {zones} are supported.")
    return zone_id


def parse_id(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ApiError(400, "Invalid id parameter", str(raw)) from None


def scrape_result(zone_raw: str | None, boss: str | None) -> ResultSet:
    """ゾーン検証後にライブスクレイプする. 検証エラー時はブラウザを起動しない."""
    zone_id = parse_zone(zone_raw)
    try:
        return fetch_result(zone_id, boss or None)
    except Exception as e:
        logger.exception("スクレイプ失敗: zone=%s, boss=%s", zone_id, boss)
        raise ApiError(500, "Failed to scrape FFLogs data", str(e)) from e


def stored_result(record_id: int) -> ResultSet:
    try:
        return lookup(record_id)
    except RecordNotFound as e:
        raise ApiError(404, "Record not found", str(e)) from e
    except PayloadError as e:
        logger.error("保存済みペイロード不正: id=%s, error=%s", record_id, e)
        raise ApiError(500, "Stored payload is malformed", str(e)) from e
    except StoreError as e:
        raise ApiError(500, "Failed to fetch stored data", str(e)) from e


def _respond(result: ResultSet):
    body = result.to_dict()
    if request.args.get("summary") in ("1", "true"):
        body["summary"] = summarize(result)
    return jsonify(body)


def live_view():
    result = scrape_result(request.args.get("zone"), request.args.get("boss"))
    return _respond(result)


def stored_view():
    raw_id = request.args.get("id")
    if raw_id is None or raw_id == "":
        try:
            return jsonify(list_records())
        except StoreError as e:
            raise ApiError(500, "Failed to fetch stored data", str(e)) from e
    return _respond(stored_result(parse_id(raw_id)))


def party_view():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ApiError(400, "JSON body is required")

    # ストア参照・ブラウザ起動より前に検査する
    try:
        jobs, threshold = validate_party(body.get("jobs"), body.get("threshold"))
    except PartyError as e:
        raise ApiError(400, "Invalid party", str(e)) from e

    if body.get("id") is not None:
        result = stored_result(parse_id(body["id"]))
    else:
        zone = body.get("zone")
        boss = body.get("boss")
        result = scrape_result(str(zone) if zone is not None else None, str(boss) if boss else None)

    try:
        estimate = estimate_party(result, jobs, threshold)
    except PartyError as e:
        raise ApiError(400, "Invalid party", str(e)) from e
    return jsonify(estimate.to_dict())


def create_app(source: str | None = None) -> Flask:
    """アプリケーションを生成する. source 未指定時は FFLOGS_SOURCE."""
    source = source or FFLOGS_SOURCE
    if source not in SOURCES:
        raise ValueError(f"unknown source: {source!r} (expected one of {SOURCES})")

    app = Flask(__name__)
    app.config["FFLOGS_SOURCE"] = source

    app.add_url_rule("/api/fflogs", "fflogs", live_view if source == "scrape" else stored_view)
    app.add_url_rule("/api/fflogs/live", "fflogs_live", live_view)
    app.add_url_rule("/api/fflogs/stored", "fflogs_stored", stored_view)
    app.add_url_rule("/api/party", "party", party_view, methods=["POST"])

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jsonify(e.to_dict()), e.status

    logger.info("アプリ生成: source=%s", source)
    return app
