"""main モジュールのテスト."""

from unittest.mock import patch

import pytest

from ffmeta.assembler import assemble
from ffmeta.db import StoreError
from ffmeta.main import build_parser, collect_targets, run
from ffmeta.models import JobRecord


class TestCollectTargets:
    """collect_targets のテスト."""

    def test_default_zones(self):
        targets = collect_targets()

        assert (68, None) in targets
        assert (65, None) in targets
        assert [b for z, b in targets if z == 68 and b] == [97, 98, 99, 100]

    def test_custom_zones(self):
        assert collect_targets({1: {"bosses": (2,)}}) == [(1, None), (1, 2)]


class TestRun:
    """run のテスト."""

    @patch("ffmeta.main.insert_record")
    @patch("ffmeta.main.fetch_result")
    @patch("ffmeta.main.collect_targets", return_value=[(68, None), (68, 97), (65, None)])
    def test_failures_skipped(self, _targets, mock_fetch, mock_insert):
        ok = assemble(68, "Z", [JobRecord("Bard", "1", "1")], url="https://example")
        mock_fetch.side_effect = [ok, TimeoutError("Timeout"), ok]

        errors = run()

        assert errors == 1
        assert mock_insert.call_count == 2
        payload = mock_insert.call_args.args[0]
        assert payload["zoneName"] == "Z"
        assert payload["jobs"] == [{"job": "Bard", "score": "1", "count": "1"}]

    @patch("ffmeta.main.insert_record")
    @patch("ffmeta.main.fetch_result")
    @patch("ffmeta.main.collect_targets", return_value=[(68, None), (68, 97), (65, None)])
    def test_insert_failure_skipped(self, _targets, mock_fetch, mock_insert):
        """保存失敗は件数に数えて次の対象へ進むこと."""
        mock_fetch.return_value = assemble(68, "Z", [JobRecord("Bard", "1", "1")], url="https://example")
        mock_insert.side_effect = [StoreError("permission denied"), 1, 2]

        errors = run()

        assert errors == 1
        assert mock_fetch.call_count == 3
        assert mock_insert.call_count == 3


class TestParser:
    """build_parser のテスト."""

    def test_fetch_args(self):
        args = build_parser().parse_args(["fetch", "--zone", "68", "--boss", "97"])
        assert (args.command, args.zone, args.boss) == ("fetch", 68, 97)

    def test_fetch_rejects_unknown_zone(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["fetch", "--zone", "12"])

    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve"])
        assert args.source is None
