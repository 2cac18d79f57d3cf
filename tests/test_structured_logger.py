"""Tests for structured request logging and formatting helpers."""

import json
import logging
from pathlib import Path

import pytest

from icon_request.utils.formatting import format_duration, format_size
from icon_request.utils.structured_logger import create_structured_logger


class TestStructuredLogger:
    def test_writes_jsonl_events(self, tmp_path: Path) -> None:
        base, events = create_structured_logger(log_dir=tmp_path)
        base.set_session_context(selection="apps.json")
        archive = tmp_path / "IconRequest.zip"
        archive.write_bytes(b"1234")

        events.archive_created(archive, file_count=3)
        events.request_failed("NoContent", "nothing to send", 0.123)
        json_path = base.json_path
        base.close()

        lines = [json.loads(line) for line in json_path.read_text().splitlines()]
        assert [entry["event"] for entry in lines] == ["archive_created", "request_failed"]
        assert lines[0]["size_bytes"] == 4
        assert lines[0]["selection"] == "apps.json"
        assert lines[1]["level"] == "ERROR"
        assert lines[1]["duration_s"] == 0.12

    def test_console_only(self, caplog: pytest.LogCaptureFixture) -> None:
        base, events = create_structured_logger()
        assert base.json_path is None
        with caplog.at_level(logging.INFO, logger="icon_request.events"):
            events.delivery_started("remote", "https://example.com")
        assert "[delivery_started] channel=remote target=https://example.com" in caplog.text

    def test_context_manager_closes_the_json_file(self, tmp_path: Path) -> None:
        base, events = create_structured_logger(log_dir=tmp_path)
        with base:
            events.request_completed(1.5, tmp_path / "IconRequest.zip")
        events.request_failed("NoContent", "after close", 0.1)

        lines = base.json_path.read_text().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["request_completed"]


class TestFormatting:
    @pytest.mark.parametrize(
        ("size", "expected"), [(0, "0 B"), (512, "512.0 B"), (2048, "2.0 KB"), (5 * 1024**2, "5.0 MB")]
    )
    def test_format_size(self, size: int, expected: str) -> None:
        assert format_size(size) == expected

    @pytest.mark.parametrize(("seconds", "expected"), [(0.25, "250ms"), (72, "1m 12s"), (3600, "1h")])
    def test_format_duration(self, seconds: float, expected: str) -> None:
        assert format_duration(seconds) == expected
