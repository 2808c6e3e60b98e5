"""Tests for habitline.data.audit: mutation journal helpers."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from habitline.data.audit import make_audit_entry, write_audit_entry


class TestWriteAuditEntry:
    def test_creates_file_and_writes_entry(self, tmp_path: Path) -> None:
        audit_file = tmp_path / "audit" / "test.jsonl"
        write_audit_entry(audit_file, {"action": "add", "habit_id": "h1"})
        assert audit_file.exists()
        entry = json.loads(audit_file.read_text().strip())
        assert entry["action"] == "add"
        assert entry["habit_id"] == "h1"

    def test_appends_multiple_entries(self, tmp_path: Path) -> None:
        audit_file = tmp_path / "log.jsonl"
        for n in range(3):
            write_audit_entry(audit_file, {"n": n})
        lines = audit_file.read_text().strip().split("\n")
        assert len(lines) == 3
        assert json.loads(lines[2])["n"] == 2

    def test_handles_datetime_serialization(self, tmp_path: Path) -> None:
        audit_file = tmp_path / "dt.jsonl"
        now = datetime.now(UTC)
        write_audit_entry(audit_file, {"ts": now})
        entry = json.loads(audit_file.read_text().strip())
        assert str(now) in entry["ts"]


class TestMakeAuditEntry:
    def test_fields(self) -> None:
        entry = make_audit_entry("toggle", habit_id="h1", streak=3)
        assert entry["action"] == "toggle"
        assert entry["habit_id"] == "h1"
        assert entry["streak"] == 3
        assert datetime.fromisoformat(entry["timestamp"]).tzinfo is not None
