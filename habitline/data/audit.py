"""Append-only journal of tracker mutations."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


def write_audit_entry(audit_path: Path, entry: dict[str, Any]) -> None:
    """Append a JSON-lines entry to an audit log file."""
    audit_path.parent.mkdir(parents=True, exist_ok=True)
    with audit_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def make_audit_entry(action: str, **fields: Any) -> dict[str, Any]:
    """Build an audit entry stamped with the current UTC time."""
    return {"timestamp": datetime.now(UTC).isoformat(), "action": action, **fields}
