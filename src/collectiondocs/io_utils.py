"""I/O utilities for the JSON and JSONL build artifacts.

All writers sort keys so repeated builds of the same docs tree produce
byte-identical files.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load a JSON Lines file (one JSON object per line). Blank lines skipped."""
    records: list[dict[str, Any]] = []
    for line in path.read_bytes().split(b"\n"):
        line = line.strip()
        if line:
            records.append(orjson.loads(line))
    return records


def save_jsonl(records: list[dict[str, Any]], path: Path) -> None:
    """Save a list of dicts as a JSON Lines file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [orjson.dumps(r, option=orjson.OPT_SORT_KEYS) for r in records]
    path.write_bytes(b"\n".join(lines) + b"\n" if lines else b"")
