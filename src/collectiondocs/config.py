"""Build configuration loaded from JSON, with CLI overrides."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import orjson


@dataclass(frozen=True, slots=True)
class BuildConfig:
    docs_root: Path
    output_dir: Path
    highlight: bool = True
    write_jsonl: bool = True
    write_manifest: bool = True

    @classmethod
    def from_json(cls, path: Path) -> BuildConfig:
        """Load from a JSON config file.

        Relative ``docs_root``/``output_dir`` are resolved against the
        config file's directory.
        """
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            raise ValueError(f"Config {path} must be a JSON object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        for key in ("docs_root", "output_dir"):
            if key not in data:
                raise ValueError(f"Config {path} is missing {key!r}")
        base = path.parent
        return cls(
            docs_root=base / data["docs_root"],
            output_dir=base / data["output_dir"],
            highlight=bool(data.get("highlight", True)),
            write_jsonl=bool(data.get("write_jsonl", True)),
            write_manifest=bool(data.get("write_manifest", True)),
        )

    def with_overrides(self, **overrides: Any) -> BuildConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return {
            "docs_root": str(self.docs_root),
            "output_dir": str(self.output_dir),
            "highlight": self.highlight,
            "write_jsonl": self.write_jsonl,
            "write_manifest": self.write_manifest,
        }
