"""Tests for collectiondocs.config."""
from __future__ import annotations

from pathlib import Path

import pytest

from collectiondocs.config import BuildConfig


def test_from_json_resolves_relative_paths(tmp_path: Path) -> None:
    path = tmp_path / "build.json"
    path.write_text('{"docs_root": "docs", "output_dir": "out", "highlight": false}')
    config = BuildConfig.from_json(path)
    assert config.docs_root == tmp_path / "docs"
    assert config.output_dir == tmp_path / "out"
    assert config.highlight is False
    assert config.write_jsonl is True


def test_unknown_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "build.json"
    path.write_text('{"docs_root": "d", "output_dir": "o", "colour": "blue"}')
    with pytest.raises(ValueError, match="colour"):
        BuildConfig.from_json(path)


def test_required_keys(tmp_path: Path) -> None:
    path = tmp_path / "build.json"
    path.write_text('{"docs_root": "d"}')
    with pytest.raises(ValueError, match="output_dir"):
        BuildConfig.from_json(path)


def test_overrides_skip_none() -> None:
    config = BuildConfig(docs_root=Path("a"), output_dir=Path("b"))
    updated = config.with_overrides(docs_root=None, output_dir=Path("c"), highlight=False)
    assert updated.docs_root == Path("a")
    assert updated.output_dir == Path("c")
    assert updated.highlight is False
    assert updated.to_dict()["output_dir"] == "c"
