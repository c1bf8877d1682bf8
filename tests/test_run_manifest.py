"""Tests for collectiondocs.run_manifest utilities."""
from __future__ import annotations

from pathlib import Path

from collectiondocs.loader import MappingDocumentSource
from collectiondocs.pipeline import DocumentationBuild, build_documentation
from collectiondocs.run_manifest import (
    build_manifest,
    compare_manifests,
    generate_run_id,
    git_commit_hash,
    load_manifest,
    write_manifest,
)


def _build(collection_count: int) -> DocumentationBuild:
    collections = {
        f"c{i}": {"name": f"C{i}", "methods": ["push"]} for i in range(collection_count)
    }
    source = MappingDocumentSource(
        {"collection": collections, "method": {"push": {"name": "push(value)"}}}
    )
    return build_documentation(source)


def test_generate_run_id_prefix() -> None:
    run_id = generate_run_id("test_run")
    assert run_id.startswith("test_run_")
    assert run_id != generate_run_id("test_run")


def test_write_and_load_manifest(tmp_path: Path) -> None:
    run_id = generate_run_id("test_run")
    manifest = build_manifest(
        run_id=run_id,
        build=_build(2),
        docs_root=tmp_path / "docs",
        output_dir=tmp_path / "out",
        git_commit="deadbeef",
        config={"highlight": True},
    )
    canonical_path, versioned_path = write_manifest(tmp_path / "out", manifest)
    assert canonical_path.exists()
    assert versioned_path.exists()
    assert run_id in versioned_path.name

    loaded = load_manifest(canonical_path)
    assert loaded["run_id"] == run_id
    assert loaded["record_counts"]["collections"] == 2
    assert loaded["record_counts"]["method_uses"] == 2
    assert loaded["git_commit"] == "deadbeef"
    assert "total" in loaded["timings_sec"]


def test_compare_manifests_count_deltas(tmp_path: Path) -> None:
    older = build_manifest(
        run_id="old",
        build=_build(1),
        docs_root=tmp_path,
        output_dir=tmp_path,
        git_commit="aaa",
    )
    newer = build_manifest(
        run_id="new",
        build=_build(3),
        docs_root=tmp_path,
        output_dir=tmp_path,
        git_commit="aaa",
    )
    diff = compare_manifests(newer, older)
    assert diff["current_run_id"] == "new"
    assert diff["previous_run_id"] == "old"
    assert diff["git_commit_changed"] is False
    assert diff["record_count_delta"]["collections"] == 2
    assert diff["record_count_delta"]["methods"] == 0


def test_git_commit_hash_outside_repo(tmp_path: Path) -> None:
    assert git_commit_hash(search_from=tmp_path) is None
