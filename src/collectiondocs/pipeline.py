"""End-to-end documentation build.

Loader -> method registry -> reference validation -> collection resolution
-> cross index -> search index. Any failure raises before anything is
written; ``write_outputs`` is only called with a finished build.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from collectiondocs.cross_index import resolve_methods
from collectiondocs.doc_types import (
    CollectionSearchEntry,
    Interface,
    ResolvedCollection,
    ResolvedMethod,
    SearchEntry,
)
from collectiondocs.io_utils import save_json, save_jsonl
from collectiondocs.loader import DocumentSource
from collectiondocs.method_registry import MethodRegistry
from collectiondocs.records import load_collections, load_interfaces
from collectiondocs.rendering import Renderer, render_text
from collectiondocs.resolver import resolve_collections
from collectiondocs.search_index import assemble_search_index
from collectiondocs.validation import validate_references

log = logging.getLogger(__name__)

OUTPUT_FILES: tuple[str, ...] = (
    "interfaces.json",
    "collections.json",
    "methods.json",
    "search.json",
)
SEARCH_JSONL = "search.jsonl"


@dataclass(frozen=True, slots=True)
class DocumentationBuild:
    interfaces: dict[str, Interface]
    collections: dict[str, ResolvedCollection]
    methods: dict[str, ResolvedMethod]
    search: tuple[SearchEntry, ...]
    timings_sec: dict[str, float] = field(default_factory=dict[str, float])

    @property
    def stats(self) -> dict[str, int]:
        collection_entries = sum(1 for e in self.search if isinstance(e, CollectionSearchEntry))
        return {
            "interfaces": len(self.interfaces),
            "collections": len(self.collections),
            "methods": len(self.methods),
            "method_versions": sum(len(m.versions) for m in self.methods.values()),
            "method_uses": sum(len(c.methods) for c in self.collections.values()),
            "search_entries": len(self.search),
            "search_collection_entries": collection_entries,
            "search_method_entries": len(self.search) - collection_entries,
        }

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready ``interfaces``/``collections``/``methods``/``search``."""
        return {
            "interfaces": {ref: i.to_dict() for ref, i in self.interfaces.items()},
            "collections": {ref: c.to_dict() for ref, c in self.collections.items()},
            "methods": {ref: m.to_dict() for ref, m in self.methods.items()},
            "search": [e.to_dict() for e in self.search],
        }


def build_documentation(
    source: DocumentSource,
    *,
    render: Renderer = render_text,
) -> DocumentationBuild:
    timings: dict[str, float] = {}

    t0 = time.perf_counter()
    interfaces = load_interfaces(source, render)
    collections = load_collections(source, render)
    registry = MethodRegistry.from_source(source, render)
    timings["load"] = round(time.perf_counter() - t0, 4)
    log.info(
        "Loaded %d interfaces, %d collections, %d methods",
        len(interfaces),
        len(collections),
        len(registry),
    )

    t1 = time.perf_counter()
    validate_references(interfaces, collections, registry)
    resolved = resolve_collections(collections, registry)
    timings["resolve"] = round(time.perf_counter() - t1, 4)

    t2 = time.perf_counter()
    methods = resolve_methods(registry, resolved)
    timings["cross_index"] = round(time.perf_counter() - t2, 4)

    t3 = time.perf_counter()
    search = assemble_search_index(resolved, methods)
    timings["search"] = round(time.perf_counter() - t3, 4)
    timings["total"] = round(time.perf_counter() - t0, 4)
    log.info("Search index: %d entries", len(search))

    return DocumentationBuild(
        interfaces=interfaces,
        collections=resolved,
        methods=methods,
        search=search,
        timings_sec=timings,
    )


def write_outputs(
    build: DocumentationBuild,
    output_dir: Path,
    *,
    jsonl: bool = True,
) -> list[Path]:
    """Write the outward artifacts; returns the written paths."""
    payload = build.to_payload()
    written: list[Path] = []
    for filename in OUTPUT_FILES:
        path = output_dir / filename
        save_json(payload[filename.removesuffix(".json")], path, pretty=True)
        written.append(path)
    if jsonl:
        path = output_dir / SEARCH_JSONL
        save_jsonl(payload["search"], path)
        written.append(path)
    log.info("Wrote %d files to %s", len(written), output_dir)
    return written
