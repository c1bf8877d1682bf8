"""Flat search index over collections and methods.

Collection entries come first (one per collection), then method entries
deduplicated across all collections by (search key, display name, ref).
Both groups keep resolution order; nothing is sorted.
"""
from __future__ import annotations

from collections.abc import Mapping

from collectiondocs.doc_types import (
    CollectionSearchEntry,
    MethodSearchEntry,
    ResolvedCollection,
    ResolvedMethod,
    SearchEntry,
)
from collectiondocs.rendering import strip_paragraph


def bare_method_name(name: str) -> str:
    """Text before the first parenthesis (the whole name if none)."""
    paren = name.find("(")
    return name if paren < 0 else name[:paren]


def build_collection_entries(
    collections: Mapping[str, ResolvedCollection],
) -> list[CollectionSearchEntry]:
    entries: list[CollectionSearchEntry] = []
    for ref, collection in collections.items():
        names = dict.fromkeys(bare_method_name(e.name) for e in collection.method_index)
        entries.append(
            CollectionSearchEntry(
                search=collection.name.lower(),
                name=collection.name,
                ref=ref,
                summary=strip_paragraph(collection.summary),
                methods=" ".join(n for n in names if n),
            )
        )
    return entries


def build_method_entries(
    collections: Mapping[str, ResolvedCollection],
    methods: Mapping[str, ResolvedMethod],
) -> list[MethodSearchEntry]:
    # Every collection name is listed, including "not-implemented" ones.
    seen: set[tuple[str, str, str]] = set()
    entries: list[MethodSearchEntry] = []
    for collection in collections.values():
        for item in collection.method_index:
            key = item.key()
            if key in seen:
                continue
            seen.add(key)
            method = methods[item.ref]
            entries.append(
                MethodSearchEntry(
                    search=item.search,
                    name=item.name,
                    ref=item.ref,
                    summary=strip_paragraph(method.summary),
                    collections=" ".join(c.name for c in method.collections),
                )
            )
    return entries


def assemble_search_index(
    collections: Mapping[str, ResolvedCollection],
    methods: Mapping[str, ResolvedMethod],
) -> tuple[SearchEntry, ...]:
    return (
        *build_collection_entries(collections),
        *build_method_entries(collections, methods),
    )
