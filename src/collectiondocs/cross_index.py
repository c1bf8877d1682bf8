"""Method -> collections cross index.

Runs as a separate pass over the finished collection resolution. For each
method, collections are listed in this order, first occurrence of a ref
winning: very-fast hints, fast hints, slow hints, structural implementors
(no note), then every remaining collection as "not-implemented". Each
collection therefore appears exactly once per method.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from collectiondocs.doc_types import (
    NOTE_NOT_IMPLEMENTED,
    CollectionMethodSupport,
    Method,
    ResolvedCollection,
    ResolvedMethod,
    UnresolvedReferenceError,
)
from collectiondocs.method_registry import MethodRegistry

log = logging.getLogger(__name__)


def invert_implementations(
    resolved: Mapping[str, ResolvedCollection],
) -> dict[str, tuple[str, ...]]:
    """Method ref -> collection refs that implement it, collection order."""
    by_method: dict[str, list[str]] = {}
    for ref, collection in resolved.items():
        for method_ref in collection.implemented_refs():
            by_method.setdefault(method_ref, []).append(ref)
    return {method_ref: tuple(refs) for method_ref, refs in by_method.items()}


def build_method_collections(
    method: Method,
    collections_by_method: Mapping[str, tuple[str, ...]],
    collections: Mapping[str, ResolvedCollection],
) -> tuple[CollectionMethodSupport, ...]:
    merged: dict[str, CollectionMethodSupport] = {}

    def add(refs: Iterable[str], note: str | None) -> None:
        for ref in refs:
            if ref in merged:
                continue
            collection = collections.get(ref)
            if collection is None:
                raise UnresolvedReferenceError(
                    [f"method/{method.ref}: collection {ref!r} is not declared"]
                )
            merged[ref] = CollectionMethodSupport(ref=ref, name=collection.name, note=note)

    for note, refs in method.hints.tiers():
        add(refs, note)
    add(collections_by_method.get(method.ref, ()), None)
    add(collections, NOTE_NOT_IMPLEMENTED)
    return tuple(merged.values())


def resolve_methods(
    registry: MethodRegistry,
    resolved: Mapping[str, ResolvedCollection],
) -> dict[str, ResolvedMethod]:
    """Attach the merged collection list to every registered method."""
    by_method = invert_implementations(resolved)
    methods: dict[str, ResolvedMethod] = {}
    for method in registry:
        methods[method.ref] = ResolvedMethod(
            ref=method.ref,
            name=method.name,
            names=method.names,
            deprecated=method.deprecated,
            summary=method.summary,
            detail=method.detail,
            samples=method.samples,
            collections=build_method_collections(method, by_method, resolved),
            versions=method.versions,
        )
    log.info("Cross-indexed %d methods over %d collections", len(methods), len(resolved))
    return methods
