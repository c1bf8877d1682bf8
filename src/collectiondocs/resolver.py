"""Collection resolution: the full implemented-method set of each collection.

For one collection the implementation map is built in three layers, each
overwriting the previous for the same method ref:

1. every known ``inherits`` parent, resolved recursively, in listed order
   (the last listed parent wins a tie)
2. ``mixin`` entries ``"parent/method"``, in listed order
3. the collection's own ``methods``

Unknown ``inherits`` refs are skipped. A collection reached again while it
is still being resolved is an inheritance cycle and raises ``CycleError``.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TypeAlias

from collectiondocs.doc_types import (
    Collection,
    CycleError,
    Implementation,
    LoadError,
    MethodIndexEntry,
    ResolvedCollection,
    ResolvedMethodUse,
)
from collectiondocs.loader import KIND_COLLECTION
from collectiondocs.method_registry import MethodRegistry

log = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"\W+")

ImplementationMap: TypeAlias = dict[str, Implementation]


def parse_mixin(entry: str, *, collection_ref: str = "") -> tuple[str, str]:
    """Split a ``"parent/method"`` mixin entry."""
    parent, sep, ref = entry.partition("/")
    if not sep or not parent or not ref or "/" in ref:
        raise LoadError(
            f"{KIND_COLLECTION}/{collection_ref}: mixin {entry!r} is not of the form 'parent/method'",
            kind=KIND_COLLECTION,
            ref=collection_ref or None,
        )
    return parent, ref


def normalize_search_key(name: str) -> str:
    """Lowercase, collapse non-word runs to one space, trim."""
    return _NON_WORD_RE.sub(" ", name.lower()).strip()


def resolve_implementations(
    ref: str,
    collections: Mapping[str, Collection],
    *,
    cache: dict[str, ImplementationMap] | None = None,
) -> ImplementationMap:
    """Return method ref -> ``Implementation`` for one collection.

    ``cache`` may be shared across calls within one run so common ancestors
    are walked once; results are identical with or without it.
    """
    memo = cache if cache is not None else {}
    return dict(_resolve(ref, collections, memo, ()))


def _resolve(
    ref: str,
    collections: Mapping[str, Collection],
    memo: dict[str, ImplementationMap],
    path: tuple[str, ...],
) -> ImplementationMap:
    if ref in path:
        raise CycleError(path[path.index(ref):] + (ref,))
    cached = memo.get(ref)
    if cached is not None:
        return cached

    collection = collections[ref]
    here = path + (ref,)
    implemented: ImplementationMap = {}

    for parent in collection.inherits:
        if parent not in collections:
            log.warning("Collection %r inherits unknown collection %r; skipped", ref, parent)
            continue
        implemented.update(_resolve(parent, collections, memo, here))

    for entry in collection.mixin:
        parent, method_ref = parse_mixin(entry, collection_ref=ref)
        implemented[method_ref] = Implementation(ref=method_ref, prototype=parent)

    for method_ref in collection.methods:
        implemented[method_ref] = Implementation(ref=method_ref, prototype=ref)

    memo[ref] = implemented
    log.debug("Resolved %r: %d implemented methods", ref, len(implemented))
    return implemented


def expand_method_uses(
    implemented: Mapping[str, Implementation],
    registry: MethodRegistry,
) -> tuple[ResolvedMethodUse, ...]:
    """One entry per (implemented method, version), registry order."""
    uses: list[ResolvedMethodUse] = []
    for method in registry:
        impl = implemented.get(method.ref)
        if impl is None:
            continue
        for version, versioned in method.versions.items():
            uses.append(
                ResolvedMethodUse(
                    ref=method.ref,
                    name=versioned.name,
                    prototype=impl.prototype,
                    version=version,
                )
            )
    return tuple(uses)


def build_method_index(
    implemented: Mapping[str, Implementation],
    registry: MethodRegistry,
) -> tuple[MethodIndexEntry, ...]:
    """Per-collection search entries: one per (method, version, name)."""
    entries: list[MethodIndexEntry] = []
    for method in registry:
        if method.ref not in implemented:
            continue
        for versioned in method.versions.values():
            for name in versioned.names:
                entries.append(
                    MethodIndexEntry(
                        search=normalize_search_key(name),
                        name=name,
                        summary=versioned.summary,
                        ref=versioned.ref,
                        version=versioned.version,
                    )
                )
    return tuple(entries)


def resolve_collection(
    collection: Collection,
    collections: Mapping[str, Collection],
    registry: MethodRegistry,
    *,
    cache: dict[str, ImplementationMap] | None = None,
) -> ResolvedCollection:
    implemented = resolve_implementations(collection.ref, collections, cache=cache)
    return ResolvedCollection(
        ref=collection.ref,
        name=collection.name,
        names=collection.names,
        summary=collection.summary,
        detail=collection.detail,
        samples=collection.samples,
        methods=expand_method_uses(implemented, registry),
        method_index=build_method_index(implemented, registry),
    )


def resolve_collections(
    collections: Mapping[str, Collection],
    registry: MethodRegistry,
) -> dict[str, ResolvedCollection]:
    """Resolve every collection, keeping the collections' own order."""
    cache: dict[str, ImplementationMap] = {}
    resolved = {
        ref: resolve_collection(collection, collections, registry, cache=cache)
        for ref, collection in collections.items()
    }
    log.info(
        "Resolved %d collections (%d method uses)",
        len(resolved),
        sum(len(c.methods) for c in resolved.values()),
    )
    return resolved
