"""Reference checks run after loading and before resolution.

All problems are gathered first and reported together in one
``UnresolvedReferenceError``. ``inherits`` refs are not checked: unknown
parents are skipped by the resolver.
"""
from __future__ import annotations

from collections.abc import Mapping

from collectiondocs.doc_types import Collection, Interface, UnresolvedReferenceError
from collectiondocs.method_registry import MethodRegistry
from collectiondocs.resolver import parse_mixin


def find_reference_problems(
    interfaces: Mapping[str, Interface],
    collections: Mapping[str, Collection],
    registry: MethodRegistry,
) -> list[str]:
    problems: list[str] = []

    for ref, interface in interfaces.items():
        for collection_ref in interface.collections:
            if collection_ref not in collections:
                problems.append(f"interface/{ref}: collection {collection_ref!r} is not declared")

    for ref, collection in collections.items():
        for method_ref in collection.methods:
            if method_ref not in registry:
                problems.append(f"collection/{ref}: method {method_ref!r} is not declared")
        for entry in collection.mixin:
            _, method_ref = parse_mixin(entry, collection_ref=ref)
            if method_ref not in registry:
                problems.append(f"collection/{ref}: mixin method {method_ref!r} is not declared")

    for method in registry:
        for note, refs in method.hints.tiers():
            for collection_ref in refs:
                if collection_ref not in collections:
                    problems.append(
                        f"method/{method.ref}: {note} collection {collection_ref!r} is not declared"
                    )
    return problems


def validate_references(
    interfaces: Mapping[str, Interface],
    collections: Mapping[str, Collection],
    registry: MethodRegistry,
) -> None:
    problems = find_reference_problems(interfaces, collections, registry)
    if problems:
        raise UnresolvedReferenceError(problems)
