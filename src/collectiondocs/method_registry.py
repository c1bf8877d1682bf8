"""Method registry: one ``Method`` per declared ref, with its version tree.

Version tree rules:
- a scalar ``version`` gives exactly one entry keyed by its string form
- otherwise the ``versions`` mapping is used as declared
- with neither, a single entry keyed by "" stands for the unversioned method

Each entry inherits ``name``/``names``/``summary`` from the method unless
overridden; ``deprecated`` always comes from the method itself. A boolean
``version`` is not a version label and counts as undeclared.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from collectiondocs.doc_types import (
    LoadError,
    Method,
    PerformanceHints,
    UnresolvedReferenceError,
    VersionedMethod,
)
from collectiondocs.loader import KIND_METHOD, DocumentSource, RawDocument
from collectiondocs.records import parse_samples, required_name, string_list
from collectiondocs.rendering import Renderer

log = logging.getLogger(__name__)

UNVERSIONED = ""


def _version_overrides(doc: RawDocument) -> dict[str, dict[str, Any]]:
    scalar = doc.front.get("version")
    if scalar is not None and scalar != "" and not isinstance(scalar, bool):
        return {str(scalar): {}}

    declared = doc.front.get("versions")
    if not declared:
        return {UNVERSIONED: {}}
    if not isinstance(declared, dict):
        raise LoadError(f"{doc.label}: field 'versions' must be a mapping", kind=doc.kind, ref=doc.ref)

    overrides: dict[str, dict[str, Any]] = {}
    for version, override in declared.items():
        if override is None:
            override = {}
        if not isinstance(override, dict):
            raise LoadError(
                f"{doc.label}: version {version!r} must map to a mapping of overrides",
                kind=doc.kind,
                ref=doc.ref,
            )
        overrides[str(version)] = override
    return overrides


def _override_names(doc: RawDocument, override: dict[str, Any]) -> tuple[str, ...] | None:
    value = override.get("names")
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise LoadError(f"{doc.label}: version 'names' must be a list", kind=doc.kind, ref=doc.ref)
    return tuple(str(v) for v in value)


def build_method(doc: RawDocument, render: Renderer) -> Method:
    """Build a ``Method`` and its version tree from a raw document."""
    name = required_name(doc)
    declared_names = string_list(doc, "names")
    deprecated = bool(doc.front.get("deprecated"))
    summary = render(doc.text_part("summary", 1))

    versions: dict[str, VersionedMethod] = {}
    for version, override in _version_overrides(doc).items():
        version_name = str(override["name"]) if override.get("name") else name
        names = _override_names(doc, override) or declared_names or (version_name,)
        versions[version] = VersionedMethod(
            ref=doc.ref,
            version=version,
            name=version_name,
            names=names,
            deprecated=deprecated,
            summary=render(str(override["summary"])) if override.get("summary") else summary,
        )

    return Method(
        ref=doc.ref,
        name=name,
        names=declared_names or (name,),
        deprecated=deprecated,
        summary=summary,
        detail=render(doc.text_part("detail", 2)),
        samples=parse_samples(doc),
        hints=PerformanceHints(
            very_fast=string_list(doc, "very-fast"),
            fast=string_list(doc, "fast"),
            slow=string_list(doc, "slow"),
        ),
        versions=versions,
    )


class MethodRegistry:
    """Methods in manifest declaration order."""

    def __init__(self, methods: list[Method] | tuple[Method, ...] = ()) -> None:
        self._methods: dict[str, Method] = {}
        for method in methods:
            if method.ref in self._methods:
                raise LoadError(f"Duplicate method ref {method.ref!r}", kind=KIND_METHOD, ref=method.ref)
            self._methods[method.ref] = method

    @classmethod
    def from_source(cls, source: DocumentSource, render: Renderer) -> MethodRegistry:
        methods = [
            build_method(source.load_front_matter_and_body(KIND_METHOD, ref), render)
            for ref in source.list_refs(KIND_METHOD)
        ]
        registry = cls(methods)
        log.info(
            "Registered %d methods (%d versions)",
            len(registry),
            sum(len(m.versions) for m in registry),
        )
        return registry

    def get(self, ref: str) -> Method:
        try:
            return self._methods[ref]
        except KeyError:
            raise UnresolvedReferenceError([f"method {ref!r} is not declared"]) from None

    def refs(self) -> tuple[str, ...]:
        return tuple(self._methods)

    def __contains__(self, ref: object) -> bool:
        return ref in self._methods

    def __iter__(self) -> Iterator[Method]:
        return iter(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)
