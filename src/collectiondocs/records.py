"""Turn raw documents into typed interface and collection records.

Optional front-matter fields get their defaults here so later stages never
test for missing keys.
"""
from __future__ import annotations

from typing import Any

from collectiondocs.doc_types import Collection, Interface, LoadError, Sample
from collectiondocs.loader import KIND_COLLECTION, KIND_INTERFACE, DocumentSource, RawDocument
from collectiondocs.rendering import Renderer, parse_sample


def string_list(doc: RawDocument, key: str) -> tuple[str, ...]:
    """Read an optional list-of-strings field (absent -> empty)."""
    value = doc.front.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise LoadError(
            f"{doc.label}: field {key!r} must be a list, got {type(value).__name__}",
            kind=doc.kind,
            ref=doc.ref,
        )
    return tuple(str(item) for item in value)


def required_name(doc: RawDocument) -> str:
    name = doc.front.get("name")
    if name is None or str(name).strip() == "":
        raise LoadError(f"{doc.label}: missing required field 'name'", kind=doc.kind, ref=doc.ref)
    return str(name)


def parse_samples(doc: RawDocument) -> tuple[Sample, ...]:
    raw: Any = doc.front.get("samples") or []
    if not isinstance(raw, list):
        raise LoadError(f"{doc.label}: field 'samples' must be a list", kind=doc.kind, ref=doc.ref)
    samples: list[Sample] = []
    for i, item in enumerate(raw):
        try:
            samples.append(parse_sample(item))
        except ValueError as exc:
            raise LoadError(f"{doc.label}: sample {i}: {exc}", kind=doc.kind, ref=doc.ref) from exc
    return tuple(samples)


def build_interface(doc: RawDocument, render: Renderer) -> Interface:
    name = doc.front.get("name")
    return Interface(
        ref=doc.ref,
        name=doc.ref if name is None else str(name),
        collections=string_list(doc, "collections"),
        summary=render(doc.text_part("summary", 1)),
        detail=render(doc.text_part("detail", 2)),
    )


def build_collection(doc: RawDocument, render: Renderer) -> Collection:
    name = required_name(doc)
    return Collection(
        ref=doc.ref,
        name=name,
        names=string_list(doc, "names") or (name,),
        inherits=string_list(doc, "inherits"),
        mixin=string_list(doc, "mixin"),
        methods=string_list(doc, "methods"),
        summary=render(doc.text_part("summary", 1)),
        detail=render(doc.text_part("detail", 2)),
        samples=parse_samples(doc),
    )


def load_interfaces(source: DocumentSource, render: Renderer) -> dict[str, Interface]:
    return {
        ref: build_interface(source.load_front_matter_and_body(KIND_INTERFACE, ref), render)
        for ref in source.list_refs(KIND_INTERFACE)
    }


def load_collections(source: DocumentSource, render: Renderer) -> dict[str, Collection]:
    return {
        ref: build_collection(source.load_front_matter_and_body(KIND_COLLECTION, ref), render)
        for ref in source.list_refs(KIND_COLLECTION)
    }
