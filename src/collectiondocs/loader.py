"""Document loading for the collections documentation tree.

Docs root layout::

    interfaces.yaml      collections.yaml      methods.yaml   (ref lists)
    interface/<ref>.md   collection/<ref>.md   method/<ref>.md

Each ``.md`` document is a multi-document YAML stream: the first part is
the front-matter mapping, later parts are raw text blocks (summary, detail).
Every read or parse failure becomes a ``LoadError`` naming the document.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from collectiondocs.doc_types import LoadError

log = logging.getLogger(__name__)

KIND_INTERFACE = "interface"
KIND_COLLECTION = "collection"
KIND_METHOD = "method"
KINDS: tuple[str, ...] = (KIND_INTERFACE, KIND_COLLECTION, KIND_METHOD)


@dataclass(frozen=True, slots=True)
class RawDocument:
    """Front matter plus raw body parts of one source document."""

    kind: str
    ref: str
    front: dict[str, Any] = field(default_factory=dict[str, Any])
    body_parts: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.kind}/{self.ref}"

    def text_part(self, key: str, index: int) -> str:
        """Front-matter ``key`` if set, else body part ``index``, else ""."""
        value = self.front.get(key)
        if value:
            return str(value)
        # body_parts excludes the front matter, so part 1 is body_parts[0]
        pos = index - 1
        if 0 <= pos < len(self.body_parts) and self.body_parts[pos]:
            return self.body_parts[pos]
        return ""


class DocumentSource(Protocol):
    """Anything that can list refs and load documents by kind."""

    def list_refs(self, kind: str) -> tuple[str, ...]: ...

    def load_front_matter_and_body(self, kind: str, ref: str) -> RawDocument: ...


def _check_kind(kind: str) -> None:
    if kind not in KINDS:
        raise LoadError(f"Unknown document kind: {kind!r}", kind=kind)


def _coerce_refs(raw: Any, *, kind: str, where: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise LoadError(
            f"Can't parse {where} because it is not a list of refs",
            kind=kind,
            path=where,
        )
    refs: list[str] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            raise LoadError(f"Can't parse {where} because {item!r} is not a ref", kind=kind, path=where)
        ref = str(item)
        if ref in seen:
            raise LoadError(f"Duplicate {kind} ref {ref!r} in {where}", kind=kind, ref=ref, path=where)
        seen.add(ref)
        refs.append(ref)
    return tuple(refs)


def _to_document(kind: str, ref: str, parts: Sequence[Any], *, where: str) -> RawDocument:
    front = parts[0] if parts else None
    if front is None:
        front = {}
    if not isinstance(front, dict):
        raise LoadError(
            f"Can't parse {where} because its front matter is not a mapping",
            kind=kind,
            ref=ref,
            path=where,
        )
    body = tuple("" if p is None else str(p) for p in parts[1:])
    return RawDocument(kind=kind, ref=ref, front=front, body_parts=body)


class DocumentLoader:
    """Reads manifests and documents from a docs root on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def manifest_path(self, kind: str) -> Path:
        _check_kind(kind)
        return self.root / f"{kind}s.yaml"

    def document_path(self, kind: str, ref: str) -> Path:
        _check_kind(kind)
        return self.root / kind / f"{ref}.md"

    def list_refs(self, kind: str) -> tuple[str, ...]:
        path = self.manifest_path(kind)
        parts = self._read_yaml_stream(path, kind=kind)
        refs = _coerce_refs(parts[0] if parts else None, kind=kind, where=str(path))
        log.debug("Manifest %s lists %d refs", path.name, len(refs))
        return refs

    def load_front_matter_and_body(self, kind: str, ref: str) -> RawDocument:
        path = self.document_path(kind, ref)
        parts = self._read_yaml_stream(path, kind=kind, ref=ref)
        log.debug("Loaded %s/%s (%d parts)", kind, ref, len(parts))
        return _to_document(kind, ref, parts, where=str(path))

    def _read_yaml_stream(
        self,
        path: Path,
        *,
        kind: str,
        ref: str | None = None,
    ) -> list[Any]:
        try:
            text = path.read_text(encoding="utf-8")
            return list(yaml.safe_load_all(text))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            name = path.relative_to(self.root) if path.is_relative_to(self.root) else path
            raise LoadError(
                f"Can't parse {name} because {exc}",
                kind=kind,
                ref=ref,
                path=str(path),
            ) from exc


class MappingDocumentSource:
    """In-memory document source.

    ``documents`` maps kind -> ref -> front-matter mapping (or a list of
    parts, front matter first). Declaration order of each inner mapping is
    the manifest order.
    """

    def __init__(self, documents: Mapping[str, Mapping[str, Any]]) -> None:
        for kind in documents:
            _check_kind(kind)
        self._documents = {kind: dict(docs) for kind, docs in documents.items()}

    def list_refs(self, kind: str) -> tuple[str, ...]:
        _check_kind(kind)
        return tuple(self._documents.get(kind, {}))

    def load_front_matter_and_body(self, kind: str, ref: str) -> RawDocument:
        _check_kind(kind)
        docs = self._documents.get(kind, {})
        if ref not in docs:
            raise LoadError(f"No {kind} document for ref {ref!r}", kind=kind, ref=ref)
        raw = docs[ref]
        parts = list(raw) if isinstance(raw, (list, tuple)) else [raw]
        return _to_document(kind, ref, parts, where=f"{kind}/{ref}")
