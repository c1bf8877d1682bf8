"""Core record types shared by every stage of the documentation build.

Stages hand these frozen records to each other; nothing is mutated after
construction. ``to_dict()`` on each record produces the JSON shape consumed
by the publishing stage (hyphenated speed keys, ``methodIndex``, ``type``).

Type hierarchy:
  Interface            — capability grouping, reference data only
  Collection           — authored collection record (inputs to resolution)
  Method               — authored method record with its version tree
  VersionedMethod      — one entry of a method's version tree
  PerformanceHints     — very-fast / fast / slow collection lists of a method
  Implementation       — provenance unit produced during inheritance walk
  ResolvedMethodUse    — one (method, version) implemented by a collection
  MethodIndexEntry     — per-collection searchable method name
  ResolvedCollection   — collection after resolution
  CollectionMethodSupport — one collection's support status for a method
  ResolvedMethod       — method after cross-indexing
  CollectionSearchEntry / MethodSearchEntry — flat search records

Errors:
  DocsBuildError          — base, any failure aborts the whole build
  LoadError               — a manifest or document failed to load or parse
  UnresolvedReferenceError — a ref names a method/collection that does not exist
  CycleError              — the ``inherits`` graph loops back on itself
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

NOTE_VERY_FAST = "very-fast"
NOTE_FAST = "fast"
NOTE_SLOW = "slow"
NOTE_NOT_IMPLEMENTED = "not-implemented"

# Priority order for the per-method collection list.
SPEED_NOTES: tuple[str, ...] = (NOTE_VERY_FAST, NOTE_FAST, NOTE_SLOW)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class DocsBuildError(RuntimeError):
    """Base class for failures that abort a documentation build."""


class LoadError(DocsBuildError):
    """Raised when a manifest or document cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        ref: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.ref = ref
        self.path = path


class UnresolvedReferenceError(DocsBuildError):
    """Raised when documents name refs that are not declared anywhere."""

    def __init__(self, problems: tuple[str, ...] | list[str]) -> None:
        self.problems = tuple(problems)
        lines = "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(f"{len(self.problems)} unresolved reference(s):\n{lines}")


class CycleError(DocsBuildError):
    """Raised when a collection (transitively) inherits from itself."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        super().__init__("Inheritance cycle: " + " -> ".join(path))


# ---------------------------------------------------------------------------
# Authored records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Sample:
    """A code sample attached to a collection or method page."""

    code: str
    html: str
    output: str | None = None
    language: str = "javascript"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "code": self.code,
            "html": self.html,
            "language": self.language,
        }
        if self.output is not None:
            out["output"] = self.output
        return out


@dataclass(frozen=True, slots=True)
class Interface:
    ref: str
    name: str
    collections: tuple[str, ...]
    summary: str
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "name": self.name,
            "collections": list(self.collections),
            "summary": self.summary,
            "detail": self.detail,
        }


@dataclass(frozen=True, slots=True)
class PerformanceHints:
    """Collections a method author tagged with a speed class."""

    very_fast: tuple[str, ...] = ()
    fast: tuple[str, ...] = ()
    slow: tuple[str, ...] = ()

    def tiers(self) -> tuple[tuple[str, tuple[str, ...]], ...]:
        """Return ``(note, refs)`` pairs in display priority order."""
        return (
            (NOTE_VERY_FAST, self.very_fast),
            (NOTE_FAST, self.fast),
            (NOTE_SLOW, self.slow),
        )

    def to_dict(self) -> dict[str, Any]:
        return {note: list(refs) for note, refs in self.tiers()}


@dataclass(frozen=True, slots=True)
class VersionedMethod:
    ref: str
    version: str
    name: str
    names: tuple[str, ...]
    deprecated: bool
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "version": self.version,
            "name": self.name,
            "names": list(self.names),
            "deprecated": self.deprecated,
            "summary": self.summary,
        }


@dataclass(frozen=True, slots=True)
class Method:
    ref: str
    name: str
    names: tuple[str, ...]
    deprecated: bool
    summary: str
    detail: str
    samples: tuple[Sample, ...]
    hints: PerformanceHints
    # Insertion order is the declared version order.
    versions: dict[str, VersionedMethod] = field(default_factory=dict[str, VersionedMethod])


@dataclass(frozen=True, slots=True)
class Collection:
    ref: str
    name: str
    names: tuple[str, ...]
    inherits: tuple[str, ...]
    mixin: tuple[str, ...]
    methods: tuple[str, ...]
    summary: str
    detail: str
    samples: tuple[Sample, ...]


# ---------------------------------------------------------------------------
# Resolution records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Implementation:
    """Which collection supplies ``ref`` before version expansion."""

    ref: str
    prototype: str


@dataclass(frozen=True, slots=True)
class ResolvedMethodUse:
    ref: str
    name: str
    prototype: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "name": self.name,
            "prototype": self.prototype,
            "version": self.version,
        }


@dataclass(frozen=True, slots=True)
class MethodIndexEntry:
    search: str
    name: str
    summary: str
    ref: str
    version: str

    def key(self) -> tuple[str, str, str]:
        """Identity used to collapse duplicates across collections."""
        return (self.search, self.name, self.ref)

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "name": self.name,
            "summary": self.summary,
            "ref": self.ref,
            "version": self.version,
        }


@dataclass(frozen=True, slots=True)
class ResolvedCollection:
    ref: str
    name: str
    names: tuple[str, ...]
    summary: str
    detail: str
    samples: tuple[Sample, ...]
    methods: tuple[ResolvedMethodUse, ...]
    method_index: tuple[MethodIndexEntry, ...]

    def implemented_refs(self) -> tuple[str, ...]:
        """Distinct method refs in ``methods`` order."""
        return tuple(dict.fromkeys(use.ref for use in self.methods))

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "name": self.name,
            "names": list(self.names),
            "summary": self.summary,
            "detail": self.detail,
            "samples": [s.to_dict() for s in self.samples],
            "methods": [m.to_dict() for m in self.methods],
            "methodIndex": [e.to_dict() for e in self.method_index],
        }


@dataclass(frozen=True, slots=True)
class CollectionMethodSupport:
    """Support status of one collection for one method.

    ``note`` is None when the collection implements the method without a
    declared speed class.
    """

    ref: str
    name: str
    note: str | None = None

    @property
    def implemented(self) -> bool:
        return self.note != NOTE_NOT_IMPLEMENTED

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ref": self.ref, "name": self.name}
        if self.note is not None:
            out["note"] = self.note
        return out


@dataclass(frozen=True, slots=True)
class ResolvedMethod:
    ref: str
    name: str
    names: tuple[str, ...]
    deprecated: bool
    summary: str
    detail: str
    samples: tuple[Sample, ...]
    collections: tuple[CollectionMethodSupport, ...]
    versions: dict[str, VersionedMethod] = field(default_factory=dict[str, VersionedMethod])

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "name": self.name,
            "names": list(self.names),
            "deprecated": self.deprecated,
            "summary": self.summary,
            "detail": self.detail,
            "samples": [s.to_dict() for s in self.samples],
            "collections": [c.to_dict() for c in self.collections],
            "versions": {v: vm.to_dict() for v, vm in self.versions.items()},
        }


# ---------------------------------------------------------------------------
# Search records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CollectionSearchEntry:
    search: str
    name: str
    ref: str
    summary: str
    methods: str
    type: str = "collection"

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "name": self.name,
            "type": self.type,
            "ref": self.ref,
            "summary": self.summary,
            "methods": self.methods,
        }


@dataclass(frozen=True, slots=True)
class MethodSearchEntry:
    search: str
    name: str
    ref: str
    summary: str
    collections: str
    type: str = "method"

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "name": self.name,
            "type": self.type,
            "ref": self.ref,
            "summary": self.summary,
            "collections": self.collections,
        }


SearchEntry: TypeAlias = CollectionSearchEntry | MethodSearchEntry
