"""Tests for collectiondocs.validation reference checks."""
from __future__ import annotations

from typing import Any

import pytest

from collectiondocs.doc_types import LoadError, UnresolvedReferenceError
from collectiondocs.loader import MappingDocumentSource
from collectiondocs.method_registry import MethodRegistry
from collectiondocs.records import load_collections, load_interfaces
from collectiondocs.validation import find_reference_problems, validate_references


def _plain(text: str) -> str:
    return text


def _check(documents: dict[str, dict[str, Any]]) -> list[str]:
    source = MappingDocumentSource(documents)
    return find_reference_problems(
        load_interfaces(source, _plain),
        load_collections(source, _plain),
        MethodRegistry.from_source(source, _plain),
    )


def test_clean_tree_has_no_problems() -> None:
    problems = _check(
        {
            "interface": {"ordered": {"name": "Ordered", "collections": ["list"]}},
            "collection": {
                "list": {"name": "List", "methods": ["push"]},
                "deque": {"name": "Deque", "inherits": ["undeclared"], "mixin": ["list/push"]},
            },
            "method": {"push": {"name": "push", "fast": ["list"]}},
        }
    )
    assert problems == []


def test_every_problem_reported() -> None:
    problems = _check(
        {
            "interface": {"ordered": {"name": "Ordered", "collections": ["ghost"]}},
            "collection": {"list": {"name": "List", "methods": ["pop"], "mixin": ["other/peek"]}},
            "method": {"push": {"name": "push", "slow": ["nowhere"]}},
        }
    )
    assert problems == [
        "interface/ordered: collection 'ghost' is not declared",
        "collection/list: method 'pop' is not declared",
        "collection/list: mixin method 'peek' is not declared",
        "method/push: slow collection 'nowhere' is not declared",
    ]


def test_validate_raises_with_all_problems() -> None:
    source = MappingDocumentSource({"collection": {"list": {"name": "List", "methods": ["a", "b"]}}})
    with pytest.raises(UnresolvedReferenceError) as excinfo:
        validate_references({}, load_collections(source, _plain), MethodRegistry())
    assert len(excinfo.value.problems) == 2
    assert "2 unresolved reference(s)" in str(excinfo.value)


def test_malformed_mixin_is_load_error() -> None:
    with pytest.raises(LoadError, match="collection/list"):
        _check({"collection": {"list": {"name": "List", "mixin": ["push"]}}, "method": {}})
