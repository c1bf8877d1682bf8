"""Tests for collectiondocs.method_registry version trees."""
from __future__ import annotations

from typing import Any

import pytest

from collectiondocs.doc_types import LoadError, UnresolvedReferenceError
from collectiondocs.loader import MappingDocumentSource, RawDocument
from collectiondocs.method_registry import MethodRegistry, build_method
from collectiondocs.records import load_collections
from collectiondocs.resolver import resolve_collections


def _plain(text: str) -> str:
    return text


def _method(front: dict[str, Any], *body: str):
    return build_method(RawDocument("method", "m", front, tuple(body)), _plain)


class TestVersionTree:
    def test_unversioned_gets_empty_key(self) -> None:
        method = _method({"name": "get(key)"})
        assert list(method.versions) == [""]
        versioned = method.versions[""]
        assert versioned.name == "get(key)"
        assert versioned.names == ("get(key)",)
        assert versioned.ref == "m"

    def test_scalar_version_uses_string_form(self) -> None:
        method = _method({"name": "get(key)", "version": 2})
        assert list(method.versions) == ["2"]
        assert method.versions["2"].version == "2"

    def test_scalar_version_wins_over_mapping(self) -> None:
        method = _method({"name": "x", "version": "v1", "versions": {"v2": {}}})
        assert list(method.versions) == ["v1"]

    def test_versions_mapping_kept_in_order_with_overrides(self) -> None:
        method = _method(
            {
                "name": "add(value)",
                "names": ["add(value)", "push(value)"],
                "versions": {
                    "v2": {"name": "add(value, key)"},
                    "v1": None,
                    "v0": {"names": ["put(value)"]},
                },
            }
        )
        assert list(method.versions) == ["v2", "v1", "v0"]
        assert method.versions["v2"].name == "add(value, key)"
        # per-version name does not replace the declared names list
        assert method.versions["v2"].names == ("add(value)", "push(value)")
        assert method.versions["v1"].names == ("add(value)", "push(value)")
        assert method.versions["v0"].names == ("put(value)",)
        assert method.versions["v0"].name == "add(value)"

    def test_version_names_default_to_version_name(self) -> None:
        method = _method({"name": "old()", "versions": {"2": {"name": "new()"}}})
        assert method.versions["2"].names == ("new()",)

    def test_empty_versions_mapping_means_unversioned(self) -> None:
        assert list(_method({"name": "x", "versions": {}}).versions) == [""]

    @pytest.mark.parametrize("flag", [True, False])
    def test_boolean_version_is_not_a_label(self, flag: bool) -> None:
        assert list(_method({"name": "x", "version": flag}).versions) == [""]
        method = _method({"name": "x", "version": flag, "versions": {"3": {}}})
        assert list(method.versions) == ["3"]

    def test_version_summary_override(self) -> None:
        method = _method(
            {"name": "x", "summary": "base", "versions": {"1": {}, "2": {"summary": "v2 only"}}}
        )
        assert method.summary == "base"
        assert method.versions["1"].summary == "base"
        assert method.versions["2"].summary == "v2 only"

    def test_version_summary_reaches_method_index(self) -> None:
        source = MappingDocumentSource(
            {
                "collection": {"list": {"name": "List", "methods": ["x"]}},
                "method": {
                    "x": {
                        "name": "x()",
                        "summary": "base",
                        "versions": {"1": {}, "2": {"name": "x(y)", "summary": "v2 only"}},
                    }
                },
            }
        )
        registry = MethodRegistry.from_source(source, _plain)
        index = resolve_collections(load_collections(source, _plain), registry)["list"].method_index
        assert [(e.version, e.summary) for e in index] == [("1", "base"), ("2", "v2 only")]

    def test_versions_must_be_mapping(self) -> None:
        with pytest.raises(LoadError, match="versions"):
            _method({"name": "x", "versions": ["1", "2"]})

    def test_version_override_must_be_mapping(self) -> None:
        with pytest.raises(LoadError, match="overrides"):
            _method({"name": "x", "versions": {"1": "nope"}})


class TestMethodFields:
    def test_deprecated_is_coerced(self) -> None:
        assert _method({"name": "x"}).deprecated is False
        method = _method({"name": "x", "deprecated": 1, "versions": {"a": {"deprecated": False}}})
        assert method.deprecated is True
        assert method.versions["a"].deprecated is True

    def test_summary_and_detail_fall_back_to_body(self) -> None:
        method = _method({"name": "x"}, "Body summary", "Body detail")
        assert method.summary == "Body summary"
        assert method.detail == "Body detail"
        assert method.versions[""].summary == "Body summary"

    def test_front_summary_wins(self) -> None:
        method = _method({"name": "x", "summary": "Front"}, "Body")
        assert method.summary == "Front"

    def test_performance_hints(self) -> None:
        method = _method({"name": "x", "very-fast": ["Map"], "fast": ["List"], "slow": ["Set"]})
        assert method.hints.very_fast == ("Map",)
        assert method.hints.fast == ("List",)
        assert method.hints.slow == ("Set",)
        assert method.hints.to_dict() == {"very-fast": ["Map"], "fast": ["List"], "slow": ["Set"]}

    def test_missing_name_is_load_error(self) -> None:
        with pytest.raises(LoadError, match="method/m"):
            _method({"versions": {"1": {}}})


class TestRegistry:
    def test_order_and_lookup(self) -> None:
        a = build_method(RawDocument("method", "a", {"name": "a"}), _plain)
        b = build_method(RawDocument("method", "b", {"name": "b"}), _plain)
        registry = MethodRegistry([b, a])
        assert registry.refs() == ("b", "a")
        assert [m.ref for m in registry] == ["b", "a"]
        assert "a" in registry and "c" not in registry
        assert registry.get("a") is a
        assert len(registry) == 2

    def test_missing_ref_raises(self) -> None:
        with pytest.raises(UnresolvedReferenceError, match="'nope'"):
            MethodRegistry().get("nope")

    def test_duplicate_ref_raises(self) -> None:
        a = build_method(RawDocument("method", "a", {"name": "a"}), _plain)
        with pytest.raises(LoadError, match="Duplicate"):
            MethodRegistry([a, a])
