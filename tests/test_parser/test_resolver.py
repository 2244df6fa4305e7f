"""Tests for cmspec.parser.resolver -- pointer resolution and dangling refs."""

from __future__ import annotations

from typing import Any

import pytest

from cmspec.exceptions import ReferenceError_
from cmspec.parser.resolver import find_dangling_refs, iter_refs, resolve_ref


@pytest.fixture
def document() -> dict[str, Any]:
    return {
        "paths": {
            "/api/posts": {
                "get": {"responses": {"200": {"$ref": "#/components/responses/postsList"}}},
            },
        },
        "components": {
            "schemas": {
                "posts": {"type": "object"},
                "a/b": {"type": "string"},
                "list": {"anyOf": [{"$ref": "#/components/schemas/posts"}]},
            },
            "responses": {"postsList": {"description": "ok"}},
        },
    }


class TestResolveRef:
    def test_resolves_component(self, document: dict[str, Any]) -> None:
        assert resolve_ref("#/components/schemas/posts", document) == {"type": "object"}

    def test_escaped_slash(self, document: dict[str, Any]) -> None:
        assert resolve_ref("#/components/schemas/a~1b", document) == {"type": "string"}

    def test_array_index(self, document: dict[str, Any]) -> None:
        assert resolve_ref("#/components/schemas/list/anyOf/0", document) == {
            "$ref": "#/components/schemas/posts"
        }

    def test_missing_key(self, document: dict[str, Any]) -> None:
        with pytest.raises(ReferenceError_, match="not found"):
            resolve_ref("#/components/schemas/users", document)

    def test_bad_index(self, document: dict[str, Any]) -> None:
        with pytest.raises(ReferenceError_, match="invalid array index"):
            resolve_ref("#/components/schemas/list/anyOf/9", document)

    def test_external_rejected(self, document: dict[str, Any]) -> None:
        with pytest.raises(ReferenceError_, match="External"):
            resolve_ref("other.json#/x", document)

    def test_navigate_into_scalar(self, document: dict[str, Any]) -> None:
        with pytest.raises(ReferenceError_, match="cannot navigate"):
            resolve_ref("#/components/schemas/posts/type/x", document)


class TestIterRefs:
    def test_locations(self, document: dict[str, Any]) -> None:
        refs = list(iter_refs(document))
        assert refs == [
            ("#/paths/~1api~1posts/get/responses/200", "#/components/responses/postsList"),
            ("#/components/schemas/list/anyOf/0", "#/components/schemas/posts"),
        ]

    def test_no_refs(self) -> None:
        assert list(iter_refs({"a": [1, {"b": 2}]})) == []


class TestFindDanglingRefs:
    def test_complete_document(self, document: dict[str, Any]) -> None:
        assert find_dangling_refs(document) == []

    def test_reports_missing(self, document: dict[str, Any]) -> None:
        document["components"]["schemas"]["broken"] = {"$ref": "#/components/schemas/users"}
        assert find_dangling_refs(document) == [
            ("#/components/schemas/broken", "#/components/schemas/users")
        ]
