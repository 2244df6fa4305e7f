"""Tests for cmspec.generator.entities -- per-entity components."""

from __future__ import annotations

from typing import Any

import pytest

from cmspec.generator.document import DocumentBuilder
from cmspec.generator.entities import (
    BUILTIN_PROPERTIES,
    UPLOAD_PROPERTIES,
    generate_collection,
    generate_global,
    generate_upload_collection,
    seed_defaults,
)
from cmspec.models import CollectionConfig, GlobalConfig


@pytest.fixture
def builder() -> DocumentBuilder:
    return DocumentBuilder({"title": "t", "description": "d", "version": "1"})


def _components(builder: DocumentBuilder) -> dict[str, Any]:
    return builder.to_dict()["components"]


class TestSeedDefaults:
    def test_shared_schemas(self, builder: DocumentBuilder) -> None:
        seed_defaults(builder)
        schemas = _components(builder)["schemas"]
        assert set(schemas) == {"paginationResponse", "createResponse", "countResponse"}
        assert schemas["paginationResponse"]["properties"]["hasNextPage"] == {
            "type": "boolean",
            "default": False,
        }
        assert schemas["countResponse"]["required"] == ["totalDocs"]

    def test_count_response(self, builder: DocumentBuilder) -> None:
        seed_defaults(builder)
        count = _components(builder)["responses"]["count"]
        assert count["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/countResponse"
        }


class TestCollection:
    """Scenario: posts with a single required title."""

    @pytest.fixture
    def components(self, builder: DocumentBuilder) -> dict[str, Any]:
        posts = CollectionConfig.model_validate(
            {"slug": "posts", "fields": [{"name": "title", "type": "text", "required": True}]}
        )
        generate_collection(builder, posts)
        return _components(builder)

    def test_read_schema(self, components: dict[str, Any]) -> None:
        assert components["schemas"]["posts"] == {
            "type": "object",
            "required": ["id", "createdAt", "updatedAt", "title"],
            "properties": {
                "id": {"type": "number"},
                "createdAt": {"type": "string", "format": "date-time"},
                "updatedAt": {"type": "string", "format": "date-time"},
                "title": {"type": "string"},
            },
        }

    def test_write_schema(self, components: dict[str, Any]) -> None:
        assert components["schemas"]["newPosts"] == {
            "type": "object",
            "required": ["title"],
            "properties": {"title": {"type": "string"}},
        }

    def test_request_bodies(self, components: dict[str, Any]) -> None:
        bodies = components["requestBodies"]
        assert bodies["newPosts"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/newPosts"
        }
        assert bodies["posts"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/posts"
        }

    def test_responses(self, components: dict[str, Any]) -> None:
        responses = components["responses"]
        assert set(responses) == {"posts", "newPosts", "postsList"}
        created = responses["newPosts"]["content"]["application/json"]["schema"]
        assert created == {
            "allOf": [
                {"$ref": "#/components/schemas/posts"},
                {"$ref": "#/components/schemas/createResponse"},
            ]
        }
        listing = responses["postsList"]["content"]["application/json"]["schema"]
        assert listing["allOf"][0]["properties"]["docs"]["items"] == {
            "$ref": "#/components/schemas/posts"
        }
        assert listing["allOf"][1] == {"$ref": "#/components/schemas/paginationResponse"}

    def test_descriptions(self, components: dict[str, Any]) -> None:
        assert components["responses"]["posts"]["description"] == "successful operation"


class TestUploadCollection:
    """Scenario: an upload collection with no extra fields."""

    @pytest.fixture
    def components(self, builder: DocumentBuilder) -> dict[str, Any]:
        media = CollectionConfig.model_validate({"slug": "media", "upload": True})
        generate_upload_collection(builder, media)
        return _components(builder)

    def test_read_schema_has_file_attributes(self, components: dict[str, Any]) -> None:
        schema = components["schemas"]["media"]
        expected = list(BUILTIN_PROPERTIES) + list(UPLOAD_PROPERTIES)
        assert schema["required"] == expected
        assert list(schema["properties"]) == expected
        assert len(UPLOAD_PROPERTIES) == 9

    def test_multipart_body(self, components: dict[str, Any]) -> None:
        body = components["requestBodies"]["uploadMedia"]
        schema = body["content"]["multipart/form-data"]["schema"]
        assert schema["required"] == ["file"]
        assert schema["properties"]["file"] == {"type": "string", "format": "binary"}
        assert schema["properties"]["_payload"] == components["schemas"]["newMedia"]

    def test_shares_collection_components(self, components: dict[str, Any]) -> None:
        assert "newMedia" in components["schemas"]
        assert "mediaList" in components["responses"]


class TestGlobal:
    @pytest.fixture
    def components(self, builder: DocumentBuilder) -> dict[str, Any]:
        settings = GlobalConfig.model_validate(
            {"slug": "settings", "fields": [{"name": "siteName", "type": "text"}]}
        )
        generate_global(builder, settings)
        return _components(builder)

    def test_schema(self, components: dict[str, Any]) -> None:
        schema = components["schemas"]["globalSettings"]
        assert schema["required"] == ["id", "createdAt", "updatedAt", "globalType"]
        assert schema["properties"]["siteName"] == {"type": "string"}
        assert schema["properties"]["globalType"] == {"type": "string"}

    def test_body_and_response_share_schema(self, components: dict[str, Any]) -> None:
        ref = {"$ref": "#/components/schemas/globalSettings"}
        assert components["requestBodies"]["globalSettings"]["content"]["application/json"]["schema"] == ref
        assert components["responses"]["globalSettings"]["content"]["application/json"]["schema"] == ref

    def test_body_and_response_refs_are_separate_objects(self, components: dict[str, Any]) -> None:
        body = components["requestBodies"]["globalSettings"]["content"]["application/json"]["schema"]
        response = components["responses"]["globalSettings"]["content"]["application/json"]["schema"]
        assert body is not response

    def test_no_write_shape(self, components: dict[str, Any]) -> None:
        assert "newSettings" not in components["schemas"]
