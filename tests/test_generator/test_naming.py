"""Tests for cmspec.generator.naming -- component names and $ref pointers."""

from __future__ import annotations

import pytest

from cmspec.generator.naming import (
    capitalized,
    component_name,
    compose_ref,
    mode_ref,
    ref_pointer,
)
from cmspec.models import ComponentType, Mode


class TestComponentName:
    """Test prefix/suffix composition."""

    def test_bare_base(self) -> None:
        assert component_name("posts") == "posts"

    def test_prefix_capitalizes_base(self) -> None:
        assert component_name("posts", prefix="new") == "newPosts"

    def test_suffix_is_capitalized(self) -> None:
        assert component_name("posts", suffix="list") == "postsList"

    def test_prefix_and_suffix(self) -> None:
        assert component_name("posts", prefix="find", suffix="byId") == "findPostsById"

    def test_rest_of_base_untouched(self) -> None:
        """Only the first character changes; camelCase slugs survive."""
        assert component_name("blogPosts", prefix="global") == "globalBlogPosts"
        assert component_name("blog-posts", prefix="new") == "newBlog-posts"

    def test_empty_affixes_are_ignored(self) -> None:
        assert component_name("posts", prefix="", suffix="") == "posts"

    @pytest.mark.parametrize(
        "args",
        [("posts", None, None), ("posts", "new", None), ("media", "upload", "list")],
    )
    def test_pure(self, args: tuple) -> None:
        """Identical inputs always produce the identical name."""
        assert component_name(*args) == component_name(*args)


class TestCapitalized:
    def test_single_character(self) -> None:
        assert capitalized("a") == "A"

    def test_empty(self) -> None:
        assert capitalized("") == ""


class TestRefs:
    """Test pointer construction."""

    def test_ref_pointer_literal_form(self) -> None:
        assert ref_pointer(ComponentType.SCHEMAS, "posts") == "#/components/schemas/posts"

    def test_compose_ref_request_bodies(self) -> None:
        assert compose_ref(ComponentType.REQUEST_BODIES, "posts", prefix="upload") == {
            "$ref": "#/components/requestBodies/uploadPosts"
        }

    def test_compose_ref_responses_with_suffix(self) -> None:
        assert compose_ref(ComponentType.RESPONSES, "posts", suffix="list") == {
            "$ref": "#/components/responses/postsList"
        }

    def test_mode_ref_new_forces_prefix(self) -> None:
        assert mode_ref(Mode.NEW, ComponentType.SCHEMAS, "posts") == {
            "$ref": "#/components/schemas/newPosts"
        }

    def test_mode_ref_new_overrides_given_prefix(self) -> None:
        assert mode_ref(Mode.NEW, ComponentType.SCHEMAS, "posts", prefix="global") == {
            "$ref": "#/components/schemas/newPosts"
        }

    def test_mode_ref_get_keeps_prefix(self) -> None:
        assert mode_ref(Mode.GET, ComponentType.SCHEMAS, "posts") == {
            "$ref": "#/components/schemas/posts"
        }
        assert mode_ref(Mode.GET, ComponentType.SCHEMAS, "posts", prefix="global") == {
            "$ref": "#/components/schemas/globalPosts"
        }

    def test_returns_fresh_dicts(self) -> None:
        first = compose_ref(ComponentType.SCHEMAS, "posts")
        first["$ref"] = "changed"
        assert compose_ref(ComponentType.SCHEMAS, "posts")["$ref"] == "#/components/schemas/posts"
