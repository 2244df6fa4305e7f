"""Emit the named components for each collection, upload collection and global.

Every entity gets component schemas, request bodies and responses keyed by
names from :mod:`~cmspec.generator.naming`. For a collection ``posts``:

==================  ==========================================================
component           content
==================  ==========================================================
schemas.posts       built-ins (``id``, ``createdAt``, ``updatedAt``) + read fields
schemas.newPosts    write fields only
requestBodies       ``newPosts`` (create), ``posts`` (update)
responses           ``posts``, ``newPosts`` (create confirmation), ``postsList``
==================  ==========================================================

Upload collections add the file attributes to the read schema and an
``uploadPosts`` multipart request body. Globals have a single read shape,
``globalSettings``, used for both request and response.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from cmspec.generator.naming import NEW_PREFIX, component_name, compose_ref, mode_ref
from cmspec.generator.relations import PAGINATION_SCHEMA, paginated
from cmspec.generator.schema_compiler import compile_fields, object_schema
from cmspec.models import CollectionConfig, ComponentType, GlobalConfig, Mode

if TYPE_CHECKING:
    from cmspec.generator.document import DocumentBuilder

logger = logging.getLogger(__name__)

GLOBAL_PREFIX = "global"
UPLOAD_PREFIX = "upload"
LIST_SUFFIX = "list"
CREATE_RESPONSE_SCHEMA = "createResponse"
COUNT_RESPONSE_SCHEMA = "countResponse"
COUNT_RESPONSE = "count"
UPLOAD_PAYLOAD_KEY = "_payload"

_DESCRIPTION = "successful operation"

DEFAULT_SCHEMAS: dict[str, dict[str, Any]] = {
    PAGINATION_SCHEMA: {
        "type": "object",
        "required": [
            "hasNextPage",
            "hasPrevPage",
            "limit",
            "page",
            "nextPage",
            "pagingCounter",
            "prevPage",
            "totalDocs",
            "totalPages",
        ],
        "properties": {
            "hasNextPage": {"type": "boolean", "default": False},
            "hasPrevPage": {"type": "boolean", "default": False},
            "limit": {"type": "number"},
            "page": {"type": "number"},
            "nextPage": {"type": "number"},
            "pagingCounter": {"type": "number"},
            "prevPage": {"type": "number"},
            "totalDocs": {"type": "number"},
            "totalPages": {"type": "number"},
        },
    },
    CREATE_RESPONSE_SCHEMA: {
        "type": "object",
        "required": ["message"],
        "properties": {
            "message": {"type": "string"},
        },
    },
    COUNT_RESPONSE_SCHEMA: {
        "type": "object",
        "required": ["totalDocs"],
        "properties": {
            "totalDocs": {"type": "number"},
        },
    },
}

BUILTIN_PROPERTIES: dict[str, dict[str, Any]] = {
    "id": {"type": "number"},
    "createdAt": {"type": "string", "format": "date-time"},
    "updatedAt": {"type": "string", "format": "date-time"},
}

UPLOAD_PROPERTIES: dict[str, dict[str, Any]] = {
    "filename": {"type": "string"},
    "filesize": {"type": "number"},
    "focalX": {"type": "number"},
    "focalY": {"type": "number"},
    "mimeType": {"type": "string"},
    "thumbnailURL": {"type": "string"},
    "url": {"type": "string"},
    "height": {"type": "number"},
    "width": {"type": "number"},
}

GLOBAL_PROPERTIES: dict[str, dict[str, Any]] = {
    **BUILTIN_PROPERTIES,
    "globalType": {"type": "string"},
}


def json_content(schema: dict[str, Any], media_type: str = "application/json") -> dict[str, Any]:
    """Wrap *schema* as a request-body/response object with one media type."""
    return {
        "description": _DESCRIPTION,
        "content": {
            media_type: {
                "schema": schema,
            },
        },
    }


def _with_builtins(
    builtins: dict[str, dict[str, Any]], compiled: dict[str, Any]
) -> dict[str, Any]:
    """Prepend built-in properties to a compiled object; all built-ins are required."""
    properties = copy.deepcopy(builtins)
    properties.update(compiled["properties"])
    return object_schema(list(builtins) + compiled.get("required", []), properties)


def _read_ref(slug: str) -> dict[str, str]:
    return mode_ref(Mode.GET, ComponentType.SCHEMAS, slug)


def seed_defaults(builder: DocumentBuilder) -> None:
    """Add the shared schemas and the ``count`` response to a fresh document."""
    for name, schema in DEFAULT_SCHEMAS.items():
        builder.add_schema(name, copy.deepcopy(schema))
    builder.add_response(
        COUNT_RESPONSE,
        json_content(compose_ref(ComponentType.SCHEMAS, COUNT_RESPONSE_SCHEMA)),
    )


def _collection_components(
    builder: DocumentBuilder,
    slug: str,
    read_schema: dict[str, Any],
    write_schema: dict[str, Any],
) -> None:
    """Emit the schemas, bodies and responses shared by both collection kinds."""
    new_name = component_name(slug, prefix=NEW_PREFIX)

    builder.add_schema(component_name(slug), read_schema, owner=slug)
    builder.add_schema(new_name, write_schema, owner=slug)

    builder.add_request_body(
        new_name,
        json_content(mode_ref(Mode.NEW, ComponentType.SCHEMAS, slug)),
        owner=slug,
    )
    builder.add_request_body(component_name(slug), json_content(_read_ref(slug)), owner=slug)

    builder.add_response(component_name(slug), json_content(_read_ref(slug)), owner=slug)
    builder.add_response(
        new_name,
        json_content(
            {
                "allOf": [
                    _read_ref(slug),
                    compose_ref(ComponentType.SCHEMAS, CREATE_RESPONSE_SCHEMA),
                ],
            }
        ),
        owner=slug,
    )
    builder.add_response(
        component_name(slug, suffix=LIST_SUFFIX),
        json_content(paginated(_read_ref(slug))),
        owner=slug,
    )


def generate_collection(builder: DocumentBuilder, collection: CollectionConfig) -> None:
    """Emit components for a regular collection.

    The field tree is compiled twice: the ``get`` shape (plus built-ins)
    becomes ``<slug>``, the ``new`` shape becomes ``new<Slug>``.
    """
    slug = collection.slug
    logger.debug("Generating components for collection '%s'", slug)

    read = compile_fields(Mode.GET, collection.fields)
    write = compile_fields(Mode.NEW, collection.fields)
    _collection_components(builder, slug, _with_builtins(BUILTIN_PROPERTIES, read), write)


def generate_upload_collection(builder: DocumentBuilder, collection: CollectionConfig) -> None:
    """Emit components for an upload collection.

    Same as :func:`generate_collection`, with the file attributes merged into
    the read schema and an extra ``upload<Slug>`` multipart request body that
    carries the write shape under ``_payload`` next to the binary ``file``.
    """
    slug = collection.slug
    logger.debug("Generating components for upload collection '%s'", slug)

    read = compile_fields(Mode.GET, collection.fields)
    write = compile_fields(Mode.NEW, collection.fields)
    read_schema = _with_builtins({**BUILTIN_PROPERTIES, **UPLOAD_PROPERTIES}, read)
    _collection_components(builder, slug, read_schema, write)

    builder.add_request_body(
        component_name(slug, prefix=UPLOAD_PREFIX),
        json_content(
            {
                "type": "object",
                "required": ["file"],
                "properties": {
                    UPLOAD_PAYLOAD_KEY: copy.deepcopy(write),
                    "file": {"type": "string", "format": "binary"},
                },
            },
            media_type="multipart/form-data",
        ),
        owner=slug,
    )


def generate_global(builder: DocumentBuilder, global_: GlobalConfig) -> None:
    """Emit components for a global.

    Globals are singletons updated in place, so only the ``get`` shape is
    compiled. ``global<Slug>`` names the schema, the request body and the
    response.
    """
    slug = global_.slug
    logger.debug("Generating components for global '%s'", slug)

    read = compile_fields(Mode.GET, global_.fields)
    name = component_name(slug, prefix=GLOBAL_PREFIX)
    builder.add_schema(name, _with_builtins(GLOBAL_PROPERTIES, read), owner=slug)
    builder.add_request_body(
        name,
        json_content(compose_ref(ComponentType.SCHEMAS, slug, prefix=GLOBAL_PREFIX)),
        owner=slug,
    )
    builder.add_response(
        name,
        json_content(compose_ref(ComponentType.SCHEMAS, slug, prefix=GLOBAL_PREFIX)),
        owner=slug,
    )
