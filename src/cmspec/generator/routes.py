"""Synthesize CRUD path items and merge custom endpoints.

Route templates per entity kind:

* Collection -- ``/api/<slug>`` (list, create, bulk update, bulk delete),
  ``/api/<slug>/{id}`` (find, update, delete by id) and
  ``/api/<slug>/count``.
* Upload collection -- as above, but ``/api/<slug>`` only exposes list and a
  multipart upload in place of create.
* Global -- ``/api/globals/<slug>`` (get, update).

Operation ids use the component namer (``findPosts``, ``createPosts``,
``findByIdPosts`` ...). Query parameters follow the host REST API: the base
set on every document-returning operation and the filter set on list-style
operations.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Optional

from cmspec.generator.entities import COUNT_RESPONSE, GLOBAL_PREFIX, LIST_SUFFIX, UPLOAD_PREFIX
from cmspec.generator.naming import NEW_PREFIX, component_name, compose_ref
from cmspec.models import CollectionConfig, ComponentType, Endpoint, GlobalConfig, HTTPMethod

if TYPE_CHECKING:
    from cmspec.generator.document import DocumentBuilder

logger = logging.getLogger(__name__)

COLLECTIONS_BASE = "/api/"
GLOBALS_BASE = "/api/globals/"

_BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PATCH, HTTPMethod.PUT})

BASE_QUERY_PARAMS: list[dict[str, Any]] = [
    {
        "in": "query",
        "name": "depth",
        "description": "automatically populates relationships and uploads",
        "schema": {"type": "number"},
    },
    {
        "in": "query",
        "name": "locale",
        "description": "retrieves document(s) in a specific locale",
        "schema": {"type": "string"},
    },
    {
        "in": "query",
        "name": "fallback-locale",
        "description": "specifies a fallback locale if no locale value exists",
        "schema": {"type": "string"},
    },
    {
        "in": "query",
        "name": "select",
        "description": "specifies which fields to include to the result",
        "example": "select[group][number]=true",
        "schema": {"type": "array", "items": {"type": "string"}},
    },
    {
        "in": "query",
        "name": "populate",
        "description": "specifies which fields to include to the result from populated documents",
        "example": "populate[pages][text]=true",
        "schema": {"type": "array", "items": {"type": "string"}},
    },
    {
        "in": "query",
        "name": "joins",
        "description": "specifies the custom request for each join field by name of the field",
        "example": "joins[relatedPosts][sort]=title",
        "schema": {"type": "array", "items": {"type": "string"}},
    },
]

FILTER_QUERY_PARAMS: list[dict[str, Any]] = [
    {
        "in": "query",
        "name": "limit",
        "description": "limits the number of documents returned",
        "schema": {"type": "number"},
    },
    {
        "in": "query",
        "name": "page",
        "description": "specifies which page to get documents from when used with a limit",
        "schema": {"type": "number"},
    },
    {
        "in": "query",
        "name": "sort",
        "description": "specifies the field(s) to use to sort the returned documents by",
        "example": "sort=-createdAt",
        "schema": {"type": "array", "items": {"type": "string"}},
    },
    {
        "in": "query",
        "name": "where",
        "description": "specifies advanced filters to use to query documents",
        "example": "where[color][equals]=mint",
        "schema": {"type": "array", "items": {"type": "string"}},
    },
]

ID_PATH_PARAM: dict[str, Any] = {
    "in": "path",
    "name": "id",
    "required": True,
    "schema": {"type": "string"},
}


def _params(*groups: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Concatenate parameter groups into a fresh, independently mutable list."""
    return [copy.deepcopy(param) for group in groups for param in group]


def _operation(
    slug: str,
    operation_id: str,
    response: dict[str, str],
    request_body: Optional[dict[str, str]] = None,
    parameters: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    operation: dict[str, Any] = {"operationId": operation_id, "tags": [slug]}
    if parameters:
        operation["parameters"] = parameters
    if request_body is not None:
        operation["requestBody"] = request_body
    operation["responses"] = {"200": response}
    return operation


def _response(slug: str, prefix: Optional[str] = None, suffix: Optional[str] = None) -> dict[str, str]:
    return compose_ref(ComponentType.RESPONSES, slug, prefix, suffix)


def _request_body(slug: str, prefix: Optional[str] = None) -> dict[str, str]:
    return compose_ref(ComponentType.REQUEST_BODIES, slug, prefix)


def _find_operation(slug: str) -> dict[str, Any]:
    return _operation(
        slug,
        component_name(slug, prefix="find"),
        _response(slug, suffix=LIST_SUFFIX),
        parameters=_params(BASE_QUERY_PARAMS, FILTER_QUERY_PARAMS),
    )


def _by_id_and_count_routes(builder: DocumentBuilder, slug: str) -> None:
    """Emit ``/{id}`` and ``/count``; identical for regular and upload collections."""
    builder.set_path_item(
        f"{COLLECTIONS_BASE}{slug}/{{id}}",
        {
            "parameters": _params(BASE_QUERY_PARAMS, [ID_PATH_PARAM]),
            "get": _operation(slug, component_name(slug, prefix="findById"), _response(slug)),
            "patch": _operation(
                slug,
                component_name(slug, prefix="updateById"),
                _response(slug),
                request_body=_request_body(slug),
            ),
            "delete": _operation(
                slug, component_name(slug, prefix="deleteById"), _response(slug)
            ),
        },
        owner=slug,
    )

    builder.set_path_item(
        f"{COLLECTIONS_BASE}{slug}/count",
        {
            "parameters": _params(BASE_QUERY_PARAMS),
            "get": _operation(
                slug,
                component_name(slug, prefix="count"),
                _response(COUNT_RESPONSE),
            ),
        },
        owner=slug,
    )


def collection_routes(builder: DocumentBuilder, collection: CollectionConfig) -> None:
    """Emit the three path items of a regular collection."""
    slug = collection.slug
    builder.set_path_item(
        f"{COLLECTIONS_BASE}{slug}",
        {
            "get": _find_operation(slug),
            "post": _operation(
                slug,
                component_name(slug, prefix="create"),
                _response(slug, prefix=NEW_PREFIX),
                request_body=_request_body(slug, prefix=NEW_PREFIX),
                parameters=_params(BASE_QUERY_PARAMS),
            ),
            "patch": _operation(
                slug,
                component_name(slug, prefix="update"),
                _response(slug),
                request_body=_request_body(slug),
                parameters=_params(BASE_QUERY_PARAMS, FILTER_QUERY_PARAMS),
            ),
            "delete": _operation(
                slug,
                component_name(slug, prefix="delete"),
                _response(slug),
                parameters=_params(BASE_QUERY_PARAMS, FILTER_QUERY_PARAMS),
            ),
        },
        owner=slug,
    )
    _by_id_and_count_routes(builder, slug)


def upload_collection_routes(builder: DocumentBuilder, collection: CollectionConfig) -> None:
    """Emit the path items of an upload collection (multipart POST, no bulk ops)."""
    slug = collection.slug
    builder.set_path_item(
        f"{COLLECTIONS_BASE}{slug}",
        {
            "post": _operation(
                slug,
                component_name(slug, prefix=UPLOAD_PREFIX),
                _response(slug, prefix=NEW_PREFIX),
                request_body=_request_body(slug, prefix=UPLOAD_PREFIX),
            ),
            "get": _find_operation(slug),
        },
        owner=slug,
    )
    _by_id_and_count_routes(builder, slug)


def global_routes(builder: DocumentBuilder, global_: GlobalConfig) -> None:
    """Emit ``/api/globals/<slug>`` with get and update operations."""
    slug = global_.slug
    builder.set_path_item(
        f"{GLOBALS_BASE}{slug}",
        {
            "parameters": _params(BASE_QUERY_PARAMS),
            "get": _operation(
                slug,
                component_name(slug, prefix="get"),
                _response(slug, prefix=GLOBAL_PREFIX),
            ),
            "post": _operation(
                slug,
                component_name(slug, prefix="update"),
                _response(slug, prefix=GLOBAL_PREFIX),
                request_body=_request_body(slug, prefix=GLOBAL_PREFIX),
            ),
        },
        owner=slug,
    )


def merge_custom_endpoints(
    builder: DocumentBuilder,
    base: str,
    slug: str,
    endpoints: list[Endpoint],
    component_prefix: Optional[str] = None,
) -> None:
    """Add one operation per custom endpoint at ``<base><slug><path>``.

    Each operation starts from defaults -- the entity tag, a ``200`` response
    and, for ``post``/``patch``/``put``, a request body, all pointing at the
    entity's canonical component (``component_prefix`` selects ``global<Slug>``
    for globals) -- and the endpoint's ``custom`` fragment is then merged over
    it key by key. Existing path items at the template are extended.

    Endpoints whose method has no path-item operation key (``connect``) are
    skipped with a warning.
    """
    for endpoint in endpoints:
        path = f"{base}{slug}{endpoint.path}"
        method = endpoint.http_method
        if method is None:
            logger.warning(
                "Skipping custom endpoint %s %s: OpenAPI has no '%s' operation",
                endpoint.method.upper(),
                path,
                endpoint.method,
            )
            continue

        operation: dict[str, Any] = {
            "tags": [slug],
            "responses": {"200": _response(slug, prefix=component_prefix)},
        }
        if method in _BODY_METHODS:
            operation["requestBody"] = _request_body(slug, prefix=component_prefix)
        operation.update(copy.deepcopy(endpoint.custom))

        logger.debug("Merging custom endpoint %s %s", method.value.upper(), path)
        builder.merge_operation(path, method.value, operation)
