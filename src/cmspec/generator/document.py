"""Assemble the complete API-description document.

The in-progress document is owned by a :class:`DocumentBuilder`, which is
passed explicitly into every entity and route generator. Assembly order is
fixed so that array-valued output (``tags``) is deterministic:

1. Shared default schemas and the ``count`` response.
2. Globals, in declaration order.
3. Collections, in declaration order.

Within an entity, components are added first, then CRUD path items, then
custom endpoints.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from cmspec.config import atomic_write
from cmspec.exceptions import DuplicateSlugError, OutputError
from cmspec.generator.entities import (
    GLOBAL_PREFIX,
    generate_collection,
    generate_global,
    generate_upload_collection,
    seed_defaults,
)
from cmspec.generator.routes import (
    COLLECTIONS_BASE,
    GLOBALS_BASE,
    collection_routes,
    global_routes,
    merge_custom_endpoints,
    upload_collection_routes,
)
from cmspec.models import ComponentType, ContentModel, GeneratorOptions

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.1"

_PATHS = "paths"


class DocumentBuilder:
    """Mutable accumulator for one generated document.

    Every component and path item is registered together with the slug of
    the entity that produced it. Registering a name a second time is a slug
    collision: by default the later entity overwrites the earlier one and a
    warning is logged; with ``strict_slugs`` a
    :class:`~cmspec.exceptions.DuplicateSlugError` is raised instead.

    Args:
        info: The document's ``info`` object.
        strict_slugs: Fail on the first collision instead of overwriting.
    """

    def __init__(self, info: dict[str, Any], strict_slugs: bool = False) -> None:
        self._strict = strict_slugs
        self._owners: dict[tuple[str, str], Optional[str]] = {}
        self._document: dict[str, Any] = {
            "openapi": OPENAPI_VERSION,
            "info": info,
            "tags": [],
            "paths": {},
            "components": {kind.value: {} for kind in ComponentType},
        }

    @property
    def strict_slugs(self) -> bool:
        return self._strict

    def _claim(self, section: str, name: str, owner: Optional[str]) -> None:
        key = (section, name)
        if key in self._owners:
            previous = self._owners[key]
            message = (
                f"'{name}' in {section} is generated by both "
                f"'{previous or 'defaults'}' and '{owner or 'defaults'}'"
            )
            if self._strict:
                raise DuplicateSlugError(message)
            logger.warning("%s; the later definition wins", message)
        self._owners[key] = owner

    # -- tags ---------------------------------------------------------------

    def add_tag(self, name: str) -> None:
        """Append ``{"name": name}`` to the document's tag list."""
        self._document["tags"].append({"name": name})

    # -- components ---------------------------------------------------------

    def add_component(
        self,
        component_type: ComponentType,
        name: str,
        value: dict[str, Any],
        owner: Optional[str] = None,
    ) -> None:
        """Register *value* under ``components.<component_type>.<name>``."""
        self._claim(component_type.value, name, owner)
        self._document["components"][component_type.value][name] = value

    def add_schema(self, name: str, value: dict[str, Any], owner: Optional[str] = None) -> None:
        self.add_component(ComponentType.SCHEMAS, name, value, owner)

    def add_request_body(
        self, name: str, value: dict[str, Any], owner: Optional[str] = None
    ) -> None:
        self.add_component(ComponentType.REQUEST_BODIES, name, value, owner)

    def add_response(self, name: str, value: dict[str, Any], owner: Optional[str] = None) -> None:
        self.add_component(ComponentType.RESPONSES, name, value, owner)

    # -- paths --------------------------------------------------------------

    def set_path_item(
        self, path: str, item: dict[str, Any], owner: Optional[str] = None
    ) -> None:
        """Register a complete path item at *path*, replacing any existing one."""
        self._claim(_PATHS, path, owner)
        self._document["paths"][path] = item

    def path_item(self, path: str) -> dict[str, Any]:
        """Return the path item at *path*, creating an empty one if needed."""
        return self._document["paths"].setdefault(path, {})

    def merge_operation(self, path: str, method: str, operation: dict[str, Any]) -> None:
        """Set one operation on the path item at *path*, keeping its other keys."""
        item = self.path_item(path)
        if method in item:
            logger.warning("Operation %s %s is overridden by a custom endpoint", method.upper(), path)
        item[method] = operation

    def to_dict(self) -> dict[str, Any]:
        """Return the assembled document."""
        return self._document


def build_info(options: GeneratorOptions) -> dict[str, Any]:
    """Merge the info override under the fixed title, description and version."""
    return {
        **options.info,
        "title": options.title,
        "description": options.description,
        "version": options.version,
    }


def build_document(
    model: ContentModel, options: Optional[GeneratorOptions] = None
) -> dict[str, Any]:
    """Compile *model* into a complete OpenAPI 3.0.1 document.

    Args:
        model: The validated content model.
        options: Document metadata and collision policy; defaults apply
            when omitted.

    Returns:
        The document as a plain dict, ready for JSON serialization.

    Raises:
        GenerationError: If a structural-only field reaches the leaf mapper.
        DuplicateSlugError: On a component or path collision when
            ``options.strict_slugs`` is set.
    """
    options = options or GeneratorOptions()
    builder = DocumentBuilder(build_info(options), strict_slugs=options.strict_slugs)

    seed_defaults(builder)

    for global_ in model.globals:
        builder.add_tag(global_.slug)
        generate_global(builder, global_)
        global_routes(builder, global_)
        merge_custom_endpoints(
            builder, GLOBALS_BASE, global_.slug, global_.endpoints, GLOBAL_PREFIX
        )

    for collection in model.collections:
        builder.add_tag(collection.slug)
        if collection.is_upload:
            generate_upload_collection(builder, collection)
            upload_collection_routes(builder, collection)
        else:
            generate_collection(builder, collection)
            collection_routes(builder, collection)
        merge_custom_endpoints(
            builder, COLLECTIONS_BASE, collection.slug, collection.endpoints
        )

    document = builder.to_dict()
    logger.debug(
        "Built document with %d paths and %d schemas",
        len(document["paths"]),
        len(document["components"]["schemas"]),
    )
    return document


def serialize_document(document: dict[str, Any]) -> str:
    """Render *document* as 2-space indented JSON with a trailing newline."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_document(document: dict[str, Any], path: Path) -> None:
    """Write *document* to *path* atomically.

    Every extension receives the same JSON serialization; anything other
    than ``.json`` is logged as a warning.

    Raises:
        OutputError: If the file cannot be written.
    """
    if path.suffix.lower() != ".json":
        logger.warning(
            "Output path %s does not end in .json; writing JSON regardless", path
        )
    try:
        atomic_write(path, serialize_document(document))
    except OSError as exc:
        raise OutputError(f"Cannot write document to {path}: {exc}") from exc
    logger.debug("Wrote document to %s", path)


def generate(model: ContentModel, options: Optional[GeneratorOptions] = None) -> dict[str, Any]:
    """Build the document and, when ``options.output`` is set, write it.

    Generation completes in memory before anything is written, so a failed
    run never leaves a partial file behind.
    """
    options = options or GeneratorOptions()
    document = build_document(model, options)
    if options.output:
        write_document(document, Path(options.output))
    return document
