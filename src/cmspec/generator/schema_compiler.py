"""Compile an ordered field list into one object schema.

:func:`compile_fields` reduces a field list left to right into a single
``{type: object, required, properties}`` schema for one :class:`~cmspec.models.Mode`.
The reduction rules, in order:

1. ``ui`` fields are skipped.
2. ``hidden`` fields of any kind are skipped.
3. ``tabs`` fields are unpacked: a tab with ``interfaceName`` becomes one
   nested property under that name; any other tab's fields are merged into
   the current object alongside their siblings.
4. In ``new`` mode, fields named ``id``, ``createdAt`` or ``updatedAt``,
   ``virtual`` fields, and ``join`` fields are skipped.
5. ``group`` and ``row`` fields are transparent: their children are merged
   into the current object.
6. Every other field becomes one property keyed by its name (see
   :func:`compile_field`) and, when ``required``, joins the required list.

``required`` is de-duplicated while keeping first-seen order and omitted
entirely when empty.
"""

from __future__ import annotations

from typing import Any

from cmspec.generator.field_mapper import map_leaf
from cmspec.generator.relations import project_relation
from cmspec.models import (
    ArrayField,
    BlocksField,
    GroupField,
    JoinField,
    Mode,
    RelationshipField,
    RowField,
    TabsField,
    UIField,
)

WRITE_EXCLUDED_NAMES = frozenset({"id", "createdAt", "updatedAt"})


def object_schema(required: list[str], properties: dict[str, Any]) -> dict[str, Any]:
    """Build an object schema, de-duplicating *required* and dropping it if empty."""
    schema: dict[str, Any] = {"type": "object"}
    unique = list(dict.fromkeys(required))
    if unique:
        schema["required"] = unique
    schema["properties"] = properties
    return schema


def compile_fields(mode: Mode, fields: list[Any]) -> dict[str, Any]:
    """Compile *fields* into a single object schema for *mode*.

    Args:
        mode: ``Mode.NEW`` for the write shape, ``Mode.GET`` for the read shape.
        fields: Field nodes in declaration order.

    Returns:
        ``{"type": "object", "required": [...], "properties": {...}}``.

    Raises:
        GenerationError: If a structural-only field reaches the leaf mapper.
    """
    required: list[str] = []
    properties: dict[str, Any] = {}
    _reduce(mode, fields, required, properties)
    return object_schema(required, properties)


def _excluded_on_write(field: Any) -> bool:
    return (
        getattr(field, "name", None) in WRITE_EXCLUDED_NAMES
        or bool(field.virtual)
        or isinstance(field, JoinField)
    )


def _reduce(
    mode: Mode,
    fields: list[Any],
    required: list[str],
    properties: dict[str, Any],
) -> None:
    for field in fields:
        if isinstance(field, UIField) or field.hidden:
            continue

        if isinstance(field, TabsField):
            for tab in field.tabs:
                if tab.interface_name:
                    properties[tab.interface_name] = compile_fields(mode, tab.fields)
                else:
                    _reduce(mode, tab.fields, required, properties)
            continue

        if mode == Mode.NEW and _excluded_on_write(field):
            continue

        if isinstance(field, (GroupField, RowField)):
            _reduce(mode, field.fields, required, properties)
            continue

        properties[field.name] = compile_field(mode, field)
        if field.required:
            required.append(field.name)


def compile_field(mode: Mode, field: Any) -> dict[str, Any]:
    """Compile one named field into the schema of its property value.

    Arrays and blocks recurse into :func:`compile_fields`; relationships and
    joins go through :func:`~cmspec.generator.relations.project_relation`;
    everything else is a leaf for :func:`~cmspec.generator.field_mapper.map_leaf`.
    """
    if isinstance(field, ArrayField):
        return {"type": "array", "items": compile_fields(mode, field.fields)}

    if isinstance(field, BlocksField):
        return {
            "type": "array",
            "items": {
                "anyOf": [compile_fields(mode, block.fields) for block in field.blocks],
            },
        }

    if isinstance(field, (RelationshipField, JoinField)):
        return project_relation(mode, field)

    return map_leaf(mode, field)
