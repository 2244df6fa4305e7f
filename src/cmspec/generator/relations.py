"""Project relationship and join fields onto schema fragments.

The shape depends on mode and cardinality:

==============  ===========================  ===============================
cardinality     ``get``                      ``new``
==============  ===========================  ===============================
single          ``$ref`` to target schema    ``{type: string}`` (id)
polymorphic     ``oneOf`` of target refs     ``{type: string}`` (id)
``hasMany``     pagination envelope of refs  array of id strings
==============  ===========================  ===============================

Join fields are derived data and never appear in ``new`` mode.
"""

from __future__ import annotations

from typing import Any, Union

from cmspec.exceptions import GenerationError
from cmspec.generator.naming import compose_ref, mode_ref
from cmspec.models import ComponentType, JoinField, Mode, RelationshipField

PAGINATION_SCHEMA = "paginationResponse"

_ID = {"type": "string"}


def paginated(items: dict[str, Any]) -> dict[str, Any]:
    """Wrap an item schema in the shared ``docs`` + pagination envelope."""
    return {
        "allOf": [
            {
                "type": "object",
                "required": ["docs"],
                "properties": {
                    "docs": {
                        "type": "array",
                        "items": items,
                    },
                },
            },
            compose_ref(ComponentType.SCHEMAS, PAGINATION_SCHEMA),
        ],
    }


def target_schema(field: Union[RelationshipField, JoinField]) -> dict[str, Any]:
    """Reference the read schema of each target; ``oneOf`` when polymorphic."""
    target = field.target
    if isinstance(target, list):
        return {
            "oneOf": [mode_ref(Mode.GET, ComponentType.SCHEMAS, slug) for slug in target]
        }
    return mode_ref(Mode.GET, ComponentType.SCHEMAS, target)


def project_relation(
    mode: Mode, field: Union[RelationshipField, JoinField]
) -> dict[str, Any]:
    """Return the schema fragment for a relationship or join field.

    Raises:
        GenerationError: If a join field is projected in ``new`` mode.
    """
    if mode == Mode.NEW:
        if isinstance(field, JoinField):
            raise GenerationError(f"join field '{field.name}' is read-only")
        if field.has_many:
            return {"type": "array", "items": dict(_ID)}
        return dict(_ID)

    if field.has_many:
        return paginated(target_schema(field))
    return target_schema(field)
