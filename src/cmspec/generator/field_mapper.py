"""Map one leaf field onto its schema fragment.

The mapping is a fixed table keyed on field kind. Select and radio fields
additionally carry an ``enum`` built from their normalised options.

Structural kinds never reach this module: ``tabs`` are flattened and ``ui``
is skipped by :mod:`~cmspec.generator.schema_compiler`. Receiving either is
an internal invariant violation and aborts generation.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from cmspec.exceptions import GenerationError
from cmspec.models import LeafField, Mode, OptionsField, SelectOption

logger = logging.getLogger(__name__)

_DATE_TIME = {"type": "string", "format": "date-time"}

_LEAF_SCHEMAS: dict[str, dict[str, Any]] = {
    "text": {"type": "string"},
    "textarea": {"type": "string"},
    "richText": {"type": "string"},
    "code": {"type": "string"},
    "number": {"type": "number"},
    "checkbox": {"type": "boolean"},
    "date": _DATE_TIME,
    "collapsible": _DATE_TIME,
    "email": {"type": "string", "format": "email"},
    "json": {"type": "object"},
    "point": {},
    "upload": {
        "type": "string",
        "description": "the key of the file uploaded to the upload collection",
    },
}


def normalize_options(options: list[Any]) -> list[Any]:
    """Reduce select/radio options to their values, in declaration order.

    A bare string is its own value; a :class:`~cmspec.models.SelectOption`
    or a mapping contributes its ``value``. Any other shape is kept as
    ``None`` and logged, rather than rejected.
    """
    values: list[Any] = []
    for option in options:
        if isinstance(option, str):
            values.append(option)
        elif isinstance(option, SelectOption):
            values.append(option.value)
        elif isinstance(option, Mapping) and "value" in option:
            values.append(option["value"])
        else:
            logger.warning("Option %r has no value; emitting null in enum", option)
            values.append(None)
    return values


def map_leaf(mode: Mode, field: Any) -> dict[str, Any]:
    """Return the schema fragment for a single leaf field.

    Args:
        mode: The projection mode. Leaf shapes are identical in both modes.
        field: A :class:`~cmspec.models.LeafField` or
            :class:`~cmspec.models.OptionsField`.

    Returns:
        A fresh schema dict (callers may mutate it).

    Raises:
        GenerationError: If *field* is not a leaf kind (``tabs``, ``ui``, or
            any structural field).
    """
    if isinstance(field, OptionsField):
        return {"type": "string", "enum": normalize_options(field.options)}

    if isinstance(field, LeafField):
        return copy.deepcopy(_LEAF_SCHEMAS[field.type])

    kind = getattr(field, "type", type(field).__name__)
    if kind == "tabs":
        raise GenerationError("tabs fields must be flattened before leaf mapping")
    if kind == "ui":
        raise GenerationError("ui fields must be skipped before leaf mapping")
    raise GenerationError(f"Field kind '{kind}' is not a leaf kind")
