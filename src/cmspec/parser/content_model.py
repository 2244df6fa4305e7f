"""Validate a raw content-model mapping into :class:`~cmspec.models.ContentModel`.

Host configurations are often exported wholesale, so a top-level ``config``
wrapper is unwrapped before validation. Pydantic errors are condensed into a
single :class:`~cmspec.exceptions.ContentModelError` listing every failing
location, so a broken model is reported in one pass.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from cmspec.exceptions import ContentModelError
from cmspec.models import ContentModel

_MAX_REPORTED_ERRORS = 10


def parse_content_model(raw: dict[str, Any]) -> ContentModel:
    """Validate *raw* into a :class:`~cmspec.models.ContentModel`.

    Args:
        raw: A mapping with ``collections`` and/or ``globals`` sequences,
            optionally nested under a ``config`` key.

    Returns:
        The validated content model.

    Raises:
        ContentModelError: If the mapping does not describe a valid model.
    """
    if "collections" not in raw and "globals" not in raw and isinstance(raw.get("config"), dict):
        raw = raw["config"]

    try:
        return ContentModel.model_validate(raw)
    except ValidationError as exc:
        raise ContentModelError(_summarize(exc)) from exc


def _summarize(exc: ValidationError) -> str:
    """Render a ValidationError as ``path: message`` lines."""
    errors = exc.errors()
    lines = [f"Invalid content model ({len(errors)} error(s)):"]
    for err in errors[:_MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  {location}: {err['msg']}")
    if len(errors) > _MAX_REPORTED_ERRORS:
        lines.append(f"  ... and {len(errors) - _MAX_REPORTED_ERRORS} more")
    return "\n".join(lines)
