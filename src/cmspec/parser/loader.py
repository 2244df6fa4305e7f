"""Load content models and generated documents from a URL, local file, or stdin.

This module handles all input I/O and converts raw JSON or YAML into Python
dictionaries, with automatic format detection. The same loader reads both
content-model definitions (for ``generate`` and ``inspect``) and previously
generated OpenAPI documents (for ``verify``).

The two public functions are:

* :func:`load_source` -- Load and parse a mapping from any supported source.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string of a generated document.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from cmspec.exceptions import ContentModelError


def load_source(source: str) -> dict[str, Any]:
    """Load a JSON/YAML mapping from URL, file path, or stdin ('-').

    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed mapping.

    Raises:
        ContentModelError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a mapping from stdin, trying JSON and then YAML."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise ContentModelError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ContentModelError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a mapping from URL. Supports JSON and YAML responses.

    Raises:
        ContentModelError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ContentModelError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ContentModelError(f"Failed to fetch {url}: {exc}") from exc

    content = response.text
    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a mapping from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        ContentModelError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ContentModelError(f"File not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ContentModelError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise ContentModelError(f"File is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        ContentModelError: If the content cannot be parsed as either format
            or is not a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise ContentModelError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise ContentModelError(
                    f"Expected a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise ContentModelError(
                "Expected a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse input as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise ContentModelError(msg)


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string of a document.

    Args:
        document: A parsed OpenAPI document.

    Returns:
        The version string (e.g. ``'3.0.1'``).

    Raises:
        ContentModelError: If the field is missing or not a 3.x version.
    """
    if "swagger" in document:
        raise ContentModelError(
            f"Swagger {document['swagger']} documents are not supported"
        )

    openapi_version = document.get("openapi")
    if openapi_version is None:
        raise ContentModelError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if not version_str.startswith("3."):
        raise ContentModelError(f"Unsupported OpenAPI version: {version_str}")
    return version_str
