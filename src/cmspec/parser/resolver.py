"""Resolve ``$ref`` JSON Reference pointers and find the ones that dangle.

Generated documents reference components (``{"$ref": "#/components/schemas/posts"}``)
instead of inlining them. Every pointer must land on an existing key; this
module walks a document, collects each pointer with the location where it was
found, and tries to resolve it.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references are reported as unresolvable.

Public functions:

* :func:`resolve_ref` -- Resolve one pointer against a root document.
* :func:`iter_refs` -- Yield ``(location, ref)`` for every pointer.
* :func:`find_dangling_refs` -- The subset of pointers with no target.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from cmspec.exceptions import ReferenceError_


def resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/components/schemas/posts`` and
    navigates the root dict to locate the referenced value.  Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string.
        root: The root document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        ReferenceError_: If the reference is external, or if any segment in
            the pointer path does not exist in the document.
    """
    if not ref.startswith("#/"):
        raise ReferenceError_(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    segments = ref[2:].split("/")

    current: Any = root
    for segment in segments:
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise ReferenceError_(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise ReferenceError_(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise ReferenceError_(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def iter_refs(obj: Any, location: str = "#") -> Iterator[tuple[str, str]]:
    """Yield ``(location, ref)`` for every ``$ref`` within *obj*, depth-first.

    ``location`` is the JSON Pointer of the dict holding the ``$ref``, so a
    failing pointer can be traced back to the operation or schema that
    emitted it.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            yield location, ref
        for key, value in obj.items():
            if key == "$ref":
                continue
            yield from iter_refs(value, f"{location}/{_escape(str(key))}")
    elif isinstance(obj, list):
        for index, item in enumerate(obj):
            yield from iter_refs(item, f"{location}/{index}")


def find_dangling_refs(document: dict[str, Any]) -> list[tuple[str, str]]:
    """Return every ``(location, ref)`` whose pointer does not resolve.

    Args:
        document: A generated OpenAPI document.

    Returns:
        The unresolvable pointers in document order; empty when the
        document is referentially complete.
    """
    dangling: list[tuple[str, str]] = []
    for location, ref in iter_refs(document):
        try:
            resolve_ref(ref, document)
        except ReferenceError_:
            dangling.append((location, ref))
    return dangling
