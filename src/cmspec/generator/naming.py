"""Component naming and reference-pointer construction.

Every component key and every ``$ref`` pointing at it is derived here, from
the same function, so a pointer can never drift from the key it targets.

Naming rule::

    component_name("posts")                         -> "posts"
    component_name("posts", prefix="new")           -> "newPosts"
    component_name("posts", suffix="list")          -> "postsList"
    component_name("posts", prefix="find", suffix="byId") -> "findPostsById"

:func:`mode_ref` is the mode-aware variant used by the schema compiler and
entity generators: in :attr:`~cmspec.models.Mode.NEW` it forces the ``new``
prefix so write-shape and read-shape components of one slug never collide.
"""

from __future__ import annotations

from typing import Optional

from cmspec.models import ComponentType, Mode

NEW_PREFIX = "new"


def capitalized(value: str) -> str:
    """Upper-case the first character of *value*, leaving the rest untouched."""
    return value[:1].upper() + value[1:]


def component_name(
    base: str,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
) -> str:
    """Derive a component name from a base slug and optional affixes.

    The prefix is applied first (``prefix + Capitalized(base)``), then the
    capitalised suffix is appended. The result depends only on the three
    inputs.
    """
    name = prefix + capitalized(base) if prefix else base
    if suffix:
        name += capitalized(suffix)
    return name


def ref_pointer(
    component_type: ComponentType,
    base: str,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
) -> str:
    """Return the ``#/components/<type>/<name>`` pointer string."""
    return f"#/components/{component_type.value}/{component_name(base, prefix, suffix)}"


def compose_ref(
    component_type: ComponentType,
    base: str,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
) -> dict[str, str]:
    """Return a reference object pointing at a named component.

    Example::

        >>> compose_ref(ComponentType.SCHEMAS, "posts")
        {'$ref': '#/components/schemas/posts'}
    """
    return {"$ref": ref_pointer(component_type, base, prefix, suffix)}


def mode_ref(
    mode: Mode,
    component_type: ComponentType,
    base: str,
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
) -> dict[str, str]:
    """Return a reference whose prefix follows *mode*.

    In ``NEW`` mode the prefix is always ``new``; in ``GET`` mode the given
    prefix (usually none) is used.
    """
    if mode == Mode.NEW:
        prefix = NEW_PREFIX
    return compose_ref(component_type, base, prefix, suffix)
