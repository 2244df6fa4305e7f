"""Inspect commands -- examine a content model and what it generates.

Provides the ``cmspec inspect`` sub-command group with read-only
commands: the entities declared in a content model, and the paths and
component schemas the generator would emit for it. Nothing is written to
disk.
"""

from __future__ import annotations

import typer

from cmspec.models import ContentModel
from cmspec.output import error, info, print_table


inspect_app = typer.Typer(no_args_is_help=True)

_METHOD_ORDER = ("get", "post", "put", "patch", "delete", "head", "options", "trace")


def _load_model(source: str) -> ContentModel:
    """Load and validate the content model at *source*.

    Raises:
        typer.Exit: With the error's exit code when loading fails.
    """
    from cmspec.exceptions import CmspecError
    from cmspec.parser import load_source, parse_content_model

    try:
        return parse_content_model(load_source(source))
    except CmspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _build(source: str) -> dict:
    from cmspec.config import resolve_options
    from cmspec.exceptions import CmspecError
    from cmspec.generator import build_document

    model = _load_model(source)
    try:
        return build_document(model, resolve_options())
    except CmspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("entities")
def inspect_entities(
    model: str = typer.Argument(help="Content model file, URL, or '-' for stdin."),
) -> None:
    """List the collections and globals of a content model.

    Shows one row per entity with its kind (``collection``, ``upload`` or
    ``global``), the number of top-level fields and the number of custom
    endpoints.

    Example::

        cmspec inspect entities payload.json
    """
    content_model = _load_model(model)

    rows: list[list[str]] = []
    for global_ in content_model.globals:
        rows.append([
            global_.slug,
            "global",
            str(len(global_.fields)),
            str(len(global_.endpoints)),
        ])
    for collection in content_model.collections:
        rows.append([
            collection.slug,
            "upload" if collection.is_upload else "collection",
            str(len(collection.fields)),
            str(len(collection.endpoints)),
        ])

    if not rows:
        info("No collections or globals defined.")
        return

    print_table(
        ["Slug", "Kind", "Fields", "Endpoints"],
        rows,
        title=f"Entities ({len(rows)})",
    )


@inspect_app.command("paths")
def inspect_paths(
    model: str = typer.Argument(help="Content model file, URL, or '-' for stdin."),
) -> None:
    """List every operation the generated document would expose.

    Example::

        cmspec inspect paths payload.json
        cmspec --json inspect paths payload.json
    """
    document = _build(model)

    rows: list[list[str]] = []
    for path, item in sorted(document["paths"].items()):
        for method in _METHOD_ORDER:
            operation = item.get(method)
            if operation is None:
                continue
            rows.append([method.upper(), path, operation.get("operationId", "-")])

    print_table(
        ["Method", "Path", "Operation"], rows, title=f"Paths ({len(rows)})"
    )


@inspect_app.command("schemas")
def inspect_schemas(
    model: str = typer.Argument(help="Content model file, URL, or '-' for stdin."),
) -> None:
    """List the component schemas with up to five property names each.

    Example::

        cmspec inspect schemas payload.json
    """
    document = _build(model)
    schemas = document["components"]["schemas"]

    rows: list[list[str]] = []
    for name, schema in sorted(schemas.items()):
        prop_names = list(schema.get("properties", {}))
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([name, schema.get("type", "-"), props or "-"])

    print_table(
        ["Schema", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})"
    )
