"""Verify command -- check a generated document for dangling references.

Implements the ``cmspec verify`` top-level command. Every ``$ref`` in the
document must point at an existing key; any that do not are listed with the
location where they appear and the command exits with
:data:`~cmspec.exit_codes.EXIT_GENERATION_ERROR`.
"""

from __future__ import annotations

import typer

from cmspec.output import error, info, print_table, success


def verify_command(
    document: str = typer.Argument(
        help="Generated document file, URL, or '-' for stdin.",
    ),
) -> None:
    """Verify that every ``$ref`` in a generated document resolves.

    Args:
        document: Source of the generated OpenAPI document.

    Raises:
        typer.Exit: With code 8 when dangling references are found, or
            the loader's exit code when the document cannot be read.

    Example::

        cmspec verify openapi.json
        cmspec generate payload.json | cmspec verify -
    """
    from cmspec.exceptions import CmspecError, ReferenceError_
    from cmspec.parser import find_dangling_refs, load_source, validate_openapi_version

    try:
        raw = load_source(document)
        version = validate_openapi_version(raw)
    except CmspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Checking OpenAPI {version} document: {document}")
    dangling = find_dangling_refs(raw)

    if dangling:
        print_table(
            ["Location", "Reference"],
            [[location, ref] for location, ref in dangling],
            title=f"Dangling references ({len(dangling)})",
        )
        error(f"{len(dangling)} reference(s) do not resolve")
        raise typer.Exit(code=ReferenceError_.exit_code)

    success("All references resolve.")
