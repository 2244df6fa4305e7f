"""Generate command -- compile a content model into an OpenAPI document.

Implements the ``cmspec generate`` top-level command: load a content model
(local file, URL, or stdin), resolve document options through the config
precedence chain, build the document, and either write it to a file or
print it to stdout.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from cmspec.exceptions import CmspecError, InvalidUsageError
from cmspec.output import debug, error, info, print_data, success, suggest


def _parse_info(raw: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse the ``--info`` flag as a JSON object."""
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"--info must be a JSON object: {exc}") from exc
    if not isinstance(parsed, dict):
        raise InvalidUsageError("--info must be a JSON object")
    return parsed


def generate_command(
    model: str = typer.Argument(
        help="Content model file, URL, or '-' for stdin.",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the document to this path."
    ),
    title: Optional[str] = typer.Option(None, "--title", help="info.title"),
    api_version: Optional[str] = typer.Option(
        None, "--api-version", help="info.version"
    ),
    description: Optional[str] = typer.Option(
        None, "--description", help="info.description"
    ),
    info_json: Optional[str] = typer.Option(
        None, "--info", help="Extra info keys as a JSON object."
    ),
    strict_slugs: Optional[bool] = typer.Option(
        None,
        "--strict-slugs/--no-strict-slugs",
        help="Fail when two entities generate the same component or path.",
    ),
) -> None:
    """Generate an OpenAPI document from a content model.

    Without ``--output`` (and no output path in the environment or
    config), the document is printed to stdout as JSON so it can be piped.

    Args:
        model: Content model source.
        output: Destination file path.
        title: Override for ``info.title``.
        api_version: Override for ``info.version``.
        description: Override for ``info.description``.
        info_json: JSON object merged under the fixed info keys.
        strict_slugs: Turn component-name collisions into errors.

    Raises:
        typer.Exit: With the error's exit code if loading, generation or
            writing fails.

    Example::

        cmspec generate payload.json -o openapi.json
        cmspec generate content-model.yaml --title "Blog API" > openapi.json
        cat payload.json | cmspec generate - --strict-slugs
    """
    from cmspec.config import resolve_options
    from cmspec.generator import generate, serialize_document
    from cmspec.parser import load_source, parse_content_model

    try:
        options = resolve_options(
            cli_output=output,
            cli_title=title,
            cli_description=description,
            cli_version=api_version,
            cli_info=_parse_info(info_json),
            cli_strict_slugs=strict_slugs,
        )

        debug(f"Loading content model from: {model}")
        content_model = parse_content_model(load_source(model))
        info(
            f"Loaded {len(content_model.collections)} collection(s) and "
            f"{len(content_model.globals)} global(s)"
        )

        document = generate(content_model, options)
    except CmspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if options.output:
        success(
            f"Wrote {len(document['paths'])} path(s) and "
            f"{len(document['components']['schemas'])} schema(s) to {options.output}"
        )
        suggest(f"cmspec verify {options.output}")
    else:
        print_data(serialize_document(document).rstrip("\n"))
