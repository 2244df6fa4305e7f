"""cmspec -- Generate OpenAPI 3 documents from declarative content models.

This package turns a content-model definition (a set of *collections* and
*globals*, each built from a recursive tree of typed fields) into an OpenAPI
3.0 document: component schemas, request bodies, responses, and the CRUD
routes a headless CMS exposes for every entity.

Typical workflow::

    cmspec generate content-model.json -o openapi.json
    cmspec verify openapi.json

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for the field tree, entities, and settings.
    config: XDG-aware configuration and option resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    generator: The field-tree compiler and document assembler.
"""

__version__ = "0.3.0"
