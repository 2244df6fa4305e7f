"""Content-model input and document reference checking.

This sub-package is the I/O side of cmspec: it turns a raw content-model
definition (JSON or YAML, local file, remote URL, or stdin) into a validated
:class:`~cmspec.models.ContentModel`, and it checks that a generated
document's ``$ref`` pointers all resolve.

Typical usage::

    from cmspec.parser import load_source, parse_content_model

    raw = load_source("content-model.yaml")
    model = parse_content_model(raw)

Sub-modules:

* :mod:`~cmspec.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation for generated documents.
* :mod:`~cmspec.parser.content_model` -- Pydantic validation of the raw
  dict into the field-tree models.
* :mod:`~cmspec.parser.resolver` -- JSON Pointer resolution and the
  dangling-reference scan used by ``cmspec verify``.
"""

from cmspec.parser.content_model import parse_content_model
from cmspec.parser.loader import load_source, validate_openapi_version
from cmspec.parser.resolver import find_dangling_refs

__all__ = [
    "load_source",
    "validate_openapi_version",
    "parse_content_model",
    "find_dangling_refs",
]
