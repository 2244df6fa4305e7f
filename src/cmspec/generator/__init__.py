"""Document generator -- compile a content model into an OpenAPI document.

This sub-package is the second half of the cmspec pipeline: it takes a
:class:`~cmspec.models.ContentModel` (produced by the parser) and assembles a
complete OpenAPI 3.0.1 document with component schemas, request bodies,
responses and CRUD paths.

Typical usage::

    from cmspec.generator import build_document
    from cmspec.models import GeneratorOptions

    document = build_document(model, GeneratorOptions(title="Blog API"))

Sub-modules:

* :mod:`~cmspec.generator.naming` -- Component names and ``$ref`` pointers.
* :mod:`~cmspec.generator.field_mapper` -- Leaf field kinds to schema
  fragments, including lenient option normalization.
* :mod:`~cmspec.generator.schema_compiler` -- Recursive reduction of a field
  list into one object schema, per mode.
* :mod:`~cmspec.generator.relations` -- Relationship and join projection,
  including the pagination envelope.
* :mod:`~cmspec.generator.entities` -- Components per collection, upload
  collection and global.
* :mod:`~cmspec.generator.routes` -- CRUD path items and custom endpoints.
* :mod:`~cmspec.generator.document` -- The :class:`DocumentBuilder`,
  document assembly and the output writer.
"""

from cmspec.generator.document import (
    DocumentBuilder,
    build_document,
    generate,
    serialize_document,
    write_document,
)
from cmspec.generator.schema_compiler import compile_fields

__all__ = [
    "DocumentBuilder",
    "build_document",
    "compile_fields",
    "generate",
    "serialize_document",
    "write_document",
]
