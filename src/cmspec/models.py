"""Canonical Pydantic models shared across all cmspec modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Content-model input** -- the declarative field tree read from a host
configuration:
    :class:`LeafField`, :class:`OptionsField`, :class:`RelationshipField`,
    :class:`JoinField`, :class:`ArrayField`, :class:`BlocksField`,
    :class:`GroupField`, :class:`RowField`, :class:`TabsField`,
    :class:`UIField` (together the :data:`FieldNode` union),
    :class:`Endpoint`, :class:`CollectionConfig`, :class:`GlobalConfig`, and
    :class:`ContentModel`.

**Generator vocabulary** -- enums threaded through the compiler:
    :class:`Mode`, :class:`ComponentType`, and :class:`HTTPMethod`.

**Settings** -- serialised as JSON in the user's config directory or
resolved per invocation:
    :class:`DocumentDefaults`, :class:`OutputConfig`, :class:`UserConfig`,
    and :class:`GeneratorOptions`.

Field nodes use a discriminated union on ``type`` so that an unknown kind is a
validation error at load time rather than a surprise during compilation. Host
configurations carry many keys that do not affect the document (labels, admin
options, hooks); those are preserved in ``model_extra`` via ``extra="allow"``.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "PayloadCMS"
DEFAULT_DESCRIPTION = "The backend to build the modern web."
DEFAULT_VERSION = "1.0.0"


# --- Generator vocabulary ---


class Mode(str, enum.Enum):
    """Projection mode for a field tree.

    ``NEW`` is the write-time shape accepted when a document is created;
    ``GET`` is the read-time shape returned by the API.
    """

    NEW = "new"
    GET = "get"


class ComponentType(str, enum.Enum):
    """The ``components`` sections a reference pointer can target."""

    SCHEMAS = "schemas"
    REQUEST_BODIES = "requestBodies"
    RESPONSES = "responses"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


# --- Field tree ---


class FieldBase(BaseModel):
    """Attributes shared by every field kind."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    required: bool = False
    hidden: bool = False
    # Hosts allow either a flag or a dotted source path here.
    virtual: Union[bool, str] = False


class NamedField(FieldBase):
    """A field that contributes a keyed property to its parent object."""

    name: str


class LeafField(NamedField):
    """A scalar or semantic field mapped one-to-one onto a schema fragment."""

    type: Literal[
        "text",
        "textarea",
        "richText",
        "number",
        "checkbox",
        "code",
        "date",
        "collapsible",
        "email",
        "json",
        "point",
        "upload",
    ]


class SelectOption(BaseModel):
    """A ``{value, label}`` option entry for select and radio fields."""

    model_config = ConfigDict(extra="allow")

    value: Any
    label: Any = None


class OptionsField(NamedField):
    """A select or radio field whose value is one of a fixed set of options.

    Options are accepted leniently: bare strings, ``{value, label}``
    mappings, or anything else. See
    :func:`~cmspec.generator.field_mapper.normalize_options`.
    """

    type: Literal["select", "radio"]
    options: list[Union[str, SelectOption, Any]] = Field(default_factory=list)


class RelationshipField(NamedField):
    """A reference from one document to documents in other collections."""

    type: Literal["relationship"]
    relation_to: Union[str, list[str]] = Field(alias="relationTo")
    has_many: bool = Field(default=False, alias="hasMany")

    @property
    def target(self) -> Union[str, list[str]]:
        """The target slug, or the ordered slugs of a polymorphic relation."""
        return self.relation_to


class JoinField(NamedField):
    """A read-only reverse relationship derived from another collection."""

    type: Literal["join"]
    collection: Union[str, list[str]]
    has_many: bool = Field(default=False, alias="hasMany")

    @property
    def target(self) -> Union[str, list[str]]:
        """The target slug, or the ordered slugs of a polymorphic join."""
        return self.collection


class ArrayField(NamedField):
    """A repeated sub-object."""

    type: Literal["array"]
    fields: list[FieldNode] = Field(default_factory=list)


class Block(BaseModel):
    """One variant of a blocks field."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: Optional[str] = None
    interface_name: Optional[str] = Field(default=None, alias="interfaceName")
    fields: list[FieldNode] = Field(default_factory=list)


class BlocksField(NamedField):
    """A list whose items are any of several block layouts."""

    type: Literal["blocks"]
    blocks: list[Block] = Field(default_factory=list)


class GroupField(NamedField):
    """A named grouping of fields, spliced into its parent object."""

    type: Literal["group"]
    fields: list[FieldNode] = Field(default_factory=list)


class RowField(FieldBase):
    """A presentational row of fields, spliced into its parent object."""

    type: Literal["row"]
    name: Optional[str] = None
    fields: list[FieldNode] = Field(default_factory=list)


class Tab(BaseModel):
    """One tab of a tabs field.

    A tab with an ``interfaceName`` compiles to its own nested property;
    without one, its fields are merged into the surrounding object.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    interface_name: Optional[str] = Field(default=None, alias="interfaceName")
    label: Any = None
    fields: list[FieldNode] = Field(default_factory=list)


class TabsField(FieldBase):
    """A structural container of tabs. Never reaches the leaf mapper."""

    type: Literal["tabs"]
    name: Optional[str] = None
    tabs: list[Tab] = Field(default_factory=list)


class UIField(FieldBase):
    """An admin-only annotation field. Never contributes to a schema."""

    type: Literal["ui"]
    name: Optional[str] = None


FieldNode = Annotated[
    Union[
        LeafField,
        OptionsField,
        RelationshipField,
        JoinField,
        ArrayField,
        BlocksField,
        GroupField,
        RowField,
        TabsField,
        UIField,
    ],
    Field(discriminator="type"),
]
"""Any node of the content-model field tree, discriminated on ``type``."""


# --- Entities ---


class Endpoint(BaseModel):
    """A custom endpoint declared on a collection or global.

    ``path`` is appended to the entity's base path; ``custom`` is an OpenAPI
    operation fragment whose keys override the generated defaults. Hosts
    accept methods OpenAPI has no operation for (``connect``), so ``method``
    is any string; see :attr:`http_method`.
    """

    model_config = ConfigDict(extra="allow")

    path: str
    method: str
    custom: dict[str, Any] = Field(default_factory=dict)

    @field_validator("method", mode="before")
    @classmethod
    def _lowercase_method(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def http_method(self) -> Optional[HTTPMethod]:
        """The method as a path-item operation key, or ``None`` if it has none."""
        try:
            return HTTPMethod(self.method)
        except ValueError:
            return None


def _endpoints_or_empty(value: Any) -> Any:
    # Hosts disable endpoints with ``false``.
    if value is None or value is False:
        return []
    return value


class CollectionConfig(BaseModel):
    """A multi-document resource with CRUD, list and count routes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: str
    fields: list[FieldNode] = Field(default_factory=list)
    endpoints: list[Endpoint] = Field(default_factory=list)
    upload: Union[bool, dict[str, Any]] = False

    @field_validator("endpoints", mode="before")
    @classmethod
    def _normalize_endpoints(cls, value: Any) -> Any:
        return _endpoints_or_empty(value)

    @property
    def is_upload(self) -> bool:
        """``True`` for upload collections (flag or options mapping)."""
        return bool(self.upload)


class GlobalConfig(BaseModel):
    """A singleton resource with get and update routes only."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: str
    fields: list[FieldNode] = Field(default_factory=list)
    endpoints: list[Endpoint] = Field(default_factory=list)

    @field_validator("endpoints", mode="before")
    @classmethod
    def _normalize_endpoints(cls, value: Any) -> Any:
        return _endpoints_or_empty(value)


class ContentModel(BaseModel):
    """The complete content model: every collection and global, in order."""

    model_config = ConfigDict(extra="allow")

    collections: list[CollectionConfig] = Field(default_factory=list)
    globals: list[GlobalConfig] = Field(default_factory=list)


for _model in (ArrayField, Block, GroupField, RowField, Tab, TabsField, BlocksField,
               CollectionConfig, GlobalConfig, ContentModel):
    _model.model_rebuild()


# --- Settings ---


class DocumentDefaults(BaseModel):
    """Default document metadata stored in :class:`UserConfig`."""

    title: str = Field(default=DEFAULT_TITLE, description="info.title")
    description: str = Field(default=DEFAULT_DESCRIPTION, description="info.description")
    version: str = Field(default=DEFAULT_VERSION, description="info.version")
    strict_slugs: bool = Field(
        default=False, description="Fail when two entities share a component name"
    )
    info: dict[str, Any] = Field(
        default_factory=dict, description="Extra keys merged under info"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`UserConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class UserConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cmspec/config.json``.

    Loaded and saved by :func:`~cmspec.config.load_user_config` and
    :func:`~cmspec.config.save_user_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~cmspec.config.resolve_options`
    for the full precedence chain.
    """

    defaults: DocumentDefaults = Field(default_factory=DocumentDefaults)
    output: OutputConfig = Field(default_factory=OutputConfig)


class GeneratorOptions(BaseModel):
    """Effective options for one generation run.

    ``info`` is merged *under* the fixed ``title``, ``description`` and
    ``version`` keys of the document's info object. When ``output`` is set
    the finished document is written there.
    """

    info: dict[str, Any] = Field(default_factory=dict)
    output: Optional[str] = None
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    version: str = DEFAULT_VERSION
    strict_slugs: bool = False
