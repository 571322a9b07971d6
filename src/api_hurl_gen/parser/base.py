"""Typed document model for OpenAPI 3.x documents.

The loader validates raw JSON/YAML mappings into these models; the
generator only ever sees this model, never raw dicts.
"""

import re
from enum import Enum
from typing import Annotated, Any, Iterator, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

STATUS_CODE_PATTERN = re.compile(r"^\d{3}$")
STATUS_RANGE_PATTERN = re.compile(r"^[1-5]XX$", re.IGNORECASE)


def _ref_or_item(value: Any) -> str:
    if isinstance(value, dict):
        return "ref" if "$ref" in value else "item"
    return "ref" if isinstance(value, Reference) else "item"


def maybe_ref(item: Any) -> Any:
    """Annotated union of an inline ``item`` or a ``$ref`` to one."""
    return Annotated[
        Union[Annotated[Reference, Tag("ref")], Annotated[item, Tag("item")]],
        Discriminator(_ref_or_item),
    ]


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Reference(_Model):
    """A ``$ref`` pointing into the document's components."""

    ref: str = Field(alias="$ref")


class SchemaKind(str, Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    ARRAY = "array"
    OBJECT = "object"
    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    NOT = "not"
    ANY = "any"


SchemaOrRef = maybe_ref("Schema")


class Schema(_Model):
    """A single schema node.

    Only the keywords that shape generated asserts and request bodies are
    modelled; everything else in the document is ignored.
    """

    type: str | list[str] | None = None
    properties: dict[str, SchemaOrRef] = {}
    required: list[str] = []
    items: SchemaOrRef | None = None
    all_of: list[SchemaOrRef] | None = Field(default=None, alias="allOf")
    one_of: list[SchemaOrRef] | None = Field(default=None, alias="oneOf")
    any_of: list[SchemaOrRef] | None = Field(default=None, alias="anyOf")
    not_: SchemaOrRef | None = Field(default=None, alias="not")
    read_only: bool = Field(default=False, alias="readOnly")
    write_only: bool = Field(default=False, alias="writeOnly")

    @property
    def kind(self) -> SchemaKind:
        """Classify the node. Composition keywords win over ``type``."""
        if self.all_of is not None:
            return SchemaKind.ALL_OF
        if self.one_of is not None:
            return SchemaKind.ONE_OF
        if self.any_of is not None:
            return SchemaKind.ANY_OF
        if self.not_ is not None:
            return SchemaKind.NOT

        type_name = self.type
        if isinstance(type_name, list):
            # OpenAPI 3.1 allows ["string", "null"]
            non_null = [t for t in type_name if t != "null"]
            type_name = non_null[0] if len(non_null) == 1 else None
        return _TYPE_KINDS.get(type_name, SchemaKind.ANY)


PRIMITIVE_KINDS = (SchemaKind.BOOLEAN, SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.INTEGER)

_TYPE_KINDS = {kind.value: kind for kind in (*PRIMITIVE_KINDS, SchemaKind.ARRAY, SchemaKind.OBJECT)}


class Parameter(_Model):
    """A single operation parameter (query, path, header, or cookie)."""

    name: str
    location: str = Field(alias="in")  # query / path / header / cookie


class MediaType(_Model):
    schema_: SchemaOrRef | None = Field(default=None, alias="schema")


class RequestBody(_Model):
    content: dict[str, MediaType] = {}


class Response(_Model):
    description: str = ""
    content: dict[str, MediaType] = {}


ParameterOrRef = maybe_ref(Parameter)
RequestBodyOrRef = maybe_ref(RequestBody)
ResponseOrRef = maybe_ref(Response)


def is_extension(key: str) -> bool:
    """True for ``x-`` specification extension keys."""
    return key.startswith("x-")


def is_status_range(status: str) -> bool:
    """True for range keys such as ``5XX``."""
    return bool(STATUS_RANGE_PATTERN.match(status))


class Operation(_Model):
    operation_id: str | None = Field(default=None, alias="operationId")
    parameters: list[ParameterOrRef] = []
    request_body: RequestBodyOrRef | None = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseOrRef] = {}

    @field_validator("responses", mode="before")
    @classmethod
    def _normalise_status_codes(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        responses = {}
        for status, response in value.items():
            # YAML loads a bare 200 as an int
            status = str(status)
            if status == "default" or is_extension(status):
                continue
            if not (STATUS_CODE_PATTERN.match(status) or is_status_range(status)):
                raise ValueError(f"invalid response status code: {status!r}")
            responses[status] = response
        return responses


class PathItem(_Model):
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None


PathItemOrRef = maybe_ref(PathItem)


class Components(_Model):
    schemas: dict[str, SchemaOrRef] = {}
    parameters: dict[str, ParameterOrRef] = {}
    request_bodies: dict[str, RequestBodyOrRef] = Field(default={}, alias="requestBodies")
    responses: dict[str, ResponseOrRef] = {}


class Document(_Model):
    """A parsed OpenAPI document. ``components`` is None when the section is absent."""

    openapi: str
    paths: dict[str, PathItemOrRef] = {}
    components: Components | None = None

    @field_validator("openapi", mode="before")
    @classmethod
    def _version_as_string(cls, value: Any) -> Any:
        return str(value) if isinstance(value, (int, float)) else value

    @field_validator("paths", mode="before")
    @classmethod
    def _drop_path_extensions(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {path: item for path, item in value.items() if not is_extension(str(path))}

    def operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield ``(path, method, operation)`` in document order.

        Referenced path items are skipped.
        """
        for path, item in self.paths.items():
            if isinstance(item, Reference):
                continue
            for method in HTTP_METHODS:
                operation = getattr(item, method)
                if operation is not None:
                    yield path, method, operation


Schema.model_rebuild()
