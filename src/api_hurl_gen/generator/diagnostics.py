"""Structured diagnostics collected during generation.

Diagnostics never stop generation. They are collected in a DiagnosticSink
and handed back to the caller, which decides whether to show them.
"""

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict


class DiagnosticKind(str, Enum):
    MALFORMED_SCHEMA_REFERENCE = "MalformedSchemaReference"
    MISSING_SCHEMA_REFERENCE = "MissingSchemaReference"
    FAILED_SCHEMA_DEREFERENCE = "FailedSchemaDereference"
    MALFORMED_PARAMETER_REFERENCE = "MalformedParameterReference"
    MISSING_PARAMETER_REFERENCE = "MissingParameterReference"
    FAILED_PARAMETER_DEREFERENCE = "FailedParameterDereference"
    MALFORMED_REQUEST_BODY_REFERENCE = "MalformedRequestBodyReference"
    MISSING_REQUEST_BODY_REFERENCE = "MissingRequestBodyReference"
    FAILED_REQUEST_BODY_DEREFERENCE = "FailedRequestBodyDereference"
    MALFORMED_RESPONSE_REFERENCE = "MalformedResponseReference"
    MISSING_RESPONSE_REFERENCE = "MissingResponseReference"
    FAILED_RESPONSE_DEREFERENCE = "FailedResponseDereference"
    MISSING_COMPONENTS = "MissingComponents"
    MISSING_JSON_REQUEST_BODY_MEDIA_TYPE = "MissingApplicationJsonRequestBodyMediaType"
    MISSING_JSON_RESPONSE_BODY_MEDIA_TYPE = "MissingApplicationJsonResponseBodyMediaType"
    MISSING_SCHEMA_FOR_MEDIA_TYPE = "MissingSchemaDefinitionForMediaType"
    UNSUPPORTED_SCHEMA_KIND = "UnsupportedSchemaKind"
    UNSUPPORTED_STATUS_CODE_RANGE = "UnsupportedStatusCodeRange"
    REQUEST_BODY_SCHEMA_CYCLE = "RequestBodySchemaCycleDetected"
    RESPONSE_BODY_SCHEMA_CYCLE = "ResponseBodySchemaCycleDetected"


_MESSAGES = {
    DiagnosticKind.MALFORMED_SCHEMA_REFERENCE: "Schema references must start with `#/components/schemas/`.",
    DiagnosticKind.MISSING_SCHEMA_REFERENCE: "Failed to find Schema reference.",
    DiagnosticKind.FAILED_SCHEMA_DEREFERENCE: "Schemas defined in `#/components/schemas/` must not contain references.",
    DiagnosticKind.MALFORMED_PARAMETER_REFERENCE: "Parameter references must start with `#/components/parameters/`.",
    DiagnosticKind.MISSING_PARAMETER_REFERENCE: "Failed to find Parameter reference.",
    DiagnosticKind.FAILED_PARAMETER_DEREFERENCE: "Parameters defined in `#/components/parameters/` must not contain references.",
    DiagnosticKind.MALFORMED_REQUEST_BODY_REFERENCE: "RequestBody references must start with `#/components/requestBodies/`.",
    DiagnosticKind.MISSING_REQUEST_BODY_REFERENCE: "Failed to find RequestBody reference.",
    DiagnosticKind.FAILED_REQUEST_BODY_DEREFERENCE: "RequestBodies defined in `#/components/requestBodies/` must not contain references.",
    DiagnosticKind.MALFORMED_RESPONSE_REFERENCE: "Response references must start with `#/components/responses/`.",
    DiagnosticKind.MISSING_RESPONSE_REFERENCE: "Failed to find Response reference.",
    DiagnosticKind.FAILED_RESPONSE_DEREFERENCE: "Responses defined in `#/components/responses/` must not contain references.",
    DiagnosticKind.MISSING_COMPONENTS: "Missing Components definition from schema. Please define a top-level `components` key in your spec.",
    DiagnosticKind.MISSING_JSON_REQUEST_BODY_MEDIA_TYPE: "Missing application/json MediaType for RequestBody.",
    DiagnosticKind.MISSING_JSON_RESPONSE_BODY_MEDIA_TYPE: "Missing application/json MediaType for ResponseBody.",
    DiagnosticKind.MISSING_SCHEMA_FOR_MEDIA_TYPE: "Missing Schema definition for MediaType.",
    DiagnosticKind.UNSUPPORTED_SCHEMA_KIND: "Generation based on schemas using AnyOf, OneOf, Not, or Any are not currently supported.",
    DiagnosticKind.UNSUPPORTED_STATUS_CODE_RANGE: "Using ranges for HTTP status codes is currently not supported.",
    DiagnosticKind.REQUEST_BODY_SCHEMA_CYCLE: "A cycle was detected in the request body schema. Generation was halted for that schema.",
    DiagnosticKind.RESPONSE_BODY_SCHEMA_CYCLE: "A cycle was detected in the response body schema. Generation was halted for that schema.",
}


class Diagnostic(BaseModel):
    """One problem found in the document, tied to the operation it came from."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    operation: str
    path: str
    reference: str | None = None
    jsonpath: str | None = None
    detail: str | None = None  # e.g. the unsupported schema kind
    status_code: str | None = None  # e.g. an unsupported range such as 5XX

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]

    def __str__(self) -> str:
        title = self.kind.value
        lines = ["", "-" * len(title), title, "", f"Message: {self.message}"]
        lines.append(f"Path: {self.path}")
        lines.append(f"Operation: {self.operation}")
        if self.reference is not None:
            lines.append(f"Reference: {self.reference}")
        if self.detail is not None:
            lines.append(f"Detected Kind: {self.detail}")
        if self.status_code is not None:
            lines.append(f"Status code: {self.status_code}")
        if self.jsonpath is not None:
            lines.append(f"JSON path: {self.jsonpath}")
        return "\n".join(lines)


class DiagnosticSink:
    """Append-only, ordered collection of diagnostics for one generation pass."""

    def __init__(self):
        self._diagnostics: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def kinds(self) -> list[DiagnosticKind]:
        return [d.kind for d in self._diagnostics]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)


class Scope:
    """The operation currently being generated; attributes diagnostics to it."""

    def __init__(self, operation: str, path: str, sink: DiagnosticSink):
        self.operation = operation
        self.path = path
        self.sink = sink

    def report(
        self,
        kind: DiagnosticKind,
        reference: str | None = None,
        jsonpath: str | None = None,
        detail: str | None = None,
        status_code: str | None = None,
    ) -> None:
        self.sink.add(
            Diagnostic(
                kind=kind,
                operation=self.operation,
                path=self.path,
                reference=reference,
                jsonpath=jsonpath,
                detail=detail,
                status_code=status_code,
            )
        )
