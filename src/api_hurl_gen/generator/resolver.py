"""Resolves inline-or-``$ref`` values against the document's components."""

from enum import Enum
from typing import TypeVar

from api_hurl_gen.generator.diagnostics import DiagnosticKind, Scope
from api_hurl_gen.parser.base import Document, Reference

T = TypeVar("T")


class ComponentKind(str, Enum):
    SCHEMAS = "schemas"
    PARAMETERS = "parameters"
    REQUEST_BODIES = "requestBodies"
    RESPONSES = "responses"

    @property
    def prefix(self) -> str:
        return f"#/components/{self.value}/"


# (components attribute, malformed, missing, failed dereference)
_LOOKUP = {
    ComponentKind.SCHEMAS: (
        "schemas",
        DiagnosticKind.MALFORMED_SCHEMA_REFERENCE,
        DiagnosticKind.MISSING_SCHEMA_REFERENCE,
        DiagnosticKind.FAILED_SCHEMA_DEREFERENCE,
    ),
    ComponentKind.PARAMETERS: (
        "parameters",
        DiagnosticKind.MALFORMED_PARAMETER_REFERENCE,
        DiagnosticKind.MISSING_PARAMETER_REFERENCE,
        DiagnosticKind.FAILED_PARAMETER_DEREFERENCE,
    ),
    ComponentKind.REQUEST_BODIES: (
        "request_bodies",
        DiagnosticKind.MALFORMED_REQUEST_BODY_REFERENCE,
        DiagnosticKind.MISSING_REQUEST_BODY_REFERENCE,
        DiagnosticKind.FAILED_REQUEST_BODY_DEREFERENCE,
    ),
    ComponentKind.RESPONSES: (
        "responses",
        DiagnosticKind.MALFORMED_RESPONSE_REFERENCE,
        DiagnosticKind.MISSING_RESPONSE_REFERENCE,
        DiagnosticKind.FAILED_RESPONSE_DEREFERENCE,
    ),
}


def component_name(kind: ComponentKind, reference: str) -> str | None:
    """Return the component name a reference points at, or None if malformed.

    Only ``#/components/<kind>/<name>`` is accepted; JSON pointer escapes in
    the name are decoded.
    """
    if not reference.startswith(kind.prefix):
        return None
    name = reference[len(kind.prefix):]
    if not name or "/" in name:
        return None
    return name.replace("~1", "/").replace("~0", "~")


def resolve(document: Document, kind: ComponentKind, value: T | Reference, scope: Scope) -> T | None:
    """Return the inline value behind ``value``.

    Inline values are returned unchanged. References are followed exactly one
    level; any failure is reported to ``scope`` and None is returned.
    """
    if not isinstance(value, Reference):
        return value

    attribute, malformed, missing, failed = _LOOKUP[kind]
    reference = value.ref

    name = component_name(kind, reference)
    if name is None:
        scope.report(malformed, reference=reference)
        return None

    if document.components is None:
        scope.report(DiagnosticKind.MISSING_COMPONENTS)
        return None

    found = getattr(document.components, attribute).get(name)
    if found is None:
        scope.report(missing, reference=reference)
        return None
    if isinstance(found, Reference):
        scope.report(failed, reference=reference)
        return None
    return found
