"""Request-body synthesizer.

Builds a placeholder JSON request body from a schema. Fragments are JSON
text: a bare value, or a ``"name": value`` member when a property name is
given. Every declared property is included regardless of ``required``;
read-only properties are left out.
"""

import json

from api_hurl_gen.generator.cycle import CycleGuard
from api_hurl_gen.generator.diagnostics import DiagnosticKind, Scope
from api_hurl_gen.generator.jsonpath import any_element_path, property_path
from api_hurl_gen.generator.resolver import ComponentKind, resolve
from api_hurl_gen.parser.base import Document, Schema, SchemaKind

PLACEHOLDERS = {
    SchemaKind.BOOLEAN: "false",
    SchemaKind.STRING: '""',
    SchemaKind.NUMBER: "0",
    SchemaKind.INTEGER: "0",
}


class RequestBodySynthesisError(Exception):
    """A synthesized fragment was not valid JSON. This is a generator bug."""

    def __init__(self, fragment: str, source: json.JSONDecodeError):
        self.fragment = fragment
        super().__init__(f"synthesized request body is not valid JSON ({source.msg}):\n{fragment}")


def _named(name: str | None, value: str) -> str:
    if name is None:
        return value
    return f"{json.dumps(name, ensure_ascii=False)}: {value}"


def _parse_fragment(fragment: str) -> object:
    try:
        return json.loads(fragment)
    except json.JSONDecodeError as e:
        raise RequestBodySynthesisError(fragment, e) from e


def synthesize_body(
    document: Document,
    schema: Schema,
    name: str | None,
    jsonpath: str,
    scope: Scope,
    guard: CycleGuard | None = None,
) -> str | None:
    """Return a JSON fragment for ``schema``, or None if nothing can be built."""
    # Read-only values are never sent
    if schema.read_only:
        return None

    guard = guard or CycleGuard()
    if guard.enters_cycle(schema):
        scope.report(DiagnosticKind.REQUEST_BODY_SCHEMA_CYCLE, jsonpath=jsonpath)
        return None
    guard = guard.descend(schema)

    kind = schema.kind
    if kind in PLACEHOLDERS:
        return _named(name, PLACEHOLDERS[kind])
    if kind is SchemaKind.OBJECT:
        return _object_body(document, schema, name, jsonpath, scope, guard)
    if kind is SchemaKind.ARRAY:
        return _array_body(document, schema, name, jsonpath, scope, guard)
    if kind is SchemaKind.ALL_OF:
        return _all_of_body(document, schema, name, jsonpath, scope, guard)

    scope.report(DiagnosticKind.UNSUPPORTED_SCHEMA_KIND, jsonpath=jsonpath, detail=kind.value)
    return None


def _object_body(
    document: Document, schema: Schema, name: str | None, jsonpath: str, scope: Scope, guard: CycleGuard
) -> str:
    fields = []
    for prop_name, prop in schema.properties.items():
        prop_schema = resolve(document, ComponentKind.SCHEMAS, prop, scope)
        if prop_schema is None:
            continue
        fragment = synthesize_body(
            document, prop_schema, prop_name, property_path(jsonpath, prop_name), scope, guard
        )
        if fragment is not None:
            fields.append(fragment)

    body = ",\n".join(fields)
    if name is None:
        return f"{{\n{body}\n}}"
    return _named(name, f"{{{body}}}")


def _array_body(
    document: Document, schema: Schema, name: str | None, jsonpath: str, scope: Scope, guard: CycleGuard
) -> str | None:
    if schema.items is None:
        return None
    items = resolve(document, ComponentKind.SCHEMAS, schema.items, scope)
    if items is None:
        return None
    element = synthesize_body(document, items, None, any_element_path(jsonpath), scope, guard)
    if element is None:
        return None
    return _named(name, f"[{element}]")


def _all_of_body(
    document: Document, schema: Schema, name: str | None, jsonpath: str, scope: Scope, guard: CycleGuard
) -> str | None:
    # Object members are merged into a single object, later members
    # overwriting earlier ones; anything else is kept as a sibling fragment.
    fragments = []
    merged: dict = {}
    for member in schema.all_of:
        member_schema = resolve(document, ComponentKind.SCHEMAS, member, scope)
        if member_schema is None:
            continue
        fragment = synthesize_body(document, member_schema, None, jsonpath, scope, guard)
        if fragment is None:
            continue
        value = _parse_fragment(fragment)
        if isinstance(value, dict):
            merged.update(value)
        else:
            fragments.append(fragment)

    # Properties declared next to allOf are merged last
    if schema.properties:
        merged.update(_parse_fragment(_object_body(document, schema, None, jsonpath, scope, guard)))

    if merged:
        fragments.append(json.dumps(merged, ensure_ascii=False))
    if not fragments:
        return None
    return _named(name, ",\n".join(fragments))


def render_request_body(fragment: str) -> str:
    """Pretty-print a complete top-level fragment.

    Raises RequestBodySynthesisError if the fragment is not valid JSON.
    """
    return json.dumps(_parse_fragment(fragment), indent=2, ensure_ascii=False)
