"""Response assertion synthesizer.

Turns a response schema into Hurl ``jsonpath`` asserts describing the shape
of the response body. Asserts for optional values are emitted commented out.
"""

from api_hurl_gen.generator.cycle import CycleGuard
from api_hurl_gen.generator.diagnostics import DiagnosticKind, Scope
from api_hurl_gen.generator.jsonpath import first_element_path, property_path
from api_hurl_gen.generator.resolver import ComponentKind, resolve
from api_hurl_gen.parser.base import Document, Schema, SchemaKind

_PREDICATES = {
    SchemaKind.BOOLEAN: "isBoolean",
    SchemaKind.STRING: "isString",
    SchemaKind.NUMBER: "isNumber",
    SchemaKind.INTEGER: "isInteger",
    SchemaKind.ARRAY: "isCollection",
    SchemaKind.OBJECT: "isCollection",
}


def format_assert(jsonpath: str, predicate: str, is_required: bool) -> str:
    # The path sits inside a Hurl quoted string
    quoted = jsonpath.replace("\\", "\\\\").replace('"', '\\"')
    return f'{"" if is_required else "#"}jsonpath "{quoted}" {predicate}'


def synthesize_asserts(
    document: Document,
    schema: Schema,
    jsonpath: str,
    is_required: bool,
    scope: Scope,
    guard: CycleGuard | None = None,
) -> list[str]:
    """Build the asserts for ``schema`` rooted at ``jsonpath``.

    The result may contain duplicates when ``allOf`` members overlap; see
    ``dedupe_asserts``.
    """
    # Write-only values never appear in a response
    if schema.write_only:
        return []

    guard = guard or CycleGuard()
    if guard.enters_cycle(schema):
        scope.report(DiagnosticKind.RESPONSE_BODY_SCHEMA_CYCLE, jsonpath=jsonpath)
        return []
    guard = guard.descend(schema)

    kind = schema.kind
    if kind is SchemaKind.ALL_OF:
        asserts = []
        for member in schema.all_of:
            member_schema = resolve(document, ComponentKind.SCHEMAS, member, scope)
            if member_schema is not None:
                asserts.extend(synthesize_asserts(document, member_schema, jsonpath, is_required, scope, guard))
        # Properties declared next to allOf act as one more member
        if schema.properties:
            asserts.append(format_assert(jsonpath, _PREDICATES[SchemaKind.OBJECT], is_required))
            asserts.extend(_object_asserts(document, schema, jsonpath, is_required, scope, guard))
        return asserts

    if kind not in _PREDICATES:
        scope.report(DiagnosticKind.UNSUPPORTED_SCHEMA_KIND, jsonpath=jsonpath, detail=kind.value)
        return []

    asserts = [format_assert(jsonpath, _PREDICATES[kind], is_required)]

    if kind is SchemaKind.ARRAY:
        asserts.extend(_array_asserts(document, schema, jsonpath, scope, guard))
    elif kind is SchemaKind.OBJECT:
        asserts.extend(_object_asserts(document, schema, jsonpath, is_required, scope, guard))
    return asserts


def _array_asserts(document: Document, schema: Schema, jsonpath: str, scope: Scope, guard: CycleGuard) -> list[str]:
    if schema.items is None:
        return []
    items = resolve(document, ComponentKind.SCHEMAS, schema.items, scope)
    if items is None:
        return []
    # A collection may always be empty, so element asserts are never required
    return synthesize_asserts(document, items, first_element_path(jsonpath), False, scope, guard)


def _object_asserts(
    document: Document, schema: Schema, jsonpath: str, is_required: bool, scope: Scope, guard: CycleGuard
) -> list[str]:
    asserts = []
    for name, prop in schema.properties.items():
        prop_schema = resolve(document, ComponentKind.SCHEMAS, prop, scope)
        if prop_schema is None:
            continue
        child_required = is_required and name in schema.required
        asserts.extend(
            synthesize_asserts(document, prop_schema, property_path(jsonpath, name), child_required, scope, guard)
        )
    return asserts


def dedupe_asserts(asserts: list[str]) -> list[str]:
    """Drop repeated asserts, keeping the first occurrence of each."""
    return list(dict.fromkeys(asserts))
