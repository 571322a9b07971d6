"""Hurl generator: one output record per operation and concrete status code."""

from pydantic import BaseModel, ConfigDict

from api_hurl_gen.generator.asserts import dedupe_asserts, synthesize_asserts
from api_hurl_gen.generator.diagnostics import Diagnostic, DiagnosticKind, DiagnosticSink, Scope
from api_hurl_gen.generator.jsonpath import ROOT
from api_hurl_gen.generator.request_body import render_request_body, synthesize_body
from api_hurl_gen.generator.resolver import ComponentKind, resolve
from api_hurl_gen.parser.base import Document, MediaType, Operation, ResponseOrRef, is_status_range

JSON_MEDIA_TYPE = "application/json"


class OutputRecord(BaseModel):
    """Everything the template needs to render one Hurl file."""

    model_config = ConfigDict(frozen=True)

    expected_status_code: int
    name: str  # file name, e.g. getPetById_200.hurl
    method: str
    path: str  # braces doubled so they survive the Hurl template pass
    header_parameters: list[str]
    query_parameters: list[str]
    asserts: list[str]
    request_body_parameter: str


class GenerateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outputs: list[OutputRecord]
    diagnostics: list[Diagnostic]


def operation_name(path: str, method: str, operation: Operation) -> str:
    """Stable name for an operation: its operationId, else ``<method>_<path>``."""
    if operation.operation_id:
        return operation.operation_id
    return f"{method}_{path.replace('/', '_')}"


def escape_path(path: str) -> str:
    return path.replace("{", "{{").replace("}", "}}")


def _json_media_type(content: dict[str, MediaType]) -> MediaType | None:
    for media_type, value in content.items():
        if media_type.startswith(JSON_MEDIA_TYPE):
            return value
    return None


class HurlGenerator:
    """Walks every operation in a document and builds the output records."""

    def __init__(self, document: Document):
        self.document = document

    def generate(self) -> GenerateResult:
        sink = DiagnosticSink()
        outputs = []
        for path, method, operation in self.document.operations():
            outputs.extend(self._generate_for_operation(path, method, operation, sink))
        return GenerateResult(outputs=outputs, diagnostics=list(sink))

    def _generate_for_operation(
        self, path: str, method: str, operation: Operation, sink: DiagnosticSink
    ) -> list[OutputRecord]:
        name = operation_name(path, method, operation)
        scope = Scope(operation=name, path=path, sink=sink)

        header_parameters, query_parameters = self._parameters(operation, scope)
        request_body = self._request_body(operation, scope)

        outputs = []
        for status, response in operation.responses.items():
            if is_status_range(status):
                scope.report(DiagnosticKind.UNSUPPORTED_STATUS_CODE_RANGE, status_code=status)
                continue
            asserts = self._response_asserts(response, scope)
            if asserts is None:
                continue
            outputs.append(
                OutputRecord(
                    expected_status_code=int(status),
                    name=f"{name}_{status}.hurl",
                    method=method.upper(),
                    path=escape_path(path),
                    header_parameters=header_parameters,
                    query_parameters=query_parameters,
                    asserts=asserts,
                    request_body_parameter=request_body or "",
                )
            )
        return outputs

    def _parameters(self, operation: Operation, scope: Scope) -> tuple[list[str], list[str]]:
        # Unresolvable parameters are skipped, not reported
        quiet = Scope(scope.operation, scope.path, DiagnosticSink())
        headers, queries = [], []
        for parameter in operation.parameters:
            parameter = resolve(self.document, ComponentKind.PARAMETERS, parameter, quiet)
            if parameter is None:
                continue
            if parameter.location == "header":
                headers.append(parameter.name)
            elif parameter.location == "query":
                queries.append(parameter.name)
        return headers, queries

    def _request_body(self, operation: Operation, scope: Scope) -> str | None:
        if operation.request_body is None:
            return None
        request_body = resolve(self.document, ComponentKind.REQUEST_BODIES, operation.request_body, scope)
        if request_body is None:
            return None

        media_type = _json_media_type(request_body.content)
        if media_type is None:
            scope.report(DiagnosticKind.MISSING_JSON_REQUEST_BODY_MEDIA_TYPE)
            return None
        if media_type.schema_ is None:
            scope.report(DiagnosticKind.MISSING_SCHEMA_FOR_MEDIA_TYPE)
            return None
        schema = resolve(self.document, ComponentKind.SCHEMAS, media_type.schema_, scope)
        if schema is None:
            return None

        fragment = synthesize_body(self.document, schema, None, ROOT, scope)
        if fragment is None:
            return None
        return render_request_body(fragment)

    def _response_asserts(self, response: ResponseOrRef, scope: Scope) -> list[str] | None:
        """Asserts for one response, or None when its JSON body cannot be described
        and the status code gets no record.
        """
        response = resolve(self.document, ComponentKind.RESPONSES, response, scope)
        if response is None:
            return None

        media_type = _json_media_type(response.content)
        if media_type is None:
            scope.report(DiagnosticKind.MISSING_JSON_RESPONSE_BODY_MEDIA_TYPE)
            return None
        if media_type.schema_ is None:
            scope.report(DiagnosticKind.MISSING_SCHEMA_FOR_MEDIA_TYPE)
            return None
        schema = resolve(self.document, ComponentKind.SCHEMAS, media_type.schema_, scope)
        if schema is None:
            return None

        # allOf members can derive the same assert more than once
        return dedupe_asserts(synthesize_asserts(self.document, schema, ROOT, True, scope))


def generate(document: Document) -> GenerateResult:
    """Generate output records and diagnostics for every operation in ``document``."""
    return HurlGenerator(document).generate()
