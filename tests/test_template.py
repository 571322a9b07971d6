from pathlib import Path

import pytest
from jinja2 import TemplateSyntaxError

from api_hurl_gen.generator.hurl import OutputRecord
from api_hurl_gen.generator.template import (
    DEFAULT_TEMPLATE,
    filter_only_new,
    render_output,
    validate_template,
    write_outputs,
)


def _make_record(name: str = "getPetById_200.hurl", **overrides) -> OutputRecord:
    fields = dict(
        expected_status_code=200,
        name=name,
        method="GET",
        path="/pets/{{petId}}",
        header_parameters=[],
        query_parameters=[],
        asserts=[],
        request_body_parameter="",
    )
    fields.update(overrides)
    return OutputRecord(**fields)


class TestDefaultTemplate:
    def test_minimal_record(self):
        text = render_output(validate_template(DEFAULT_TEMPLATE), _make_record())
        assert text == (
            "GET {{ baseurl }}/pets/{{petId}}\n"
            "Authorization: Bearer {{ authorization }}\n"
            "Prefer: code=200\n"
            "\n"
            "HTTP 200\n"
            "\n"
        )

    def test_full_record(self):
        record = _make_record(
            expected_status_code=201,
            method="POST",
            path="/pets",
            header_parameters=["X-Request-Id"],
            query_parameters=["limit"],
            asserts=['jsonpath "$" isCollection', '#jsonpath "$.name" isString'],
            request_body_parameter='{\n  "name": ""\n}',
        )
        text = render_output(validate_template(DEFAULT_TEMPLATE), record)
        assert text == (
            "POST {{ baseurl }}/pets\n"
            "Authorization: Bearer {{ authorization }}\n"
            "Prefer: code=201\n"
            "X-Request-Id:\n"
            "\n"
            "[QueryStringParams]\n"
            "limit:\n"
            "\n"
            '{\n  "name": ""\n}\n'
            "HTTP 201\n"
            "\n"
            "[Asserts]\n"
            'jsonpath "$" isCollection\n'
            '#jsonpath "$.name" isString\n'
            "\n"
        )

    def test_body_not_html_escaped(self):
        record = _make_record(request_body_parameter='{\n  "a": "<b>"\n}')
        assert '"<b>"' in render_output(validate_template(DEFAULT_TEMPLATE), record)


class TestValidateTemplate:
    def test_malformed_template(self):
        with pytest.raises(TemplateSyntaxError):
            validate_template("{% for x in asserts %}")

    def test_custom_template(self):
        template = validate_template("{{ name }}|{{ method }}|{{ asserts | length }}")
        assert render_output(template, _make_record(asserts=["a", "b"])) == "getPetById_200.hurl|GET|2"


class TestWriteOutputs:
    def test_writes_one_file_per_record(self, tmp_path):
        records = [_make_record("a_200.hurl"), _make_record("b_404.hurl", expected_status_code=404)]
        written = write_outputs(records, "HTTP {{ expected_status_code }}\n", tmp_path)
        assert written == [tmp_path / "a_200.hurl", tmp_path / "b_404.hurl"]
        assert (tmp_path / "b_404.hurl").read_text() == "HTTP 404\n"

    def test_overwrites_existing(self, tmp_path):
        (tmp_path / "a_200.hurl").write_text("old")
        write_outputs([_make_record("a_200.hurl")], "new", tmp_path)
        assert (tmp_path / "a_200.hurl").read_text() == "new"


class TestFilterOnlyNew:
    def test_existing_files_dropped(self):
        existing = [Path("output/file1.hurl"), Path("output/file3.hurl")]
        records = [_make_record("file1.hurl"), _make_record("file2.hurl"), _make_record("file3.hurl")]
        filtered = filter_only_new(existing, records)
        assert [r.name for r in filtered] == ["file2.hurl"]

    def test_no_existing_files(self):
        records = [_make_record("file1.hurl")]
        assert filter_only_new([], records) == records
