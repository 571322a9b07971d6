"""Renders output records into Hurl files with a Jinja2 template."""

from pathlib import Path
from typing import Iterable

from jinja2 import Environment, Template

from api_hurl_gen.generator.hurl import OutputRecord

DEFAULT_TEMPLATE = """{{ method }} {{ '{{ baseurl }}' }}{{ path | safe }}
Authorization: Bearer {{ '{{ authorization }}' }}
Prefer: code={{ expected_status_code }}
{% for header in header_parameters %}{{ header }}:
{% endfor %}{% if query_parameters %}
[QueryStringParams]
{% for query in query_parameters %}{{ query }}:
{% endfor %}
{% endif %}{{ request_body_parameter }}
HTTP {{ expected_status_code }}
{% if asserts %}
[Asserts]
{% for assert in asserts %}{{ assert }}
{% endfor %}{% endif %}
"""


def _environment() -> Environment:
    return Environment(keep_trailing_newline=True, autoescape=False)


def validate_template(text: str) -> Template:
    """Compile a template, raising jinja2.TemplateSyntaxError if it is malformed."""
    return _environment().from_string(text)


def render_output(template: Template, record: OutputRecord) -> str:
    return template.render(**record.model_dump())


def write_outputs(records: Iterable[OutputRecord], template_text: str, directory: Path) -> list[Path]:
    """Render each record to ``directory/<record.name>``. Returns the written paths."""
    template = validate_template(template_text)
    written = []
    for record in records:
        file_path = directory / record.name
        file_path.write_text(render_output(template, record), encoding="utf-8")
        written.append(file_path)
    return written


def filter_only_new(existing_files: Iterable[Path], records: Iterable[OutputRecord]) -> list[OutputRecord]:
    """Drop records whose file already exists among ``existing_files``."""
    existing_names = {p.name for p in existing_files}
    return [r for r in records if r.name not in existing_names]
