"""CLI entry point for api-hurl-gen."""

from pathlib import Path

import click
from jinja2 import TemplateError

from api_hurl_gen.generator.hurl import HurlGenerator
from api_hurl_gen.generator.template import DEFAULT_TEMPLATE, filter_only_new, validate_template, write_outputs
from api_hurl_gen.parser.openapi import DocumentLoadError, load_document


@click.group()
def main():
    """api-hurl-gen: generate Hurl files from OpenAPI documents."""
    pass


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--template", "template_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Custom Jinja2 template for the generated files.")
@click.option("--show-diagnostics", is_flag=True, help="Print diagnostics to stdout.")
@click.option("--only-new", is_flag=True, help="Only generate new files, do not overwrite existing files.")
def generate(path: Path, output: Path, template_path: Path | None, show_diagnostics: bool, only_new: bool):
    """Generate Hurl files from an OpenAPI document.

    PATH must not contain references to other files. OUTPUT is the directory
    where the generated files are written.
    """
    template_text = template_path.read_text(encoding="utf-8") if template_path else DEFAULT_TEMPLATE

    # Fail on a bad template before doing any schema work
    try:
        validate_template(template_text)
    except TemplateError as e:
        raise click.ClickException(f"Error parsing template: {e}") from e

    click.echo(f"Parsing {path}...")
    try:
        document = load_document(path)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e

    result = HurlGenerator(document).generate()
    outputs = result.outputs
    if only_new:
        existing = [p for p in output.iterdir() if p.is_file()]
        outputs = filter_only_new(existing, outputs)
        click.echo(f"Skipping {len(result.outputs) - len(outputs)} existing files.")

    for file_path in write_outputs(outputs, template_text, output):
        click.echo(f"  Created {file_path}")
    click.echo(f"Generated {len(outputs)} files in {output}")

    if show_diagnostics:
        for diagnostic in result.diagnostics:
            click.echo(str(diagnostic))
    elif result.diagnostics:
        click.echo(
            f"{len(result.diagnostics)} diagnostics are available. "
            "Re-run your previous command with `--show-diagnostics` to see them.",
            err=True,
        )


@main.command()
def template():
    """Print the default template."""
    click.echo(DEFAULT_TEMPLATE)
