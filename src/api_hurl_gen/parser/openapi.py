"""OpenAPI document loader.

Reads an OpenAPI 3.x JSON or YAML file and validates it into a Document.
References to other files are not followed.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import Document


class DocumentLoadError(Exception):
    """Raised when a document cannot be read or does not fit the model."""


def load_document(file_path: Path) -> Document:
    """Load an OpenAPI file, choosing the decoder by file extension."""
    suffix = file_path.suffix.lower()
    text = file_path.read_text(encoding="utf-8")

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentLoadError(f"{file_path}: invalid JSON: {e}") from e
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(f"{file_path}: invalid YAML: {e}") from e
    else:
        raise DocumentLoadError(f"{file_path}: input spec must be a .json or .yaml file")

    try:
        return parse_document(data)
    except DocumentLoadError as e:
        raise DocumentLoadError(f"{file_path}: {e}") from e


def parse_document(data: object) -> Document:
    """Validate an already-decoded mapping into a Document."""
    if not isinstance(data, dict):
        raise DocumentLoadError("document root must be a mapping")
    if not str(data.get("openapi", "")).startswith("3."):
        raise DocumentLoadError("only OpenAPI 3.x documents are supported")
    try:
        return Document.model_validate(data)
    except ValidationError as e:
        raise DocumentLoadError(str(e)) from e
