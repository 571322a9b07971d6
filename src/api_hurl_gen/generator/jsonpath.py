"""Helpers for building JSONPath expressions during schema descent."""

import re

ROOT = "$"

_DOT_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def property_path(jsonpath: str, name: str) -> str:
    """Path to a property, falling back to bracket notation for unusual names."""
    if _DOT_NAME.match(name):
        return f"{jsonpath}.{name}"
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"{jsonpath}['{escaped}']"


def first_element_path(jsonpath: str) -> str:
    return f"{jsonpath}[0]"


def any_element_path(jsonpath: str) -> str:
    return f"{jsonpath}[]"
