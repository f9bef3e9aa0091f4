"""Input parsing utilities for CLI commands."""

import json
from pathlib import Path
from typing import Any


def parse_param_spec(spec: str) -> tuple[str, Any]:
    """Parse a parameter assignment string.

    Format: name=value

    The value is parsed as JSON when possible so numbers, booleans and null
    keep their types; anything else is passed as a string.

    Examples:
        "age=30" → ("age", 30)
        "country_name=japan" → ("country_name", "japan")
        'tags=["a", "b"]' → ("tags", ["a", "b"])

    Args:
        spec: Parameter assignment string

    Returns:
        Tuple of parameter name and parsed value

    Raises:
        ValueError: If spec format is invalid
    """
    name, sep, value = spec.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Invalid parameter: '{spec}'. Expected format: name=value")

    try:
        return name, json.loads(value)
    except json.JSONDecodeError:
        return name, value


def parse_params(specs: list[str] | None) -> dict[str, Any]:
    """Parse repeated --param options into a dict.

    Raises:
        ValueError: If a spec is invalid or a name repeats
    """
    params: dict[str, Any] = {}
    for spec in specs or []:
        name, value = parse_param_spec(spec)
        if name in params:
            raise ValueError(f"Parameter '{name}' given more than once")
        params[name] = value
    return params


def read_sql_source(sql: str | None, from_file: str | None) -> str:
    """Return SQL from an argument or a file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If neither or both sources are given
    """
    if sql and from_file:
        raise ValueError("Provide SQL as an argument or with --file, not both")
    if from_file:
        file_path = Path(from_file)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {from_file}")
        return file_path.read_text()
    if sql:
        return sql
    raise ValueError("Either provide SQL or use --file")
