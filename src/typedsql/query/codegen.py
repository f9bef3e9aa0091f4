"""Typed accessor generation.

Renders a Python module that gives each query a ``<Name>Row`` and a
``<Name>Params`` TypedDict, so a type checker rejects reads of fields the
query does not select and parameter maps with the wrong keys::

    # person_by_country.sql -> PersonByCountryRow, PersonByCountryParams,
    #                          PERSON_BY_COUNTRY_SQL
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from typedsql.analysis.schema import derive_schema
from typedsql.core.types import Dialect, QuerySchema
from typedsql.exceptions import CodegenError

logger = logging.getLogger(__name__)

SQL_SUFFIX = ".sql"

_WORD = re.compile(r"[A-Za-z0-9]+")

_HEADER = '''"""Typed accessors generated by typedsql. Do not edit."""

from __future__ import annotations

from typing import Any, TypedDict
'''


def query_identifiers(name: str) -> tuple[str, str]:
    """Return ``(PascalCase, UPPER_SNAKE)`` identifiers for a query name.

    Raises:
        CodegenError: If the name has no letters or digits
    """
    words = _WORD.findall(name)
    if not words:
        raise CodegenError(
            f"Query name '{name}' has no letters or digits. Rename the query file.",
            {"query": name},
        )
    pascal = "".join(word[:1].upper() + word[1:] for word in words)
    snake = "_".join(word.upper() for word in words)
    if pascal[0].isdigit():
        pascal = f"Q{pascal}"
        snake = f"Q_{snake}"
    return pascal, snake


def _typed_dict(class_name: str, keys: Iterable[str]) -> str:
    # Functional syntax accepts keys that are not identifiers (e.g. "*", "ids[0]")
    entries = "".join(f"        {key!r}: Any,\n" for key in keys)
    if not entries:
        return f'{class_name} = TypedDict("{class_name}", {{}})\n'
    return f'{class_name} = TypedDict(\n    "{class_name}",\n    {{\n{entries}    }},\n)\n'


def render_query(name: str, schema: QuerySchema) -> str:
    """Render the constant and TypedDicts for one query.

    Raises:
        CodegenError: If the query name is unusable
        MalformedQueryError: If the schema recorded issues
    """
    schema.raise_for_issues()
    pascal, snake = query_identifiers(name)
    return "\n".join(
        [
            f"{snake}_SQL = {schema.sql!r}\n",
            _typed_dict(f"{pascal}Row", schema.fields),
            _typed_dict(f"{pascal}Params", sorted(schema.parameters)),
        ]
    )


def render_module(queries: Mapping[str, QuerySchema]) -> str:
    """Render a module with typed accessors for every query.

    Args:
        queries: Query name -> derived schema

    Returns:
        Python source text

    Raises:
        CodegenError: If two query names map to the same identifiers
        MalformedQueryError: If any schema recorded issues
    """
    owners: dict[str, str] = {}
    blocks = [_HEADER]
    for name in sorted(queries):
        pascal, _ = query_identifiers(name)
        if pascal in owners:
            raise CodegenError(
                f"Queries '{owners[pascal]}' and '{name}' both generate '{pascal}'. "
                "Rename one of them.",
                {"queries": [owners[pascal], name], "identifier": pascal},
            )
        owners[pascal] = name
        blocks.append(render_query(name, queries[name]))
    logger.debug(f"Rendered typed accessors for {len(queries)} queries")
    return "\n\n".join(blocks)


def iter_sql_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories into a sorted list of ``.sql`` files.

    Raises:
        FileNotFoundError: If a path does not exist
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {raw}")
        if path.is_dir():
            files.extend(sorted(path.rglob(f"*{SQL_SUFFIX}")))
        else:
            files.append(path)
    return files


def load_queries(
    paths: Iterable[str | Path], dialect: Dialect | None = None
) -> dict[str, QuerySchema]:
    """Derive schemas for every ``.sql`` file under ``paths``.

    The query name is the file stem.

    Raises:
        CodegenError: If two files share a stem
    """
    queries: dict[str, QuerySchema] = {}
    sources: dict[str, Path] = {}
    for path in iter_sql_files(paths):
        name = path.stem
        if name in queries:
            raise CodegenError(
                f"Query name '{name}' is used by both {sources[name]} and {path}.",
                {"query": name, "files": [str(sources[name]), str(path)]},
            )
        queries[name] = derive_schema(path.read_text(), dialect)
        sources[name] = path
    return queries


def generate(paths: Iterable[str | Path], dialect: Dialect | None = None) -> str:
    """Load ``.sql`` files and render their typed accessor module.

    Raises:
        MalformedQueryError: If any query is malformed
    """
    queries = load_queries(paths, dialect)
    logger.debug(f"Loaded {len(queries)} queries for code generation")
    return render_module(queries)
