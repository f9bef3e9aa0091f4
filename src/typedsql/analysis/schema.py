"""Query schema derivation.

Pipeline (each stage is a pure text transformation)::

    raw SQL -> sanitize -+-> strip_subqueries -> strip_keywords -> extract_fields
                         |
                         +-> extract_parameters

The two branches meet in :func:`assemble`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from typedsql.analysis.dialects import DEFAULT_DIALECT
from typedsql.analysis.fields import extract_fields
from typedsql.analysis.parameters import extract_parameters
from typedsql.analysis.sanitizer import sanitize, strip_keywords, strip_subqueries
from typedsql.core.types import FIELD_TYPE_ANY, Dialect, QuerySchema, SchemaIssue

logger = logging.getLogger(__name__)


def prepare_for_fields(sanitized: str, dialect: Dialect) -> str:
    """Apply the field-only stages to sanitized text."""
    return strip_keywords(strip_subqueries(sanitized), dialect.select_keywords)


def assemble(
    fields: Iterable[str],
    parameters: Iterable[str],
    *,
    sql: str = "",
    dialect: str = "",
    issues: Iterable[SchemaIssue] = (),
    warnings: Iterable[str] = (),
) -> QuerySchema:
    """Combine extracted fields and parameters into a QuerySchema."""
    return QuerySchema(
        sql=sql,
        dialect=dialect,
        fields={name: FIELD_TYPE_ANY for name in fields},
        parameters=frozenset(parameters),
        issues=list(issues),
        warnings=list(warnings),
    )


def derive_schema(sql: str, dialect: Dialect | None = None) -> QuerySchema:
    """Derive the field and parameter schema of a SQL statement.

    Never raises for string input. Malformed entries (empty field or
    parameter names) are reported in ``QuerySchema.issues`` instead of being
    admitted; call :meth:`QuerySchema.raise_for_issues` to fail on them.

    Args:
        sql: Raw SQL statement
        dialect: Analyzer dialect (defaults to MySQL keyword table)

    Returns:
        QuerySchema for the statement

    Example:
        >>> schema = derive_schema("SELECT a.b AS c FROM t WHERE id = :id")
        >>> sorted(schema.fields), sorted(schema.parameters)
        (['c'], ['id'])
    """
    dialect = dialect or DEFAULT_DIALECT
    sanitized = sanitize(sql)

    field_result = extract_fields(prepare_for_fields(sanitized, dialect))
    parameter_result = extract_parameters(sanitized, dialect.parameter_chars)

    schema = assemble(
        field_result.fields,
        parameter_result.parameters,
        sql=sql,
        dialect=dialect.name,
        issues=[*field_result.issues, *parameter_result.issues],
        warnings=field_result.warnings,
    )
    logger.debug(
        f"Derived schema ({dialect.name}): fields={list(schema.fields)} "
        f"parameters={sorted(schema.parameters)} issues={len(schema.issues)}"
    )
    return schema
