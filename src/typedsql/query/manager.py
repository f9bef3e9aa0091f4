"""Schema-aware query execution.

:class:`SqlManager` derives a statement's schema once, then guards every
execution with it: the parameter map must carry exactly the derived
parameter names, and result rows expose exactly the derived field names.
Execution itself is delegated to SQLAlchemy.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Collection, Iterator, Mapping
from typing import Any

from sqlalchemy import text

from typedsql.analysis.dialects import DEFAULT_DIALECT, PARAMETER_CHARS
from typedsql.analysis.sanitizer import strip_block_comments, strip_line_comments
from typedsql.analysis.schema import derive_schema
from typedsql.core.connection import DatabaseConnection
from typedsql.core.types import Dialect, QuerySchema
from typedsql.exceptions import ParameterMismatchError, QueryError, TypedSQLError
from typedsql.query.row import ResultRow, project_row

logger = logging.getLogger(__name__)

# Bind names SQLAlchemy's text() recognizes
_DRIVER_BIND_NAME = re.compile(r"\w+", re.ASCII)

# A placeholder run ends at any of these; sanitizing puts a space there
_TOKEN_BREAKS = frozenset(" \r\n\t()")


def driver_bind_names(parameters: frozenset[str]) -> dict[str, str]:
    """Map each parameter name to a name SQLAlchemy can bind.

    Plain word names map to themselves; names with other characters (such
    as ``ids[0]``) get a unique ``p_``-prefixed replacement.
    """
    names: dict[str, str] = {}
    taken = {name for name in parameters if _DRIVER_BIND_NAME.fullmatch(name)}
    for name in sorted(parameters):
        if name in taken:
            names[name] = name
            continue
        base = "p_" + re.sub(r"\W", "_", name, flags=re.ASCII)
        candidate, counter = base, 1
        while candidate in taken:
            counter += 1
            candidate = f"{base}_{counter}"
        taken.add(candidate)
        names[name] = candidate
    return names


def iter_statement_placeholders(statement: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` spans of ``:token`` runs in comment-free SQL.

    A run ends at whitespace or a bracket, which is where the sanitized text
    seen by the analyzer puts a space, so each span covers the same token
    the analyzer reduced to a parameter name.
    """
    cursor = 0
    while True:
        mark = statement.find(":", cursor)
        if mark == -1:
            return
        end = mark + 1
        while end < len(statement) and statement[end] not in _TOKEN_BREAKS:
            end += 1
        yield mark, end
        cursor = end + 1


def build_statement(
    sql: str,
    bind_names: Mapping[str, str],
    allowed_chars: Collection[str] = PARAMETER_CHARS,
) -> str:
    """Return the executable form of ``sql``.

    Comments are removed (so placeholders inside them are not mistaken for
    binds). Each placeholder run is replaced, up to its last name character,
    by ``:`` and the driver bind name of the parameter the analyzer derived
    from it; ``:a,:b`` becomes ``:ab`` and ``:id,`` keeps its comma.
    """
    statement = strip_line_comments(strip_block_comments(sql)).rstrip("\n")
    parts: list[str] = []
    cursor = 0
    for start, end in iter_statement_placeholders(statement):
        token = statement[start + 1 : end]
        name = "".join(char for char in token if char in allowed_chars)
        if name not in bind_names:
            continue
        last = max(i for i, char in enumerate(token) if char in allowed_chars)
        parts.append(statement[cursor:start])
        parts.append(f":{bind_names[name]}")
        cursor = start + 1 + last + 1
    parts.append(statement[cursor:])
    return "".join(parts)


class SqlManager:
    """Executes one SQL statement under its derived schema.

    Example:
        >>> select = sql("SELECT p.name, p.age AS years FROM person p WHERE id = :id", conn)
        >>> row = select.find_one({"id": 1})
        >>> row.years
        42
        >>> row.age  # raises UnknownFieldError
    """

    def __init__(
        self,
        sql: str,
        connection: DatabaseConnection | None = None,
        dialect: Dialect | None = None,
        strict: bool = True,
    ) -> None:
        """Derive the schema for ``sql``.

        Args:
            sql: SQL statement with ``:name`` placeholders
            connection: Connection used by find()/find_one()
            dialect: Analyzer dialect (defaults to MySQL keyword table)
            strict: Raise on malformed statements instead of keeping issues

        Raises:
            MalformedQueryError: If strict and the statement has empty
                field or parameter names
        """
        self._sql = sql
        self._dialect = dialect or DEFAULT_DIALECT
        self._schema = derive_schema(sql, self._dialect)
        if strict:
            self._schema.raise_for_issues()
        self._connection = connection
        self._fields = tuple(self._schema.fields)
        self._bind_names = driver_bind_names(self._schema.parameters)
        self._statement = build_statement(
            sql, self._bind_names, self._dialect.parameter_chars
        )

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def schema(self) -> QuerySchema:
        return self._schema

    @property
    def fields(self) -> list[str]:
        """Field names rows expose, in SELECT list order."""
        return list(self._fields)

    @property
    def parameters(self) -> frozenset[str]:
        return self._schema.parameters

    @property
    def statement(self) -> str:
        """Statement text handed to the driver."""
        return self._statement

    @property
    def connection(self) -> DatabaseConnection | None:
        return self._connection

    def bind(self, connection: DatabaseConnection) -> SqlManager:
        """Attach a connection and return self for chaining."""
        self._connection = connection
        return self

    def bind_parameters(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Check ``params`` against the schema and translate to driver names.

        Raises:
            ParameterMismatchError: If keys are missing or unexpected
        """
        params = params or {}
        supplied = set(params)
        required = self._schema.parameters
        missing = required - supplied
        unexpected = supplied - required
        if missing or unexpected:
            raise ParameterMismatchError(required, missing=missing, unexpected=unexpected)
        return {self._bind_names[name]: value for name, value in params.items()}

    def find(self, params: Mapping[str, Any] | None = None) -> list[ResultRow]:
        """Execute the statement and return all rows.

        Args:
            params: Value for every parameter the statement requires

        Returns:
            Rows restricted to the statement's fields

        Raises:
            ParameterMismatchError: If params do not match the schema
            QueryError: If no connection is bound or execution fails
        """
        return self._execute(params, first_only=False)

    def find_one(self, params: Mapping[str, Any] | None = None) -> ResultRow | None:
        """Execute the statement and return the first row, or None."""
        rows = self._execute(params, first_only=True)
        return rows[0] if rows else None

    def _execute(self, params: Mapping[str, Any] | None, first_only: bool) -> list[ResultRow]:
        if self._connection is None:
            raise QueryError(
                "No database connection bound. Pass connection= to sql() or call bind().",
                {"sql": self._sql},
            )
        bound = self.bind_parameters(params)

        start_time = time.perf_counter()
        try:
            with self._connection.engine.connect() as conn:
                result = conn.execute(text(self._statement), bound)
                columns = list(result.keys())
                if first_only:
                    first = result.first()
                    raw_rows = [first] if first is not None else []
                else:
                    raw_rows = result.fetchall()
        except TypedSQLError:
            raise
        except Exception as e:
            raise QueryError(f"Query execution failed: {e}", {"sql": self._sql}) from e
        execution_time_ms = (time.perf_counter() - start_time) * 1000

        fields = self.fields
        rows: list[ResultRow] = []
        unmatched: list[str] = []
        for raw in raw_rows:
            row, unmatched = project_row(columns, tuple(raw), fields)
            rows.append(row)
        if unmatched:
            logger.warning(
                f"Driver returned no column for field(s) {', '.join(unmatched)}; "
                f"they read as None. Driver columns: {', '.join(columns)}"
            )

        logger.info(f"Query returned {len(rows)} rows in {execution_time_ms:.2f}ms")
        return rows


def sql(
    sql: str,
    connection: DatabaseConnection | None = None,
    dialect: Dialect | None = None,
    strict: bool = True,
) -> SqlManager:
    """Create a SqlManager for ``sql``.

    Args:
        sql: SQL statement with ``:name`` placeholders
        connection: Optional connection for execution
        dialect: Analyzer dialect
        strict: Raise MalformedQueryError for malformed statements

    Returns:
        SqlManager guarding the statement
    """
    return SqlManager(sql, connection=connection, dialect=dialect, strict=strict)
