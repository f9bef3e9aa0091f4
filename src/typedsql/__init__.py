"""typedsql - Static field and parameter schemas for raw SQL.

Reads a SQL statement's text and derives the fields its SELECT list produces
and the named parameters it needs, without touching a database. The schema
then guards execution: callers must pass exactly the required parameters and
can only read the selected fields.

Example:
    from typedsql import DatabaseConnection, sql

    select = sql(
        '''
        SELECT DISTINCT p.name, p.age AS nenrei
        FROM person AS p
        WHERE country_id = (SELECT id FROM country WHERE name = :country_name)
        ''',
        DatabaseConnection("sqlite:///people.db"),
    )

    select.schema.fields       # {"name": "any", "nenrei": "any"}
    select.parameters          # frozenset({"country_name"})

    rows = select.find({"country_name": "japan"})
    rows[0].nenrei
    rows[0].age                # raises UnknownFieldError
"""

from typedsql.analysis import DIALECTS, derive_schema, get_dialect
from typedsql.core.connection import DatabaseConnection
from typedsql.core.types import (
    FIELD_TYPE_ANY,
    Dialect,
    IssueKind,
    QuerySchema,
    SchemaIssue,
)
from typedsql.exceptions import (
    CodegenError,
    ConnectionError,
    MalformedQueryError,
    ParameterMismatchError,
    QueryError,
    TypedSQLError,
    UnknownDialectError,
    UnknownFieldError,
)
from typedsql.query import ResultRow, SqlManager, sql

__version__ = "0.1.0"

__all__ = [
    # Main API
    "sql",
    "SqlManager",
    "ResultRow",
    "derive_schema",
    "DatabaseConnection",
    # Types
    "QuerySchema",
    "SchemaIssue",
    "IssueKind",
    "Dialect",
    "FIELD_TYPE_ANY",
    "DIALECTS",
    "get_dialect",
    # Exceptions
    "TypedSQLError",
    "ConnectionError",
    "QueryError",
    "MalformedQueryError",
    "ParameterMismatchError",
    "UnknownFieldError",
    "UnknownDialectError",
    "CodegenError",
]
