"""Core components for typedsql."""

from typedsql.core.connection import DatabaseConnection
from typedsql.core.types import (
    FIELD_TYPE_ANY,
    Dialect,
    IssueKind,
    QuerySchema,
    SchemaIssue,
)

__all__ = [
    "DatabaseConnection",
    "FIELD_TYPE_ANY",
    "Dialect",
    "IssueKind",
    "QuerySchema",
    "SchemaIssue",
]
