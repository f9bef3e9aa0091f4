"""Custom exceptions for typedsql.

All exceptions follow the same conventions:
- Actionable error messages that tell what went wrong AND how to fix it
- Include context about available options when relevant
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typedsql.core.types import SchemaIssue


class TypedSQLError(Exception):
    """Base exception for all typedsql errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(TypedSQLError):
    """Failed to connect to the database."""

    pass


class QueryError(TypedSQLError):
    """Query execution failed."""

    pass


class MalformedQueryError(TypedSQLError):
    """Query text produced an empty field or parameter name."""

    def __init__(self, sql: str, issues: list[SchemaIssue]) -> None:
        details = "; ".join(issue.message for issue in issues)
        message = f"Malformed query ({len(issues)} issue(s)): {details}"
        super().__init__(
            message,
            {"sql": sql, "issues": [issue.model_dump(mode="json") for issue in issues]},
        )
        self.sql = sql
        self.issues = issues


class ParameterMismatchError(TypedSQLError):
    """Supplied parameter names differ from the names the query requires."""

    def __init__(
        self,
        required: Iterable[str],
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
    ) -> None:
        required_list = sorted(required)
        missing_list = sorted(missing)
        unexpected_list = sorted(unexpected)

        parts = []
        if missing_list:
            parts.append(f"missing: {', '.join(missing_list)}")
        if unexpected_list:
            parts.append(f"unexpected: {', '.join(unexpected_list)}")
        if required_list:
            expected = f"Required parameters: {', '.join(required_list)}"
        else:
            expected = "The query takes no parameters."
        message = f"Parameter mismatch ({'; '.join(parts)}). {expected}"

        super().__init__(
            message,
            {
                "required": required_list,
                "missing": missing_list,
                "unexpected": unexpected_list,
            },
        )
        self.required = required_list
        self.missing = missing_list
        self.unexpected = unexpected_list


class UnknownFieldError(TypedSQLError, KeyError, AttributeError):
    """Field is not part of the query's SELECT list."""

    def __init__(self, field_name: str, available_fields: Iterable[str] | None = None) -> None:
        available = sorted(available_fields or [])
        if available:
            message = (
                f"Field '{field_name}' is not selected by this query. "
                f"Available fields: {', '.join(available)}"
            )
        else:
            message = f"Field '{field_name}' is not selected by this query. No fields selected."

        super().__init__(message, {"field_name": field_name, "available_fields": available})
        self.field_name = field_name
        self.available_fields = available

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class UnknownDialectError(TypedSQLError):
    """Dialect name is not registered."""

    def __init__(self, dialect: str, available_dialects: list[str] | None = None) -> None:
        available = available_dialects or []
        message = f"Unknown dialect '{dialect}'. Available dialects: {', '.join(available)}"
        super().__init__(message, {"dialect": dialect, "available_dialects": available})
        self.dialect = dialect
        self.available_dialects = available


class CodegenError(TypedSQLError):
    """Typed accessor generation failed."""

    pass
