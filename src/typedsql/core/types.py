"""Core types for typedsql.

All types are designed to be JSON-serializable so schemas can be printed,
diffed and consumed by other tools.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from typedsql.exceptions import MalformedQueryError

# Type label for every derived field; column types are not inferred.
FIELD_TYPE_ANY = "any"


class IssueKind(StrEnum):
    """Kinds of malformed-query conditions found during derivation."""

    EMPTY_FIELD = "empty_field"  # e.g. trailing comma in the SELECT list
    EMPTY_PARAMETER = "empty_parameter"  # e.g. ':' followed by punctuation only


class Dialect(BaseModel):
    """Immutable analyzer configuration for one SQL dialect."""

    name: str = Field(..., description="Dialect name (e.g. 'mysql')")
    select_keywords: tuple[str, ...] = Field(
        default=(),
        description="Noise keywords that may follow SELECT but are not field names",
    )
    parameter_chars: frozenset[str] = Field(
        ..., description="Characters allowed in a named parameter"
    )

    model_config = {"frozen": True}


class SchemaIssue(BaseModel):
    """A malformed-input condition attached to a field or parameter position."""

    kind: IssueKind
    position: int = Field(
        ...,
        description="Index of the SELECT list entry, or offset of ':' in the sanitized text",
    )
    raw: str = Field(default="", description="Offending text before name resolution")
    message: str

    model_config = {"use_enum_values": True}


class QuerySchema(BaseModel):
    """Fields and parameters statically derived from one SQL statement."""

    sql: str = ""
    dialect: str = ""
    fields: dict[str, str] = Field(default_factory=dict)
    """Output field name -> type label (always FIELD_TYPE_ANY)."""

    parameters: frozenset[str] = Field(default_factory=frozenset)
    """Named parameters the statement requires."""

    issues: list[SchemaIssue] = Field(default_factory=list)
    """Malformed-input conditions; names behind them are not admitted."""

    warnings: list[str] = Field(default_factory=list)
    """Non-fatal notes about the statement."""

    model_config = {"frozen": True}

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(self.fields)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def raise_for_issues(self) -> None:
        """Raise MalformedQueryError if derivation recorded any issue."""
        if self.issues:
            raise MalformedQueryError(self.sql, self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict with deterministic ordering."""
        data = self.model_dump(mode="json")
        data["parameters"] = sorted(self.parameters)
        return data
