"""Static SQL text analysis.

Derives the output fields and named parameters of a statement from its text
alone, without a database connection.

Example:
    from typedsql.analysis import derive_schema

    schema = derive_schema("SELECT p.name, p.age AS years FROM person p WHERE id = :id")
    schema.fields      # {"name": "any", "years": "any"}
    schema.parameters  # frozenset({"id"})
"""

from typedsql.analysis.dialects import DEFAULT_DIALECT, DIALECTS, get_dialect
from typedsql.analysis.fields import extract_fields
from typedsql.analysis.parameters import extract_parameters
from typedsql.analysis.sanitizer import (
    replace_between,
    sanitize,
    strip_keywords,
    strip_subqueries,
)
from typedsql.analysis.schema import assemble, derive_schema

__all__ = [
    "DEFAULT_DIALECT",
    "DIALECTS",
    "get_dialect",
    "replace_between",
    "sanitize",
    "strip_subqueries",
    "strip_keywords",
    "extract_fields",
    "extract_parameters",
    "assemble",
    "derive_schema",
]
