"""Schema-aware query execution for typedsql.

Architecture:
    1. SqlManager - Derives a statement's schema and guards execution with it
    2. ResultRow - Read-only row limited to the derived fields
    3. Codegen - Emits TypedDict accessors so type checkers enforce the schema

Example:
    select = sql("SELECT p.name FROM person p WHERE p.id = :id", connection)
    row = select.find_one({"id": 1})
    row.name
"""

from typedsql.query.codegen import generate, load_queries, render_module
from typedsql.query.manager import SqlManager, sql
from typedsql.query.row import ResultRow

__all__ = [
    "SqlManager",
    "sql",
    "ResultRow",
    "generate",
    "load_queries",
    "render_module",
]
