"""Built-in analyzer dialects.

A dialect only carries the lexical tables the analyzer needs: which noise
keywords can follow ``SELECT`` and which characters make up a named
parameter. Dialects are frozen values; pass a different one to the pipeline
instead of mutating a shared table.
"""

from __future__ import annotations

import string

from typedsql.core.types import Dialect
from typedsql.exceptions import UnknownDialectError

PARAMETER_CHARS = frozenset(string.ascii_letters + string.digits + "_[]")

MYSQL = Dialect(
    name="mysql",
    select_keywords=(
        "ALL",
        "DISTINCT",
        "DISTINCTROW",
        "HIGH_PRIORITY",
        "STRAIGHT_JOIN",
        "SQL_SMALL_RESULT",
        "SQL_BIG_RESULT",
        "SQL_BUFFER_RESULT",
        "SQL_NO_CACHE",
        "SQL_CALC_FOUND_ROWS",
    ),
    parameter_chars=PARAMETER_CHARS,
)

ANSI = Dialect(
    name="ansi",
    select_keywords=("ALL", "DISTINCT"),
    parameter_chars=PARAMETER_CHARS,
)

POSTGRESQL = Dialect(
    name="postgresql",
    select_keywords=("ALL", "DISTINCT"),
    parameter_chars=PARAMETER_CHARS,
)

ORACLE = Dialect(
    name="oracle",
    select_keywords=("ALL", "DISTINCT", "UNIQUE"),
    parameter_chars=PARAMETER_CHARS,
)

DEFAULT_DIALECT = MYSQL

DIALECTS: dict[str, Dialect] = {d.name: d for d in (MYSQL, ANSI, POSTGRESQL, ORACLE)}


def get_dialect(name: str) -> Dialect:
    """Look up a built-in dialect by name (case-insensitive).

    Raises:
        UnknownDialectError: If no dialect has that name
    """
    dialect = DIALECTS.get(name.lower())
    if dialect is None:
        raise UnknownDialectError(name, sorted(DIALECTS))
    return dialect
