"""CLI context management for database connections and shared state."""

import os
from dataclasses import dataclass, field

from typedsql.analysis.dialects import DEFAULT_DIALECT, get_dialect
from typedsql.core.connection import DatabaseConnection
from typedsql.core.types import Dialect


def get_database_url(url: str | None) -> str:
    """Resolve database URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. TYPEDSQL_URL environment variable
    3. Default: sqlite:///./typedsql.db
    """
    if url:
        return url
    if env_url := os.getenv("TYPEDSQL_URL"):
        return env_url
    return "sqlite:///./typedsql.db"


def get_dialect_name(name: str | None) -> str:
    """Resolve analyzer dialect from CLI arg, environment variable, or default.

    Priority:
    1. Explicit dialect argument
    2. TYPEDSQL_DIALECT environment variable
    3. Default: mysql
    """
    if name:
        return name
    if env_name := os.getenv("TYPEDSQL_DIALECT"):
        return env_name
    return DEFAULT_DIALECT.name


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages connection lifecycle, analyzer dialect and output preferences.
    """

    database_url: str
    dialect_name: str
    echo: bool
    json_output: bool
    _connection: DatabaseConnection | None = field(default=None, init=False, repr=False)

    @property
    def dialect(self) -> Dialect:
        """Resolve the configured dialect.

        Raises:
            UnknownDialectError: If the name is not a built-in dialect
        """
        return get_dialect(self.dialect_name)

    def get_connection(self) -> DatabaseConnection:
        """Get or create database connection (lazy initialization)."""
        if self._connection is None:
            self._connection = DatabaseConnection(self.database_url, echo=self.echo)
        return self._connection

    def close(self) -> None:
        """Close database connection if open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
