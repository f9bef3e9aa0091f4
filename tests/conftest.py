"""Shared test fixtures for typedsql."""

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import text

from typedsql.core.connection import DatabaseConnection

PEOPLE_SCHEMA = [
    "CREATE TABLE country (country_id INTEGER PRIMARY KEY, name TEXT)",
    "CREATE TABLE person (id INTEGER PRIMARY KEY, name TEXT, age INTEGER, country_id INTEGER)",
    # Lets the Oracle-style "FROM DUAL" subqueries run on SQLite
    "CREATE TABLE dual (dummy TEXT)",
    "INSERT INTO dual VALUES ('X')",
    "INSERT INTO country VALUES (1, 'japan'), (2, 'peru')",
    "INSERT INTO person VALUES "
    "(1, 'Aiko', 34, 1), (2, 'Kenji', 28, 1), (3, 'Rosa', 41, 2), (4, 'Yui', 52, 1)",
]

# The running example: fields {name, nenrei, count}, parameters {country_name, age}
PERSON_BY_COUNTRY_SQL = """
SELECT DISTINCT
  p.name,
  p.age AS nenrei,
  (SELECT 1 AS dummy FROM DUAL) count
FROM
  person as p
WHERE
  country_id = (SELECT country_id FROM country WHERE name = :country_name)
  AND age > :age
"""


def _load_people(connection: DatabaseConnection) -> None:
    with connection.engine.begin() as conn:
        for statement in PEOPLE_SCHEMA:
            conn.execute(text(statement))


@pytest.fixture
def person_by_country_sql() -> str:
    """The running example statement."""
    return PERSON_BY_COUNTRY_SQL


@pytest.fixture
def memory_connection() -> Generator[DatabaseConnection, None, None]:
    """Create a SQLite in-memory connection with no tables."""
    connection = DatabaseConnection("sqlite:///:memory:")
    yield connection
    connection.close()


@pytest.fixture
def people_connection() -> Generator[DatabaseConnection, None, None]:
    """Create a SQLite in-memory connection loaded with the people tables."""
    connection = DatabaseConnection("sqlite:///:memory:")
    _load_people(connection)
    yield connection
    connection.close()


@pytest.fixture
def people_db_url(tmp_path: Path) -> str:
    """Create a SQLite database file loaded with the people tables."""
    url = f"sqlite:///{tmp_path / 'people.db'}"
    connection = DatabaseConnection(url)
    _load_people(connection)
    connection.close()
    return url


@pytest.fixture
def query_dir(tmp_path: Path) -> Path:
    """Directory with two well-formed .sql files."""
    directory = tmp_path / "queries"
    directory.mkdir()
    (directory / "person_by_country.sql").write_text(PERSON_BY_COUNTRY_SQL)
    (directory / "all_countries.sql").write_text("SELECT c.country_id, c.name FROM country c")
    return directory
