"""Schema derivation commands."""

from typing import Annotated

import typer

from typedsql.analysis.schema import derive_schema
from typedsql.cli.context import CLIContext
from typedsql.cli.output import OutputFormatter
from typedsql.cli.parsing import read_sql_source
from typedsql.query.codegen import load_queries

app = typer.Typer(help="Derive field and parameter schemas from SQL")


@app.command("inspect")
def schema_inspect(
    ctx: typer.Context,
    sql: Annotated[
        str | None,
        typer.Argument(help="SQL statement to inspect"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Load SQL from file"),
    ] = None,
) -> None:
    """Show the fields and parameters a statement uses.

    Exits with code 1 when the statement is malformed (empty field or
    parameter names).

    Examples:

        typedsql schema inspect "SELECT p.name FROM person p WHERE id = :id"
        typedsql --json schema inspect --file queries/person.sql
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        sql_content = read_sql_source(sql, from_file)
        schema = derive_schema(sql_content, cli_ctx.dialect)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)

    formatter.print_schema(schema, title=from_file)
    if schema.issues:
        raise typer.Exit(code=1)


@app.command("check")
def schema_check(
    ctx: typer.Context,
    paths: Annotated[
        list[str],
        typer.Argument(help=".sql files or directories to check"),
    ],
) -> None:
    """Derive the schema of every .sql file and report malformed ones.

    Examples:

        typedsql schema check queries/
        typedsql --json schema check a.sql b.sql
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        queries = load_queries(paths, cli_ctx.dialect)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)

    summary = [
        {
            "query": name,
            "fields": len(schema.fields),
            "parameters": len(schema.parameters),
            "issues": len(schema.issues),
            "status": "ok" if schema.is_valid else "malformed",
        }
        for name, schema in sorted(queries.items())
    ]
    formatter.print_table(
        f"Checked {len(queries)} queries",
        summary,
        ["query", "fields", "parameters", "issues", "status"],
    )

    malformed = [name for name, schema in queries.items() if schema.issues]
    if malformed:
        if not cli_ctx.json_output:
            for name in sorted(malformed):
                formatter.print_schema(queries[name], title=name)
        raise typer.Exit(code=1)
