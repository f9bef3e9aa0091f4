"""Query execution commands."""

from typing import Annotated

import typer

from typedsql.cli.context import CLIContext
from typedsql.cli.output import OutputFormatter
from typedsql.cli.parsing import parse_params, read_sql_source
from typedsql.query.manager import sql as make_query

app = typer.Typer(help="Execute SQL under its derived schema")


@app.command("run")
def query_run(
    ctx: typer.Context,
    sql: Annotated[
        str | None,
        typer.Argument(help="SQL query to execute"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Load SQL from file"),
    ] = None,
    params: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Parameter value as name=value (repeatable)"),
    ] = None,
    first: Annotated[
        bool,
        typer.Option("--first", help="Return only the first row"),
    ] = False,
) -> None:
    """Execute a query, binding exactly the parameters it declares.

    Rows only contain the fields derived from the SELECT list.

    Examples:

        typedsql query run "SELECT name FROM person WHERE age > :age" -p age=30
        typedsql query run --file person.sql -p country_name=japan --first
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        sql_content = read_sql_source(sql, from_file)
        query = make_query(
            sql_content,
            connection=cli_ctx.get_connection(),
            dialect=cli_ctx.dialect,
        )
        bound = parse_params(params)

        if first:
            row = query.find_one(bound)
            rows = [row.to_dict()] if row is not None else []
        else:
            rows = [row.to_dict() for row in query.find(bound)]

        if cli_ctx.json_output:
            formatter.print_json(
                {
                    "fields": query.fields,
                    "rows": rows,
                    "warnings": query.schema.warnings,
                }
            )
        elif rows:
            formatter.print_table(f"{len(rows)} rows", rows, query.fields)
        else:
            typer.echo("Query executed successfully (no results)")

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
