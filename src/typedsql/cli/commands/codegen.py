"""Typed accessor generation command."""

from pathlib import Path
from typing import Annotated

import typer

from typedsql.cli.context import CLIContext
from typedsql.cli.output import OutputFormatter
from typedsql.query.codegen import generate


def codegen_command(
    ctx: typer.Context,
    paths: Annotated[
        list[str],
        typer.Argument(help=".sql files or directories (query name = file stem)"),
    ],
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Write the module here instead of stdout"),
    ] = None,
) -> None:
    """Generate TypedDict row and parameter types for .sql files.

    Examples:

        typedsql codegen queries/ -o app/queries_types.py
        typedsql codegen person_by_country.sql
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        source = generate(paths, cli_ctx.dialect)
        if output is not None:
            Path(output).write_text(source)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(source, nl=False)
        return

    formatter.print_success(f"Wrote typed accessors to {output}", {"path": output})
