"""typedsql CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import typedsql
from typedsql.cli.context import CLIContext, get_database_url, get_dialect_name

# Create main Typer app
app = typer.Typer(
    name="typedsql",
    help="typedsql CLI - Static field and parameter schemas for raw SQL",
    no_args_is_help=True,
)

# Store CLI context globally (will be set in callback)
state: dict[str, CLIContext] = {}


@app.callback()
def main_callback(
    ctx: typer.Context,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="TYPEDSQL_URL",
            help="Database URL used by 'query run'",
        ),
    ] = None,
    dialect: Annotated[
        str | None,
        typer.Option(
            "--dialect",
            envvar="TYPEDSQL_DIALECT",
            help="Analyzer dialect (mysql, ansi, postgresql, oracle)",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements and debug logs to stderr",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    if echo:
        # Logs go to stderr so JSON output on stdout stays parseable
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    cli_ctx = CLIContext(
        database_url=get_database_url(database),
        dialect_name=get_dialect_name(dialect),
        echo=echo,
        json_output=json_output,
    )

    # Store in Typer context for command access
    ctx.obj = cli_ctx
    state["cli_ctx"] = cli_ctx


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"typedsql v{typedsql.__version__}")


# Register command groups
from typedsql.cli.commands import codegen, query, schema

app.add_typer(schema.app, name="schema")
app.add_typer(query.app, name="query")

# Register codegen as a standalone command (not a group)
app.command(name="codegen")(codegen.codegen_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
