"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from typedsql.core.types import QuerySchema
from typedsql.exceptions import TypedSQLError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*[str(row.get(col, "")) for col in columns])
            console.print(table)

    def print_schema(self, schema: QuerySchema, title: str | None = None) -> None:
        """Print a derived query schema.

        Args:
            schema: Schema to display
            title: Optional heading (e.g. the source file)
        """
        if self.json_mode:
            data = schema.to_dict()
            if title:
                data["source"] = title
            print(json.dumps(data, indent=2))
            return

        if title:
            console.print(f"\n[bold]{title}[/bold]")
        console.print(f"Dialect: {schema.dialect}")

        console.print(f"\n[bold]Fields ({len(schema.fields)}):[/bold]")
        if schema.fields:
            fields_table = Table(show_header=True, header_style="bold cyan")
            fields_table.add_column("Name")
            fields_table.add_column("Type")
            for name, type_label in schema.fields.items():
                fields_table.add_row(name, type_label)
            console.print(fields_table)

        console.print(f"\n[bold]Parameters ({len(schema.parameters)}):[/bold]")
        for name in sorted(schema.parameters):
            console.print(f"  :{name}")

        if schema.issues:
            console.print(f"\n[bold red]Issues ({len(schema.issues)}):[/bold red]")
            issues_table = Table(show_header=True, header_style="bold red")
            issues_table.add_column("Kind")
            issues_table.add_column("Position")
            issues_table.add_column("Text")
            issues_table.add_column("Message")
            for issue in schema.issues:
                issues_table.add_row(issue.kind, str(issue.position), issue.raw, issue.message)
            console.print(issues_table)

        for warning in schema.warnings:
            console.print(f"⚠️  {warning}", style="yellow")

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=str, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, TypedSQLError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # For TypedSQLError, include context if available
            if isinstance(error, TypedSQLError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)

    def print_json(self, data: Any) -> None:
        """Print data as indented JSON."""
        print(json.dumps(data, default=str, indent=2))
