#!/usr/bin/env python3
"""
dbdoc CLI - export a database schema's tables and columns to a Word document.

Connection options come from arguments, DBDOC_* environment variables or a
.env file, in that order.
"""
import importlib
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from catalog import DatabaseConnector, SchemaExtractor, get_reader
from config import ENV_VARS, describe_config, load_config
from errors import ConfigError, ExportError
from exporter import export_schema
from logging_config import setup_logging

app = typer.Typer(help="dbdoc - Export database schema documentation to Word")
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger("dbdoc")

EXIT_OK = 0
EXIT_BAD_ARGS = ConfigError.exit_code
EXIT_UNEXPECTED = 5

# Newer typer releases vendor click; use whichever exception module typer raises from
click_exceptions = importlib.import_module(typer.BadParameter.__module__)


def report_error(error: ExportError, verbose: bool) -> None:
    """Print a one-line error; the traceback only in verbose mode."""
    err_console.print(f"[red]✗[/red] {escape(str(error))}", highlight=False, soft_wrap=True)
    if verbose:
        logger.exception("Export failed")


@app.command("export")
def export(
    url: Optional[str] = typer.Argument(None, help="Database URL, e.g. jdbc:mysql://host:9030/db"),
    user: Optional[str] = typer.Argument(None, help="Database user"),
    password: Optional[str] = typer.Argument(None, help="Database password"),
    schema: Optional[str] = typer.Argument(None, help="Schema to document"),
    output: Optional[Path] = typer.Argument(None, help="Output .docx path"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Catalog dialect: mysql or postgres"),
    csv_output: Optional[Path] = typer.Option(None, "--csv", help="Also write a flattened data dictionary CSV"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="Separator between display name and purpose in table comments"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", "-e", help="Read DBDOC_* options from this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and full tracebacks"),
):
    """Export the tables and columns of a schema to a Word document."""
    setup_logging(verbose)
    try:
        config = load_config(
            env_file,
            url=url,
            user=user,
            password=password,
            schema=schema,
            output=output,
            dialect=dialect,
            csv_output=csv_output,
            comment_delimiter=delimiter,
        )
        result = export_schema(config)
    except ExportError as e:
        report_error(e, verbose)
        raise typer.Exit(e.exit_code)

    console.print(
        f"[green]✓[/green] Wrote {result.table_count} tables ({result.column_count} columns) to [bold]{result.output}[/bold]",
        highlight=False,
        soft_wrap=True,
    )
    if result.csv_output:
        console.print(
            f"[green]✓[/green] Wrote data dictionary to [bold]{result.csv_output}[/bold]",
            highlight=False,
            soft_wrap=True,
        )


@app.command("tables")
def list_tables(
    url: Optional[str] = typer.Argument(None, help="Database URL"),
    user: Optional[str] = typer.Argument(None, help="Database user"),
    password: Optional[str] = typer.Argument(None, help="Database password"),
    schema: Optional[str] = typer.Argument(None, help="Schema to list"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Catalog dialect: mysql or postgres"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", "-e", help="Read DBDOC_* options from this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and full tracebacks"),
):
    """List the tables of a schema with their column counts."""
    setup_logging(verbose)
    try:
        config = load_config(env_file, url=url, user=user, password=password, schema=schema, dialect=dialect).validate()
        with DatabaseConnector.from_config(config) as connector:
            extractor = SchemaExtractor(get_reader(config.dialect, connector))
            pairs = list(extractor.iter_schema(config.schema))
    except ExportError as e:
        report_error(e, verbose)
        raise typer.Exit(e.exit_code)

    if not pairs:
        console.print(f"[yellow]No tables found in schema '{config.schema}'[/yellow]")
        return

    table = Table(title=f"Tables in {config.schema}")
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Comment", style="magenta")
    table.add_column("Columns", justify="right")
    table.add_column("Primary key", style="green")

    for meta, columns in pairs:
        primary_key = ", ".join(column.name for column in columns if column.is_primary_key)
        table.add_row(escape(meta.name), escape(meta.comment), str(len(columns)), escape(primary_key))

    console.print(table)
    console.print(f"\n[green]Total: {len(pairs)} tables[/green]")


@app.command("config")
def show_config(
    env_file: Optional[Path] = typer.Option(None, "--env-file", "-e", help="Read DBDOC_* options from this file"),
):
    """Show the effective configuration and where each value comes from."""
    try:
        resolved = describe_config(env_file)
    except ExportError as e:
        report_error(e, verbose=False)
        raise typer.Exit(e.exit_code)

    table = Table(title="dbdoc Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Source", style="green")

    for name, (value, source) in resolved.items():
        if name == "password" and value:
            value = "***"
        table.add_row(name, "" if value is None else str(value), source)

    console.print(table)

    console.print("\n[bold]Environment Variables:[/bold]")
    for name, env_name in ENV_VARS.items():
        console.print(f"• {env_name} - {name}")


def main() -> None:
    """Console entry point; maps usage errors to exit code 1 and crashes to 5."""
    try:
        code = app(standalone_mode=False)
    except click_exceptions.UsageError as e:
        e.show()
        code = EXIT_BAD_ARGS
    except typer.Abort:
        err_console.print("Aborted.")
        code = EXIT_BAD_ARGS
    except Exception as e:
        err_console.print(f"[red]✗[/red] Unexpected error: {escape(str(e) or type(e).__name__)}", highlight=False, soft_wrap=True)
        if {"-v", "--verbose"} & set(sys.argv[1:]):
            logger.exception("Unexpected error")
        code = EXIT_UNEXPECTED
    sys.exit(code or EXIT_OK)


if __name__ == "__main__":
    main()
