"""gormgen CLI - main entry point."""

import logging
from contextlib import contextmanager
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from .config import ConnectionParams, settings
from .database.type_mappers import GoTypeMapper
from .errors import BatchGenerationError, GormGenError
from .session import Session

app = typer.Typer(
    name="gormgen",
    help="Generate GORM model structs from MySQL and PostgreSQL schemas",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    driver: Optional[str] = typer.Option(None, "--driver", help="Database driver: mysql or postgres (or GORMGEN_DB_DRIVER)"),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Database host (or GORMGEN_DB_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-P", help="Database port (default: engine default)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user (or GORMGEN_DB_USER)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Database password (or GORMGEN_DB_PASSWORD)"),
    database: Optional[str] = typer.Option(None, "--db", "-d", help="Database name (or GORMGEN_DB_NAME)"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="PostgreSQL schema (default: public)"),
    package: Optional[str] = typer.Option(None, "--package", help="Go package name for generated files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    gormgen - generate Go structs with GORM tags from a live database.

    Examples:

        gormgen --driver mysql --db shop tables

        gormgen --driver postgres --db shop --schema sales preview orders

        gormgen --db shop generate --output ./models
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )

    ctx.obj = {
        "params": ConnectionParams.from_settings(
            settings,
            driver=driver,
            host=host,
            port=port,
            user=user,
            password=password,
            database=database,
            schema_name=schema,
        ),
        "package": package or settings.package_name,
    }


@contextmanager
def _session(ctx: typer.Context):
    """Open a connected Session for one command, reporting failures."""
    params: ConnectionParams = ctx.obj["params"]
    if not params.database:
        err_console.print("[red]Database name is required (--db or GORMGEN_DB_NAME)[/red]")
        raise typer.Exit(1)

    session = Session(package_name=ctx.obj["package"])
    try:
        session.connect(params)
        with session:
            yield session
    except BatchGenerationError:
        raise
    except GormGenError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Driver: {settings.db_driver}")
    console.print(f"  Host: {settings.db_host}")
    console.print(f"  Port: {settings.db_port or 'engine default'}")
    console.print(f"  User: {settings.db_user}")
    console.print(f"  Password: {'Configured' if settings.db_password else 'Not set'}")
    console.print(f"  Database: {settings.db_name or 'Not set'}")
    console.print(f"  Schema: {settings.db_schema}")
    console.print(f"  Package: {settings.package_name}")
    console.print(f"  Output: {settings.output_dir}")
    console.print(f"  Timeouts: connect {settings.connect_timeout}s, query {settings.query_timeout}s")


@app.command()
def schemas(ctx: typer.Context):
    """List schemas (PostgreSQL only)."""
    with _session(ctx) as session:
        names = session.list_schemas()
        if not names:
            console.print("[yellow]No schemas (engine has no schema concept or none visible)[/yellow]")
            return
        for name in names:
            console.print(name)


@app.command()
def tables(ctx: typer.Context):
    """List base tables."""
    with _session(ctx) as session:
        names = session.list_tables()
        console.print(f"[bold]Found {len(names)} tables in {session.current_schema()}[/bold]")
        for name in names:
            console.print(f"  {name}")


@app.command()
def describe(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table to describe"),
):
    """Show columns of a table with their mapped Go types."""
    mapper = GoTypeMapper()
    with _session(ctx) as session:
        columns = session.describe_table(table)

    grid = Table(title=table)
    grid.add_column("Column")
    grid.add_column("Raw Type")
    grid.add_column("Go Type")
    grid.add_column("Null")
    grid.add_column("Key")
    grid.add_column("Default")
    grid.add_column("Comment")
    for col in columns:
        key = "PK" if col.is_primary_key else ""
        if col.is_auto_increment:
            key = f"{key} AI".strip()
        comment = col.comment
        if col.enum_values:
            comment = ", ".join(col.enum_values)
        grid.add_row(
            col.name,
            col.raw_type,
            mapper.go_type(col.raw_type, col.is_nullable),
            "YES" if col.is_nullable else "NO",
            key,
            col.default_value if col.default_value is not None else "",
            comment,
        )
    console.print(grid)


@app.command()
def preview(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table to generate"),
):
    """Print the generated model for a table."""
    with _session(ctx) as session:
        generated = session.generate(table)

    if generated.format_error:
        err_console.print(
            f"[yellow]Warning: output is unformatted: "
            f"{generated.format_error.get_user_friendly_message()}[/yellow]"
        )
    console.print(Syntax(generated.content, "go", theme="monokai", line_numbers=False))


@app.command()
def generate(
    ctx: typer.Context,
    table_names: Optional[List[str]] = typer.Argument(None, help="Tables to generate (default: all)"),
    output_dir: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory"),
):
    """Write model files for the given tables, or all tables."""
    output = output_dir or settings.output_dir
    try:
        with _session(ctx) as session:
            if table_names:
                paths = session.write_selected_generated_sources(table_names, output)
            else:
                paths = session.write_all_generated_sources(output)
    except BatchGenerationError as e:
        for path in e.paths:
            console.print(f"  [green]{path}[/green]")
        err_console.print(f"[red]Error: {e.message}[/red]")
        err_console.print(f"[yellow]{len(e.paths)} file(s) written before the failure[/yellow]")
        raise typer.Exit(1)

    for path in paths:
        console.print(f"  [green]{path}[/green]")
    console.print(f"[bold green]Generated {len(paths)} model file(s) in {output}[/bold green]")


if __name__ == "__main__":
    app()
