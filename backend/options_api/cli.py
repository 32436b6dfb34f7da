"""
Options API CLI.

Command-line interface for administering option tables:
    options-cli entities
    options-cli export-countries
    options-cli process-outbox
    options-cli purge gender_option --yes
    options-cli serve --port 8000
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="options-cli",
    help="eProcurement reference options CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create every option table and the outbox table."""
    from shared.infrastructure.db import engine
    from options_api.models import Base

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ {len(Base.metadata.tables)} tables created/verified[/green]")


@app.command()
def entities():
    """List registered option kinds with active and total counts."""
    from shared.infrastructure.db import get_db_context
    from options_api.registry import OPTION_ENTITIES
    from options_api.services.option_service import OptionService

    table = Table(title="Option kinds")
    table.add_column("Slug", style="cyan")
    table.add_column("Id strategy", style="magenta")
    table.add_column("Active", style="green", justify="right")
    table.add_column("Total", style="yellow", justify="right")
    table.add_column("Export", justify="center")

    with get_db_context() as db:
        for entity in OPTION_ENTITIES.values():
            service = OptionService(db, entity)
            try:
                active = str(service.count())
                total = str(service.count(include_deleted=True))
            except Exception as e:
                active = total = f"[red]{type(e).__name__}[/red]"
                db.rollback()
            table.add_row(
                entity.slug,
                entity.id_strategy,
                active,
                total,
                "✓" if entity.exportable else "",
            )

    console.print(table)


@app.command()
def purge(
    slug: str = typer.Argument(..., help="Option kind to empty, e.g. gender_option"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm the permanent deletion"),
):
    """Hard delete every record of one option kind."""
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException
    from options_api.registry import get_entity
    from options_api.services.option_service import OptionService

    if not yes:
        console.print("[red]Refusing to purge without --yes[/red]")
        raise typer.Exit(1)

    try:
        entity = get_entity(slug)
        with get_db_context() as db:
            removed = OptionService(db, entity).hard_delete_all()
    except AppException as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Removed {removed} {entity.label} records[/green]")


# =============================================================================
# Export Commands
# =============================================================================

@app.command()
def export_countries(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target .xlsx file"),
):
    """Regenerate the country option spreadsheet now."""
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context
    from options_api.exporters import CountryExport

    target = output or settings.export_path
    try:
        with get_db_context() as db:
            rows = CountryExport(db).write(target)
    except Exception as e:
        console.print(f"[red]✗ Export failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Wrote {rows} countries to {target}[/green]")


@app.command()
def process_outbox():
    """Run one batch of pending export events."""
    from shared.infrastructure.db import get_db_context
    from options_api.services.events import pending_count, process_pending

    with get_db_context() as db:
        published = process_pending(db)
        remaining = pending_count(db)

    table = Table(title="Outbox batch")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Published", str(published))
    table.add_row("Still pending", str(remaining))
    console.print(table)


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port (defaults to API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API with uvicorn."""
    import uvicorn

    from shared.config.settings import settings

    uvicorn.run(
        "options_api.main:app",
        host=host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def version():
    """Show version information."""
    from options_api import __version__

    table = Table(title="Options API Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", __version__)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
