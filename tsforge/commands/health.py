"""Backend health commands."""

import typer
from rich.console import Console
from ..base_client import BaseClient
from ..config import settings
from ..errors import ForgeError
from ..health import HealthClient

app = typer.Typer(help="Backend health commands")
console = Console()


@app.command("check")
def check():
    """Show the backend health status."""
    with BaseClient() as client:
        try:
            status = HealthClient(client).check_health()
            color = "green" if status.status.lower() in ("ok", "healthy") else "yellow"
            console.print(f"[{color}]Status: {status.status}[/{color}]")
            console.print(f"  URL: {settings.base_url}")
            console.print(f"  Version: {status.version or 'N/A'}")
            console.print(f"  Uptime: {status.uptime if status.uptime is not None else 'N/A'}")
            console.print(f"  Timestamp: {status.timestamp or 'N/A'}")
        except ForgeError as e:
            console.print(f"[red]Cannot reach {settings.base_url}: {e}[/red]")
            raise typer.Exit(1)


@app.command("ping")
def ping():
    """Ping the backend."""
    with BaseClient() as client:
        try:
            console.print(f"[green]{HealthClient(client).check_ping()}[/green]")
        except ForgeError as e:
            console.print(f"[red]Ping failed: {e}[/red]")
            raise typer.Exit(1)


@app.command("cache")
def cache():
    """Show the backend metadata cache status."""
    with BaseClient() as client:
        try:
            status = HealthClient(client).check_cache()
            console.print("[bold]Metadata cache[/bold]")
            console.print(f"  Last updated: {status.last_updated or 'N/A'}")
            console.print(f"  Total items: {status.total_items}")
            console.print(f"  Tables: {status.tables_cached}")
            console.print(f"  Views: {status.views_cached}")
            console.print(f"  Enums: {status.enums_cached}")
            console.print(f"  Functions: {status.functions_cached}")
            console.print(f"  Procedures: {status.procedures_cached}")
            console.print(f"  Triggers: {status.triggers_cached}")
        except ForgeError as e:
            console.print(f"[red]Error reading cache status: {e}[/red]")
            raise typer.Exit(1)


@app.command("clear-cache")
def clear_cache():
    """Ask the backend to drop its metadata cache."""
    with BaseClient() as client:
        try:
            result = HealthClient(client).clear_cache()
            console.print(f"[green]{result.status}[/green] {result.message}")
        except ForgeError as e:
            console.print(f"[red]Error clearing cache: {e}[/red]")
            raise typer.Exit(1)
