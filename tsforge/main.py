"""tsforge CLI - Main entry point."""

import logging

import typer
from rich.console import Console
from .commands import health, schema, table
from .config import settings

app = typer.Typer(
    name="tsforge",
    help="Discover database schemas over REST, query tables and generate TypeScript types",
    add_completion=False,
)

# Add subcommands
app.add_typer(health.app, name="health")
app.add_typer(schema.app, name="schema")
app.add_typer(table.app, name="table")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Base URL: {settings.base_url}")
    console.print(f"  Schemas: {', '.join(settings.schemas) if settings.schemas else 'All'}")
    console.print(f"  Timeout: {settings.timeout}s")
    console.print(f"  Max retries: {settings.max_retries} (backoff {settings.retry_backoff}s)")
    console.print(f"  Output directory: {settings.output_dir}")
    console.print(f"  Extra headers: {', '.join(settings.default_headers) or 'None'}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    tsforge - typed clients for a database REST API.

    Examples:

        tsforge schema list

        tsforge schema generate --output src/gen --json

        tsforge table rows public users --where '{"active": true}' --limit 10
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
