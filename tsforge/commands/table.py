"""Table data commands."""

import json
import typer
from typing import Any, Dict, Optional
from rich.console import Console
from rich.table import Table
from ..errors import ForgeError, NotFoundError
from ..forge import Forge

app = typer.Typer(help="Read table data")
console = Console()


def _build_filter(
    where: Optional[str],
    order_by: Optional[str],
    limit: Optional[int],
    offset: Optional[int],
) -> Dict[str, Any]:
    filter: Dict[str, Any] = {}
    try:
        if where:
            filter["where"] = json.loads(where)
        if order_by:
            filter["order_by"] = json.loads(order_by)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: --where/--order-by must be JSON: {e}[/red]")
        raise typer.Exit(1)
    if limit is not None:
        filter["limit"] = limit
    if offset is not None:
        filter["offset"] = offset
    return filter


@app.command("rows")
def rows(
    schema_name: str = typer.Argument(..., help="Schema name"),
    table_name: str = typer.Argument(..., help="Table name"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help='JSON predicate, e.g. \'{"id": 1}\''),
    order_by: Optional[str] = typer.Option(None, "--order-by", help='JSON ordering, e.g. \'{"name": "asc"}\''),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum number of rows"),
    offset: Optional[int] = typer.Option(None, "--offset", help="Rows to skip"),
):
    """List rows of a table."""
    filter = _build_filter(where, order_by, limit, offset)
    with Forge(schemas=[schema_name]) as forge:
        try:
            records = forge.get_table_operations(schema_name, table_name).find_all(filter)
            columns = [col.name for col in forge.get_table(schema_name, table_name).columns]
        except ForgeError as e:
            console.print(f"[red]Error reading {schema_name}.{table_name}: {e}[/red]")
            raise typer.Exit(1)

    if not records:
        console.print("[yellow]No rows found.[/yellow]")
        return

    output = Table(title=f"{schema_name}.{table_name}")
    for name in columns:
        output.add_column(name)
    for record in records:
        output.add_row(*["" if record.get(name) is None else str(record.get(name)) for name in columns])
    console.print(output)


@app.command("get")
def get(
    schema_name: str = typer.Argument(..., help="Schema name"),
    table_name: str = typer.Argument(..., help="Table name"),
    record_id: str = typer.Argument(..., help="Primary key value"),
):
    """Show one row by primary key as JSON."""
    with Forge(schemas=[schema_name]) as forge:
        try:
            record = forge.get_table_operations(schema_name, table_name).find_one(record_id)
        except NotFoundError as e:
            console.print(f"[yellow]{e}[/yellow]")
            raise typer.Exit(1)
        except ForgeError as e:
            console.print(f"[red]Error reading {schema_name}.{table_name}: {e}[/red]")
            raise typer.Exit(1)

    console.print_json(json.dumps(record, default=str))


@app.command("count")
def count(
    schema_name: str = typer.Argument(..., help="Schema name"),
    table_name: str = typer.Argument(..., help="Table name"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="JSON predicate"),
):
    """Count rows of a table."""
    filter = _build_filter(where, None, None, None)
    with Forge(schemas=[schema_name]) as forge:
        try:
            total = forge.get_table_operations(schema_name, table_name).count(filter)
        except ForgeError as e:
            console.print(f"[red]Error counting {schema_name}.{table_name}: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"{schema_name}.{table_name}: [bold]{total}[/bold] row(s)")
