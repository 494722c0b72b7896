"""Schema discovery and type generation commands."""

import typer
from typing import List, Optional
from rich.console import Console
from rich.table import Table
from ..config import settings
from ..display import SchemaDisplay
from ..errors import ForgeError
from ..forge import Forge
from ..generator import TypeGenerator
from ..type_mappers import map_type

app = typer.Typer(help="Schema discovery and type generation commands")
console = Console()


def _schemas_option():
    return typer.Option(None, "--schema", "-s", help="Schema to load (repeatable; default: all)")


@app.command("list")
def list_schemas(schemas: Optional[List[str]] = _schemas_option()):
    """Show object counts per schema."""
    with Forge(schemas=schemas or None) as forge:
        try:
            if not forge.schemas:
                console.print("[yellow]No schemas found.[/yellow]")
                return
            SchemaDisplay(forge.schemas, console=console).display()
        except ForgeError as e:
            console.print(f"[red]Error loading schemas: {e}[/red]")
            raise typer.Exit(1)


@app.command("discoveries")
def discoveries(schemas: Optional[List[str]] = _schemas_option()):
    """List every discovered table, view, enum and routine."""
    with Forge(schemas=schemas or None) as forge:
        try:
            SchemaDisplay(forge.schemas, console=console).display_discoveries()
        except ForgeError as e:
            console.print(f"[red]Error loading schemas: {e}[/red]")
            raise typer.Exit(1)


@app.command("describe")
def describe(
    schema_name: str = typer.Argument(..., help="Schema name"),
    table_name: str = typer.Argument(..., help="Table or view name"),
):
    """Show the columns of a table or view and their TypeScript types."""
    with Forge(schemas=[schema_name]) as forge:
        try:
            table = forge.get_table(schema_name, table_name)
            view = None if table else forge.get_view(schema_name, table_name)
        except ForgeError as e:
            console.print(f"[red]Error loading schema: {e}[/red]")
            raise typer.Exit(1)

    if table is None and view is None:
        console.print(f"[red]Error: {schema_name}.{table_name} not found[/red]")
        raise typer.Exit(1)

    kind = "Table" if table else "View"
    output = Table(title=f"{kind} {schema_name}.{table_name}")
    output.add_column("Column", style="cyan")
    output.add_column("Type", style="green")
    output.add_column("TypeScript", style="blue")
    output.add_column("Nullable")
    if table:
        output.add_column("PK")
        output.add_column("References", style="magenta")
        for col in table.columns:
            ref = col.references
            output.add_row(
                col.name,
                col.type,
                map_type(col.type).to_typescript(),
                "yes" if col.nullable else "no",
                "yes" if col.is_pk else "",
                f"{ref.schema_name}.{ref.table}.{ref.column}" if ref else "",
            )
    else:
        for col in view.view_columns:
            output.add_row(col.name, col.type, map_type(col.type).to_typescript(), "yes" if col.nullable else "no")
    console.print(output)


@app.command("generate")
def generate(
    schemas: Optional[List[str]] = _schemas_option(),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory (default: TSFORGE_OUTPUT_DIR)"),
    json_dump: bool = typer.Option(False, "--json", help="Also write metadata.json"),
    query_params: bool = typer.Option(False, "--query-params", help="Emit <Table>QueryParams interfaces"),
    clean: bool = typer.Option(False, "--clean", help="Remove the output directory before writing"),
):
    """Generate TypeScript types for the loaded schemas."""
    output_dir = output or settings.output_dir
    generator = TypeGenerator(include_query_params=query_params)
    with Forge(schemas=schemas or None, generator=generator) as forge:
        try:
            written = forge.gen_ts(output_dir, clean=clean)
            if json_dump:
                written.append(forge.gen_json(output_dir))
        except ForgeError as e:
            console.print(f"[red]Error generating types: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Generated {len(written)} file(s) in {output_dir}[/green]")
    for path in written:
        console.print(f"  [dim]{path}[/dim]")
