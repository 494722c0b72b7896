"""Console rendering of loaded schema metadata."""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from .models import SchemaMetadata

CATEGORIES = [
    ("tables", "Tables", "green"),
    ("views", "Views", "bright_blue"),
    ("enums", "Enums", "yellow"),
    ("functions", "Fn's", "bright_magenta"),
    ("procedures", "Proc's", "bright_magenta"),
    ("triggers", "Trig's", "bright_magenta"),
]


class SchemaDisplay:
    """Prints schema statistics and discovered objects."""

    def __init__(self, schemas: Sequence[SchemaMetadata], console: Optional[Console] = None):
        self.schemas = schemas
        self.console = console or Console()

    def build_statistics_table(self) -> Table:
        """Table with one row per schema, object counts per category and totals."""
        table = Table(title="Schema Statistics")
        table.add_column("Schema", style="magenta")
        for _, header, style in CATEGORIES:
            table.add_column(header, style=style, justify="right")
        table.add_column("Total", style="bold", justify="right")

        totals = {key: 0 for key, _, _ in CATEGORIES}
        for schema in self.schemas:
            counts = schema.counts()
            for key in totals:
                totals[key] += counts[key]
            table.add_row(
                schema.name,
                *[str(counts[key]) for key, _, _ in CATEGORIES],
                str(sum(counts.values())),
            )

        table.add_section()
        table.add_row(
            "TOTAL",
            *[str(totals[key]) for key, _, _ in CATEGORIES],
            str(sum(totals.values())),
            style="bold",
        )
        return table

    def display(self):
        self.console.print(self.build_statistics_table())

    def display_discoveries(self):
        """List every discovered object, grouped by schema and category."""
        self.console.print("[bold]Type Discovery Summary[/bold]")

        for schema in self.schemas:
            if schema.is_empty:
                continue

            counts = schema.counts()
            self.console.print(f"\nSchema: [magenta]{schema.name}[/magenta] [{sum(counts.values())}]")
            for key, _, style in CATEGORIES:
                names = getattr(schema, key)
                if not names:
                    continue
                self.console.print(f"  [{style}]━[/{style}] discovered [{style}]{len(names)}[/{style}] {key}:")
                for name in sorted(names):
                    self.console.print(f"    [dim]⊢ {schema.name}.[/dim][{style}]{name}[/{style}]")
