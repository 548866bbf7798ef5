"""Rich-based output formatting for the CLI."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table as RichTable
from rich.tree import Tree

import bqcolumns.api as api
import bqcolumns.errors as errors
from bqcolumns.columns import Table
from bqcolumns.schema import Field, Schema

# Global console instance
console = Console()


def render_schema(schema: Schema, title: str = "schema") -> None:
    """Render the field tree, one node per field."""
    tree = Tree(f"[bold]{title}[/bold]")
    for field in schema.fields:
        _add_field(tree, field)
    console.print(tree)


def _add_field(parent: Tree, field: Field) -> None:
    mode = " [dim]REPEATED[/dim]" if field.repeated else ""
    node = parent.add(f"{field.name} [cyan]{field.type.value}[/cyan]{mode}")
    for child in field.children:
        _add_field(node, child)


def render_table_preview(table: Table, limit: int = 10) -> None:
    """Render the first ``limit`` rows of a decoded table."""
    preview = RichTable(show_header=True, header_style="bold")
    for field in table.fields:
        preview.add_column(f"{field.name}\n[dim]{field.type.value}[/dim]")

    columns = [c.to_pylist() for c in table.columns]
    shown = min(limit, table.num_rows)
    for i in range(shown):
        preview.add_row(*(_format_cell(values[i]) for values in columns))

    console.print(preview)
    console.print(f"[dim]{shown} of {table.num_rows} row(s) shown[/dim]")


def _format_cell(value: Any) -> str:
    if value is None:
        return "[dim]null[/dim]"
    return str(value)


@contextmanager
def document_progress(total: int, quiet: bool = False) -> Iterator[api.DocumentCallback]:
    """Progress bar ticked once per decoded document.

    Yields the callback to pass as ``on_document_done``.
    """
    if quiet:
        yield lambda rows: None
        return

    progress = Progress(
        TextColumn("Parsing"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total} files"),
        TimeRemainingColumn(),
        console=console,
    )
    with progress:
        task = progress.add_task("parse", total=total)
        yield lambda rows: progress.advance(task)


def render_written(path: str, table: Table) -> None:
    console.print(
        f"[bold green]Wrote[/bold green] {table.num_rows} row(s), "
        f"{len(table.columns)} column(s) to {path}"
    )


def render_error(e: errors.BqColumnsError) -> None:
    """Display a structured error message."""
    console.print(f"[bold red]Error:[/bold red] {e.context}\n")
    console.print(f"[yellow]Cause:[/yellow] {e.cause}\n")
    console.print(f"[green]Fix:[/green] {e.fix}")
