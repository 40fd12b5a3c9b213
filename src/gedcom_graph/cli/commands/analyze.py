from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from gedcom_graph.analysis import connected_components, topological_sort
from gedcom_graph.cli.utils import console, load_gedcom, report_error
from gedcom_graph.core.exceptions import CycleError


def analyze_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print parse timing and progress",
    ),
):
    """
    Print the descent order and the family-connected components.

    Components are printed even when the descent order fails on a cycle;
    the command then exits with status 1.
    """
    tree = load_gedcom(gedcom, verbose=verbose)

    components = connected_components(tree)
    table = Table(title=f"Connected components ({len(components)})")
    table.add_column("#", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Members")
    for i, component in enumerate(components, start=1):
        table.add_row(str(i), str(len(component)), ", ".join(sorted(component)))
    console.print(table)

    try:
        order = topological_sort(tree)
    except CycleError as exc:
        report_error(exc, str(gedcom))

    console.print("[bold]Descent order[/bold] (children first):")
    for xref in order:
        console.print(f"  {xref}")
