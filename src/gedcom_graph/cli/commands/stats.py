from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from gedcom_graph.cli.utils import console, load_gedcom


def stats_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print the plain-text summary instead of a table",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print parse timing and progress",
    ),
):
    """
    Show summary statistics for a GEDCOM file.
    """
    tree = load_gedcom(gedcom, verbose=verbose)
    console.print("Parsing complete!")

    if plain:
        print(tree.summary())
        return

    table = Table(title="GEDCOM Statistics")
    table.add_column("Entity", style="bold")
    table.add_column("Count", justify="right")

    for kind, count in tree.counts().items():
        table.add_row(kind.capitalize(), str(count))

    console.print(table)
