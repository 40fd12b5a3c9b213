from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gedcom_graph.analysis import Analyzer
from gedcom_graph.cli.utils import console, load_gedcom, report_error, write_text
from gedcom_graph.core.exceptions import CycleError
from gedcom_graph.exporter import serialize_tree_to_json_string


def export_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    analysis: bool = typer.Option(
        False,
        "--analysis",
        help="Include descent order and connected components",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print parse timing and progress",
    ),
):
    """
    Export GEDCOM data to JSON (stdout by default).
    """
    tree = load_gedcom(gedcom, verbose=verbose)

    analyzer = None
    if analysis:
        try:
            analyzer = Analyzer(tree)
        except CycleError as exc:
            report_error(exc, str(gedcom))

    if verbose:
        console.log("Exporting JSON")

    payload = serialize_tree_to_json_string(
        tree, analyzer, indent=2 if pretty else None
    )
    write_text(payload, out=out)

    if verbose:
        console.log("Export complete")
