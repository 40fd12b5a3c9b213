from __future__ import annotations

import time
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from gedcom_graph.core.exceptions import GedcomError, ParseError
from gedcom_graph.parser import parse_file
from gedcom_graph.records import RecordTree

console = Console()
err_console = Console(stderr=True)


def load_gedcom(path: Path, *, verbose: bool = False) -> RecordTree:
    """
    Read and parse ``path``; parse errors end the command with exit code 1.
    """
    t0 = time.perf_counter()

    try:
        tree = parse_file(path)
    except ParseError as exc:
        report_error(exc, str(path))

    if verbose:
        console.log(f"Parsed {path} in {time.perf_counter() - t0:.2f}s")

    return tree


def fail(message: str, code: int = 1) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code=code)


def report_error(exc: GedcomError, prefix: Optional[str] = None) -> NoReturn:
    fail(f"{prefix}: {exc}" if prefix else str(exc))


def write_text(payload: str, *, out: Path | None) -> None:
    """
    Write text to stdout or file.
    """
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
