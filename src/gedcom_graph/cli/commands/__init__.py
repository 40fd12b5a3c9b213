"""
CLI command modules for gedcom_graph.

Each command module defines a single Typer-compatible command function.
"""

from gedcom_graph.cli.commands.analyze import analyze_command
from gedcom_graph.cli.commands.export import export_command
from gedcom_graph.cli.commands.stats import stats_command

__all__ = [
    "analyze_command",
    "export_command",
    "stats_command",
]
