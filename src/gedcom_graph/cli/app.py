from __future__ import annotations

import typer

from gedcom_graph.cli.commands.analyze import analyze_command
from gedcom_graph.cli.commands.export import export_command
from gedcom_graph.cli.commands.stats import stats_command

app = typer.Typer(
    name="gedcom-graph",
    help="GEDCOM parser, descent-order sorter and family-component finder",
    add_completion=False,
)

app.command("stats")(stats_command)
app.command("export")(export_command)
app.command("analyze")(analyze_command)


def main():
    app()


if __name__ == "__main__":
    main()
