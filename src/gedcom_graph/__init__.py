"""
gedcom_graph: parse GEDCOM files into a record tree and analyse its
family structure.

    from gedcom_graph import parse, Analyzer

    tree = parse(text)
    analyzer = Analyzer(tree)
    analyzer.individuals_sorted   # children before their parents
    analyzer.components           # family-connected groups
"""

from __future__ import annotations

from gedcom_graph.analysis import Analyzer, connected_components, topological_sort
from gedcom_graph.core.exceptions import CycleError, GedcomError, ParseError
from gedcom_graph.parser import Parser, parse, parse_file
from gedcom_graph.records import RecordTree

__version__ = "0.1.0"

__all__ = [
    "Analyzer",
    "CycleError",
    "GedcomError",
    "ParseError",
    "Parser",
    "RecordTree",
    "connected_components",
    "parse",
    "parse_file",
    "topological_sort",
]
