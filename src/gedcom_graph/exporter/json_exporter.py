"""
json_exporter.py
Structured JSON export of a RecordTree (and, optionally, its analysis).

This exporter:
- Converts the record dataclasses to plain dictionaries, field by field
- Serializes enums by name and sets as sorted lists, so output is stable
- Does not read JSON back; the shape mirrors the dataclass field names
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from gedcom_graph.analysis import Analyzer
from gedcom_graph.logging import get_logger
from gedcom_graph.records import RecordTree

log = get_logger("exporter.json_exporter")


def _to_json_compatible(obj: Any) -> Any:
    """
    Recursively convert objects into JSON-compatible structures.

    Rules:
    - Primitives pass through
    - Enums -> member name
    - dataclasses -> dict over their fields (leading underscores dropped)
    - dict -> dict (recursively)
    - set -> sorted list; list / tuple -> list (recursively)
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, Enum):
        return obj.name

    if is_dataclass(obj):
        return {
            f.name.lstrip("_"): _to_json_compatible(getattr(obj, f.name))
            for f in fields(obj)
        }

    if isinstance(obj, dict):
        return {str(k): _to_json_compatible(v) for k, v in obj.items()}

    if isinstance(obj, (set, frozenset)):
        return [_to_json_compatible(v) for v in sorted(obj)]

    if isinstance(obj, (list, tuple)):
        return [_to_json_compatible(v) for v in obj]

    # Last resort
    return str(obj)


def tree_to_dict(tree: RecordTree, analyzer: Optional[Analyzer] = None) -> Dict[str, Any]:
    """
    Convert the in-memory tree into a JSON-safe dict.
    """
    data = _to_json_compatible(tree)
    data["counts"] = tree.counts()

    if analyzer is not None:
        data["analysis"] = {
            "individuals_sorted": list(analyzer.individuals_sorted),
            "components": [sorted(c) for c in analyzer.components],
        }
    return data


def serialize_tree_to_json_string(
    tree: RecordTree,
    analyzer: Optional[Analyzer] = None,
    indent: Optional[int] = 2,
) -> str:
    return json.dumps(
        tree_to_dict(tree, analyzer),
        indent=indent,
        ensure_ascii=False,
    )


def export_tree_json(
    tree: RecordTree,
    output_path: str | Path,
    analyzer: Optional[Analyzer] = None,
    indent: Optional[int] = 2,
) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    counts = tree.counts()
    log.info(
        "Exporting tree JSON to: %s (INDI=%d, FAM=%d, SOUR=%d, REPO=%d, OBJE=%d)",
        output_path,
        counts["individuals"],
        counts["families"],
        counts["sources"],
        counts["repositories"],
        counts["multimedia"],
    )

    json_str = serialize_tree_to_json_string(tree, analyzer, indent=indent)

    with output_path.open("w", encoding="utf-8") as f:
        f.write(json_str)

    log.info("JSON export complete. size=%d bytes", output_path.stat().st_size)
