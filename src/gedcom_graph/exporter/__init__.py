"""
Exporter package.

Re-exports the JSON export entry points used by the CLI.
"""

from __future__ import annotations

from .json_exporter import (
    export_tree_json,
    serialize_tree_to_json_string,
    tree_to_dict,
)

__all__ = ["export_tree_json", "serialize_tree_to_json_string", "tree_to_dict"]
