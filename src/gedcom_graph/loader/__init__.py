# src/gedcom_graph/loader/__init__.py

"""
Public interface for the GEDCOM loader stack.

    from gedcom_graph.loader import Tokenizer, tokenize_line, load_file
"""

from __future__ import annotations

from .file_loader import load_file
from .tokenizer import (
    STANDARD_TAGS,
    CrossRefPointer,
    CustomTag,
    LevelMarker,
    LineValue,
    StandardTag,
    Token,
    Tokenizer,
    classify_tag,
    tokenize,
    tokenize_line,
)

__all__ = [
    "STANDARD_TAGS",
    "CrossRefPointer",
    "CustomTag",
    "LevelMarker",
    "LineValue",
    "StandardTag",
    "Token",
    "Tokenizer",
    "classify_tag",
    "load_file",
    "tokenize",
    "tokenize_line",
]
