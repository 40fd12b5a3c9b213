from __future__ import annotations

from .parser import Parser, parse, parse_file

__all__ = ["Parser", "parse", "parse_file"]
