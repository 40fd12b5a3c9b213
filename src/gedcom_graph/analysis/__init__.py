from __future__ import annotations

from .analyzer import Analyzer, connected_components, topological_sort

__all__ = ["Analyzer", "connected_components", "topological_sort"]
