"""
Logging package for ``gedcom_graph``.

Modules call ``get_logger("<area>")`` to share the package handlers.
"""

from .logger import get_logger, list_active_loggers

__all__ = ["get_logger", "list_active_loggers"]
