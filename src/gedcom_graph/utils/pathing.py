# src/gedcom_graph/utils/pathing.py

from __future__ import annotations

from pathlib import Path
from typing import Union

# <root>/src/gedcom_graph/utils/pathing.py -> parents[3] is <root>
_ROOT = Path(__file__).resolve().parents[3]


def project_root() -> Path:
    """Checkout directory holding ``src/``, ``config/`` and ``tests/``."""
    return _ROOT


def tests_data_path(*parts: Union[str, Path]) -> Path:
    """Absolute path of a fixture, e.g. ``tests_data_path("simple.ged")``."""
    return _ROOT.joinpath("tests", "data", *parts)
