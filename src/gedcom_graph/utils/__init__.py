# src/gedcom_graph/utils/__init__.py

from .pathing import project_root, tests_data_path

__all__ = ["project_root", "tests_data_path"]
