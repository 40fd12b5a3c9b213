import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from gedcom_graph.parser import parse_file  # noqa: E402
from gedcom_graph.utils import tests_data_path  # noqa: E402


@pytest.fixture
def simple_tree():
    return parse_file(tests_data_path("simple.ged"))


@pytest.fixture
def extended_tree():
    return parse_file(tests_data_path("extended.ged"))
