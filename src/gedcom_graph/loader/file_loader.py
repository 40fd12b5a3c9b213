from __future__ import annotations

from pathlib import Path
from typing import Union

from gedcom_graph.logging import get_logger

log = get_logger("loader.file_loader")


def load_file(path: Union[str, Path]) -> str:
    """Read a whole GEDCOM file into memory; parsing never touches the disk."""
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"GEDCOM file not found: {file_path}")

    text = file_path.read_text(encoding="utf-8", errors="replace")
    log.info("Loaded file: %s (%d chars)", file_path, len(text))
    return text
