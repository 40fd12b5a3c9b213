"""
Logger factory for gedcom_graph.

Every module asks ``get_logger`` for a logger instead of calling
``logging.getLogger`` directly, so they all hang under the ``gedcom_graph``
logger and share its handlers:

* a stderr console handler showing warnings and up (everything in debug mode);
* when ``logging.to_file`` is set in ``config/gedcom_graph.yml``, a combined
  log file plus one file per module in the configured log directory,
  rotated at 5 MB if ``logging.rotate`` is on.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

from gedcom_graph.config import get_config
from gedcom_graph.utils.pathing import project_root

PACKAGE_LOGGER = "gedcom_graph"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MAX_BYTES = 5 * 1024 * 1024
_BACKUPS = 5

_loggers: Dict[str, logging.Logger] = {}
_settings: Optional["_Settings"] = None


class _Settings:
    """Logging options read once from the YAML config."""

    def __init__(self, cfg):
        opts = cfg.logging
        self.debug = bool(getattr(cfg, "debug", False))
        level = getattr(logging, str(opts.get("level", "INFO")).upper(), logging.INFO)
        self.level = logging.DEBUG if self.debug else level
        self.to_file = bool(opts.get("to_file", False))
        self.rotate = bool(opts.get("rotate", False))
        self.master_file = opts.get("file", "gedcom_graph.log")
        self.directory = opts.get("dir") or cfg.paths.get("logs_dir") or "logs"

    def log_dir(self) -> Path:
        path = Path(self.directory)
        if not path.is_absolute():
            path = project_root() / path
        path.mkdir(parents=True, exist_ok=True)
        return path


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(filename: str, settings: _Settings) -> logging.Handler:
    path = settings.log_dir() / filename
    if settings.rotate:
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(settings.level)
    handler.setFormatter(_formatter())
    return handler


def _package_logger() -> logging.Logger:
    """Set up the ``gedcom_graph`` logger on first use."""
    global _settings

    root = logging.getLogger(PACKAGE_LOGGER)
    if _settings is not None:
        return root

    _settings = _Settings(get_config())
    root.setLevel(_settings.level)
    root.propagate = False

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if _settings.debug else logging.WARNING)
    console.setFormatter(_formatter())
    root.addHandler(console)

    if _settings.to_file:
        root.addHandler(_file_handler(_settings.master_file, _settings))

    return root


def _qualified(name: Optional[str]) -> str:
    if not name or name == PACKAGE_LOGGER:
        return PACKAGE_LOGGER
    if name.startswith(PACKAGE_LOGGER + "."):
        return name
    return f"{PACKAGE_LOGGER}.{name}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return the logger for ``name`` inside the ``gedcom_graph`` hierarchy.

    ``get_logger("parser")`` and ``get_logger("gedcom_graph.parser")`` are
    the same logger.
    """
    root = _package_logger()
    qualified = _qualified(name)
    if qualified in _loggers:
        return _loggers[qualified]

    logger = logging.getLogger(qualified)
    if logger is not root:
        logger.setLevel(_settings.level)
        if _settings.to_file:
            module_file = qualified.replace(".", "_") + ".log"
            logger.addHandler(_file_handler(module_file, _settings))

    _loggers[qualified] = logger
    return logger


def list_active_loggers() -> List[str]:
    """Names handed out so far; handy when checking configuration."""
    return list(_loggers)
