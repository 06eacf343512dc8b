"""
Logging setup for the lecturer plugin.

Every module logs through ``logging.getLogger(__name__)``, so the logger
name doubles as the component tag (``lecturer_api.app.services.lecturer_service``
and so on).  ``setup_logging`` sets the level of the ``lecturer_api``
logger on each call and installs console and file handlers on the root
logger only when nothing else has configured logging yet.  A host
application that already set up logging keeps its own handlers.
"""

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "lecturer_api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure logging for the plugin and return the package logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``), case
        insensitive.  Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to log to as well as the console.  Missing parent
        directories are created.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return package_logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    root.setLevel(min(root.level or logging.WARNING, numeric_level))
    return package_logger
