"""
Logging configuration shared by the UI and library modules.

Streamlit re-executes the UI script on every interaction, so setup_logging()
must be safe to call repeatedly: handlers are attached to the root logger
only once.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from hostfinder.config import LOG_FILE

_FORMAT = "%(asctime)s  %(levelname)s  %(message)s"
_MARKER = "_hostfinder_configured"


def setup_logging(log_file: Path = LOG_FILE, level: int = logging.INFO) -> None:
    root = logging.getLogger()
    if getattr(root, _MARKER, False):
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(_FORMAT)

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root.setLevel(level)
    root.addHandler(stream)
    root.addHandler(rotating)
    setattr(root, _MARKER, True)
