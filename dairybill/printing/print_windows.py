from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def print_file(path: Path | str) -> bool:
    """Send a saved bill to the default printer. Windows only; returns False elsewhere."""
    if sys.platform != "win32":
        return False
    try:
        os.startfile(str(path), "print")  # type: ignore[attr-defined]
        return True
    except Exception:
        logger.exception("Failed to print bill: %s", path)
        return False


def open_file(path: Path | str) -> bool:
    """Open a saved bill in the system viewer."""
    try:
        if sys.platform == "win32":
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(path)])
        else:
            subprocess.Popen(["xdg-open", str(path)])
        return True
    except Exception:
        logger.exception("Failed to open file: %s", path)
        return False
