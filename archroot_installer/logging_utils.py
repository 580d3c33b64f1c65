from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/archroot-installer.log"


def _file_handler(path: str, fmt: logging.Formatter) -> logging.Handler:
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    h = logging.FileHandler(path)
    h.setFormatter(fmt)
    return h


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    Bootstrap records every decision to the log file. While acting as init
    the root filesystem may still be read-only, so callers pass
    ``log_path=None`` there and get console output only.

    If the requested file cannot be opened we fall back to a file in the
    working directory, and to console-only if that fails too.

    Returns the actual file path being used, or None.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_archroot_configured", False):
        return getattr(logger, "_archroot_log_path", log_path)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handlers: list[logging.Handler] = []
    chosen_path: Optional[str] = None

    if log_path:
        for candidate in (log_path, str(Path.cwd() / "archroot-installer.log")):
            try:
                handlers.append(_file_handler(candidate, fmt))
                chosen_path = candidate
                break
            except OSError:
                continue

    if also_console or not handlers:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_archroot_configured", True)
    setattr(logger, "_archroot_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def flush_logging() -> None:
    """Flush every root handler; used before the process image is replaced."""
    for h in logging.getLogger().handlers:
        h.flush()
