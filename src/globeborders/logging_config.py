"""
Logging Configuration
=====================
Routes the 'globeborders' logger to the console (and optionally a file) and
keeps the rendering stack quiet.

Why is this file needed?
------------------------
1. The CLI is the only place that decides verbosity: `--debug` lowers the
   package level, `--quiet` keeps the console to warnings while a log file
   still receives everything at the requested level.
2. PyVista and VTK log through their own loggers. When the scene is exported
   or previewed they would otherwise interleave their messages with the build
   report, so they are held at `third_party_level`.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "globeborders"
THIRD_PARTY_LOGGERS = ("pyvista", "vtkmodules")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    quiet: bool = False,
    third_party_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Configures the package logger and returns it.

    Args:
        level: Level of the package logger and of the optional file.
        log_file: Optional path; the file is truncated on every run.
        quiet: Console shows warnings and errors only.
        third_party_level: Level applied to the PyVista/VTK loggers.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Re-running main() in one process must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(max(level, logging.WARNING) if quiet else level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logger.debug(
        f"Logging initialized (level={logging.getLevelName(level)}, quiet={quiet}, "
        f"file={log_file or '-'})."
    )
    return logger
