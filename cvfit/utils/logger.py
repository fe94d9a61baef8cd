"""
Session logging for cvfit scripts.

A fitting session writes everything to ``<log_dir>/<context>.log`` and echoes
INFO and above to the console. Library code never adds sinks: the fitting and
layout contexts log through their own prefixed wrappers, and only scripts call
``setup_logger`` (via ``setup_fitting_logger``).
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
) -> Path:
    """
    Start a logging session for one script run.

    Replaces any existing sinks with a DEBUG file sink and an INFO console sink,
    then writes the provenance header.

    Args:
        context_name: Log file stem (``fit`` gives ``fit.log``)
        log_dir: Session directory, created if missing
        extra_provenance: Run parameters for the header (theme, reference date, ...)
        level_colors: Console color overrides per level

    Returns:
        Path to the session log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """Write the session header: command line, working directory, interpreter, run parameters."""
    rule = "=" * 80
    logger.info(rule)
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")
    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")
    logger.info(rule)
