"""
Layout context logger.

Provides logging interface for layout context with automatic [layout] prefix.
All layout modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[layout]"


def _log_warning(message: str) -> None:
    """Log warning message with [layout] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [layout] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_registry_loaded(config_path: Path, theme_ids: list, default_id: str) -> None:
    """Log a freshly built theme registry."""
    _log_debug(f"Loaded {len(theme_ids)} theme(s) from {config_path}")
    _log_debug(f"  Themes: {', '.join(theme_ids)} (default: {default_id})")


def log_theme_fallback(requested_id: str, default_id: str) -> None:
    """Log that an unknown theme id was replaced by the default theme."""
    _log_warning(f"Unknown theme '{requested_id}', falling back to '{default_id}'")
