"""
Fitting context logger.

Provides logging interface for fitting context with automatic [fit] prefix.
All fitting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from cvfit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[fit]"


def setup_fitting_logger(log_dir: Path, theme_id: str = None) -> Path:
    """
    Setup logger for fitting context.

    Configures loguru with provenance tracking and fitting-specific context.

    Args:
        log_dir: Directory for this fitting session
        theme_id: Requested theme, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from cvfit.contexts.fitting.logger import setup_fitting_logger

        log_file = setup_fitting_logger(log_dir, theme_id="classic")
    """
    return _setup_logger(
        context_name="fit",
        log_dir=log_dir,
        extra_provenance={"Theme": theme_id or "(default)"},
    )


# Wrapper functions with automatic [fit] prefix


def _log_info(message: str) -> None:
    """Log info message with [fit] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [fit] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [fit] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [fit] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [fit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level fitting-specific logging helpers


def log_fit_start(theme_id: str, experience_count: int, as_of) -> None:
    """Log start of a fitting run with context."""
    _log_info(f"Fitting {experience_count} experience(s) into theme '{theme_id}'")
    _log_debug(f"  Reference date: {as_of}")


def log_zone_allocation(allocation) -> None:
    """Log the outcome of a single zone step at debug level."""
    _log_debug(
        f"  {allocation.zone.value}: {len(allocation.items)} item(s), "
        f"{allocation.units_used} units, {len(allocation.actions)} action(s)"
    )


def log_fit_result(result, verbose: bool = False) -> None:
    """
    Log the outcome of a fitting run.

    Args:
        result: FittingResult from fit_to_theme()
        verbose: Show every warning instead of the first few
    """
    _log_info(
        f"Fitted into '{result.theme_id}': {result.total_units_used} units on "
        f"{result.pages} page(s), compression level {result.compression_level_applied}"
    )

    if result.warnings:
        _log_warning(f"{len(result.warnings)} warning(s) raised while fitting")
        warning_limit = len(result.warnings) if verbose else 5
        for i, warning in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warning}")
        if len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")


def log_validation_result(validation) -> None:
    """Log a FitValidation with errors and warnings."""
    if validation.valid:
        _log_success(f"Validation passed ({len(validation.warnings)} warning(s))")
    else:
        _log_error(f"Validation failed with {len(validation.errors)} error(s)")
        for i, error in enumerate(validation.errors, 1):
            _log_error(f"  Error {i}: {error}")

    for warning in validation.warnings:
        _log_debug(f"  Warning: {warning}")
