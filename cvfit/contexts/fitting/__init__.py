"""
Fitting Context

Responsibilities:
- Fits relevance-ordered résumé content into a theme's page budget
- Picks a format per experience and degrades the least relevant ones first
- Truncates flat-list zones and reports every loss as a warning
- Validates fitting results and computes comparison statistics

Owns: Allocation decisions, fitting results, fit validation
Never: Scores relevance, renders documents, or changes theme capacities
"""

from cvfit.contexts.fitting.content import (
    ActionKind,
    FitAction,
    FitPreferences,
    FittingResult,
    ResumeContent,
)
from cvfit.contexts.fitting.engine import fit_content, fit_multi_theme, fit_to_theme
from cvfit.contexts.fitting.stats import compare_results, compute_stats, format_stats_report
from cvfit.contexts.fitting.validator import FitValidation, check_overflow, validate_fitting

__all__ = [
    # Data structures
    "ActionKind",
    "FitAction",
    "FitPreferences",
    "FittingResult",
    "ResumeContent",
    # Engine
    "fit_content",
    "fit_to_theme",
    "fit_multi_theme",
    # Validation and stats
    "FitValidation",
    "validate_fitting",
    "check_overflow",
    "compute_stats",
    "compare_results",
    "format_stats_report",
]
