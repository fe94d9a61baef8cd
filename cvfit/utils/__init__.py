"""
Shared utilities for CVFIT.

Common functionality used across contexts:
- Logger setup with provenance
- Date parsing for experience ages
- Text report tables
"""

from cvfit.utils.dates import format_date_range, parse_partial_date, today, years_since

__all__ = ["format_date_range", "parse_partial_date", "today", "years_since"]
