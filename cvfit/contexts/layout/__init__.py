"""
Layout Context

Responsibilities:
- Defines the content unit cost model (how much page height each unit takes)
- Defines zones, page budgets and adaptive rules for each theme
- Loads the theme registry from themes.yaml and resolves theme ids

Owns: Unit costs, format tiers, theme capacity schemas
Never: Decides which content is kept or how it is degraded
"""

from cvfit.contexts.layout.content_units import (
    CONTENT_UNITS_REFERENCE,
    ContentUnitType,
    ExperienceFormat,
    HeaderFormat,
    SummaryFormat,
    best_format_for_remaining,
    cost,
    experience_cost,
    fits,
    max_items_in_capacity,
    next_tier,
)
from cvfit.contexts.layout.exceptions import InvalidThemeConfigError, UnknownThemeError
from cvfit.contexts.layout.themes import (
    Theme,
    ThemeRegistry,
    get_registry,
    get_theme,
    load_theme_registry,
    recommend_theme,
    theme_capacity_summary,
    validate_theme_config,
)
from cvfit.contexts.layout.zones import (
    AdaptiveRules,
    OverflowStrategy,
    PageConfig,
    SkillsDisplayMode,
    Zone,
    ZoneName,
)

__all__ = [
    # Unit cost model
    "CONTENT_UNITS_REFERENCE",
    "ContentUnitType",
    "ExperienceFormat",
    "HeaderFormat",
    "SummaryFormat",
    "cost",
    "fits",
    "experience_cost",
    "next_tier",
    "best_format_for_remaining",
    "max_items_in_capacity",
    # Zones and themes
    "AdaptiveRules",
    "OverflowStrategy",
    "PageConfig",
    "SkillsDisplayMode",
    "Zone",
    "ZoneName",
    "Theme",
    "ThemeRegistry",
    "get_registry",
    "get_theme",
    "load_theme_registry",
    "recommend_theme",
    "theme_capacity_summary",
    "validate_theme_config",
    # Errors
    "InvalidThemeConfigError",
    "UnknownThemeError",
]
