"""
Theme registry: named presentation profiles and their zone capacities.

Themes are declared in themes.yaml (or the file named by CVFIT_THEMES_PATH) and
loaded once into frozen dataclasses. Lookups come in two flavors:

- ``ThemeRegistry.find`` raises ``UnknownThemeError`` for unknown ids
- ``ThemeRegistry.get`` / ``get_theme`` fall back to the default theme

Upstream callers pass user-controlled strings, so the public path never fails;
the fallback is logged and visible through ``ThemeRegistry.resolve``.

Examples:
    >>> theme = get_theme("compact_ats")
    >>> theme.zone(ZoneName.EXPERIENCES).capacity_units
    110
    >>> get_theme("no_such_theme").id
    'classic'
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from cvfit.contexts.layout.content_units import (
    ContentUnitType,
    ExperienceFormat,
    cost,
    experience_cost,
)
from cvfit.contexts.layout.exceptions import InvalidThemeConfigError, UnknownThemeError
from cvfit.contexts.layout.logger import log_registry_loaded, log_theme_fallback
from cvfit.contexts.layout.zones import (
    CONTENT_ZONES,
    AdaptiveRules,
    OverflowStrategy,
    PageConfig,
    SkillsDisplayMode,
    Zone,
    ZoneName,
)

load_dotenv()
THEMES_PATH = Path(os.getenv("CVFIT_THEMES_PATH", Path(__file__).parent / "themes.yaml"))


@dataclass(frozen=True)
class Theme:
    """
    A named bundle of zone capacities, page limits and adaptive rules.

    Attributes:
        id: Registry key
        name: Display name
        description: One-line description
        page: Page budget
        zones: One Zone per ZoneName (read-only mapping)
        rules: Adaptive rules for the allocation engine
    """

    id: str
    name: str
    description: str
    page: PageConfig
    zones: Mapping[ZoneName, Zone]
    rules: AdaptiveRules

    def __post_init__(self):
        missing = [zone.value for zone in ZoneName if zone not in self.zones]
        if missing:
            raise InvalidThemeConfigError(f"Theme is missing zones: {missing}", theme_id=self.id)
        # Freeze the zone mapping even when built from a plain dict
        object.__setattr__(self, "zones", MappingProxyType(dict(self.zones)))

    def zone(self, name: ZoneName) -> Zone:
        return self.zones[name]

    def capacity(self, name: ZoneName) -> int:
        return self.zones[name].capacity_units

    @property
    def margin_units(self) -> int:
        return self.capacity(ZoneName.MARGINS)

    @property
    def allocated_units(self) -> int:
        """Sum of all content zone capacities (margins excluded)."""
        return sum(self.capacity(zone) for zone in CONTENT_ZONES)

    def page_capacity(self, pages: int = 1) -> int:
        """Hard page ceiling for ``pages`` pages, margins included."""
        return self.page.total_height_units * pages

    def content_budget(self, pages: int = 1) -> int:
        """Units available to content on ``pages`` pages once margins are reserved."""
        return self.page_capacity(pages) - self.margin_units


@dataclass(frozen=True)
class ThemeResolution:
    """Outcome of resolving a user-supplied theme id."""

    theme: Theme
    requested_id: str
    fell_back: bool


@dataclass(frozen=True)
class ThemeRegistry:
    """
    Read-only catalog of themes keyed by id.

    Attributes:
        themes: Themes by id
        default_id: Theme used when a lookup misses
        aliases: Alternate ids mapped to canonical ids
    """

    themes: Mapping[str, Theme]
    default_id: str
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "themes", MappingProxyType(dict(self.themes)))
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        if self.default_id not in self.themes:
            raise InvalidThemeConfigError(
                f"Default theme '{self.default_id}' is not defined", theme_id=self.default_id
            )
        for alias, target in self.aliases.items():
            if target not in self.themes:
                raise InvalidThemeConfigError(f"Alias '{alias}' points to unknown theme '{target}'")

    def find(self, theme_id: str) -> Theme:
        """
        Look up a theme by id or alias.

        Raises:
            UnknownThemeError: If neither a theme nor an alias matches
        """
        key = self.aliases.get(theme_id, theme_id)
        try:
            return self.themes[key]
        except KeyError:
            raise UnknownThemeError(theme_id, self.themes.keys()) from None

    def resolve(self, theme_id: Optional[str]) -> ThemeResolution:
        """Resolve a theme id, recording whether the default had to be used."""
        requested = theme_id if theme_id is not None else self.default_id
        try:
            return ThemeResolution(theme=self.find(requested), requested_id=requested, fell_back=False)
        except UnknownThemeError:
            log_theme_fallback(requested, self.default_id)
            return ThemeResolution(
                theme=self.themes[self.default_id], requested_id=requested, fell_back=True
            )

    def get(self, theme_id: Optional[str]) -> Theme:
        """Total lookup: unknown ids resolve to the default theme."""
        return self.resolve(theme_id).theme

    @property
    def default(self) -> Theme:
        return self.themes[self.default_id]

    def ids(self) -> List[str]:
        return list(self.themes)

    def all(self) -> List[Theme]:
        return list(self.themes.values())

    def __contains__(self, theme_id: str) -> bool:
        return self.aliases.get(theme_id, theme_id) in self.themes


# =============================================================================
# Loading
# =============================================================================


def _enum_value(enum_cls, value: Any, theme_id: str, config_path: Path):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise InvalidThemeConfigError(
            f"Invalid {enum_cls.__name__} '{value}' (allowed: {allowed})",
            theme_id=theme_id,
            config_path=config_path,
        ) from None


def _build_theme(theme_id: str, spec: Dict[str, Any], config_path: Path) -> Theme:
    zone_specs = spec.get("zones") or {}

    unknown = sorted(set(zone_specs) - {zone.value for zone in ZoneName})
    if unknown:
        raise InvalidThemeConfigError(
            f"Unknown zones: {unknown}", theme_id=theme_id, config_path=config_path
        )
    missing = [zone.value for zone in ZoneName if zone.value not in zone_specs]
    if missing:
        raise InvalidThemeConfigError(
            f"Theme must define every zone, missing: {missing}",
            theme_id=theme_id,
            config_path=config_path,
        )

    rules_spec = dict(spec.get("rules") or {})
    if "skills_display_mode" in rules_spec:
        rules_spec["skills_display_mode"] = _enum_value(
            SkillsDisplayMode, rules_spec["skills_display_mode"], theme_id, config_path
        )

    zones = {}
    try:
        for zone_name in ZoneName:
            zone_spec = dict(zone_specs[zone_name.value] or {})
            strategy = zone_spec.pop("overflow_strategy", OverflowStrategy.HIDE.value)
            zones[zone_name] = Zone(
                name=zone_name,
                overflow_strategy=_enum_value(OverflowStrategy, strategy, theme_id, config_path),
                **zone_spec,
            )
        page = PageConfig(**(spec.get("page") or {}))
        rules = AdaptiveRules(**rules_spec)
    except TypeError as e:
        raise InvalidThemeConfigError(str(e), theme_id=theme_id, config_path=config_path) from e

    return Theme(
        id=theme_id,
        name=spec.get("name", theme_id),
        description=spec.get("description", ""),
        page=page,
        zones=zones,
        rules=rules,
    )


def load_theme_registry(config_path: Path = None) -> ThemeRegistry:
    """
    Load themes.yaml into a ThemeRegistry.

    Args:
        config_path: Optional path to a themes file (defaults to THEMES_PATH)

    Returns:
        ThemeRegistry with every declared theme

    Raises:
        FileNotFoundError: If the config file does not exist
        InvalidThemeConfigError: If a theme is incomplete or uses unknown values
    """
    if config_path is None:
        config_path = THEMES_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Theme config not found: {config_path}")

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    theme_specs = config.get("themes") or {}
    if not theme_specs:
        raise InvalidThemeConfigError("No themes declared", config_path=config_path)

    themes = {
        theme_id: _build_theme(theme_id, spec, config_path)
        for theme_id, spec in theme_specs.items()
    }
    default_id = config.get("default_theme") or next(iter(themes))

    registry = ThemeRegistry(themes=themes, default_id=default_id, aliases=config.get("aliases") or {})
    log_registry_loaded(config_path, registry.ids(), default_id)
    return registry


@lru_cache(maxsize=None)
def get_registry() -> ThemeRegistry:
    """Process-wide theme registry, built once on first use."""
    return load_theme_registry()


def get_theme(theme_id: Optional[str] = None) -> Theme:
    """Theme for ``theme_id``, or the default theme for unknown/missing ids."""
    return get_registry().get(theme_id)


# =============================================================================
# Theme analysis
# =============================================================================


@dataclass(frozen=True)
class ThemeCheck:
    """Consistency report for a theme definition."""

    valid: bool
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]


def validate_theme_config(theme: Theme) -> ThemeCheck:
    """
    Check a theme's internal consistency.

    Errors:
    - Content zones plus margins exceed the page capacity
    - A zone's min_units exceeds its capacity_units
    - A zone's flex_priority is outside 1-10

    Warnings:
    - The experiences zone cannot hold min_detailed_experiences detailed entries
    """
    errors = []
    warnings = []

    total_with_margins = theme.allocated_units + theme.margin_units
    if total_with_margins > theme.page.total_height_units:
        errors.append(
            f"Total allocated ({total_with_margins}) exceeds page capacity "
            f"({theme.page.total_height_units})"
        )

    for zone_name, zone in theme.zones.items():
        if zone.min_units > zone.capacity_units:
            errors.append(
                f'Zone "{zone_name.value}": min_units ({zone.min_units}) > '
                f"capacity_units ({zone.capacity_units})"
            )
        if not 1 <= zone.flex_priority <= 10:
            errors.append(
                f'Zone "{zone_name.value}": flex_priority ({zone.flex_priority}) must be between 1-10'
            )

    needed = theme.rules.min_detailed_experiences * experience_cost(ExperienceFormat.DETAILED)
    experiences_capacity = theme.capacity(ZoneName.EXPERIENCES)
    if experiences_capacity < needed:
        warnings.append(
            f"Experiences zone ({experiences_capacity} units) may be too small for "
            f"{theme.rules.min_detailed_experiences} detailed experiences (needs {needed} units)"
        )

    return ThemeCheck(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


@dataclass(frozen=True)
class ThemeCapacitySummary:
    """Rough capacity estimates for choosing between themes."""

    theme_id: str
    theme_name: str
    supports_multi_page: bool
    estimated_experiences_detailed: int
    estimated_experiences_total: int
    has_space_for_projects: bool
    has_space_for_interests: bool


def theme_capacity_summary(theme: Theme) -> ThemeCapacitySummary:
    experiences_capacity = theme.capacity(ZoneName.EXPERIENCES)
    return ThemeCapacitySummary(
        theme_id=theme.id,
        theme_name=theme.name,
        supports_multi_page=theme.page.supports_multi_page,
        estimated_experiences_detailed=experiences_capacity // experience_cost(ExperienceFormat.DETAILED),
        estimated_experiences_total=experiences_capacity // experience_cost(ExperienceFormat.STANDARD),
        has_space_for_projects=theme.capacity(ZoneName.PROJECTS) >= cost(ContentUnitType.PROJECT_COMPACT),
        has_space_for_interests=theme.capacity(ZoneName.INTERESTS) >= cost(ContentUnitType.INTEREST_ITEM),
    )


def recommend_theme(experience_count: int, has_projects: bool = False) -> str:
    """
    Suggest a theme id from the shape of a candidate's history.

    - Up to 3 experiences: compact_ats (junior, density first)
    - Up to 7 experiences: classic
    - More: modern_spacious when there are projects to showcase, else classic
    """
    if experience_count <= 3:
        return "compact_ats"
    if experience_count <= 7:
        return "classic"
    if has_projects:
        return "modern_spacious"
    return "classic"
