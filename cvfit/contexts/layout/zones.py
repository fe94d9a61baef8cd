"""
Zone and rule data structures for theme capacity schemas.

A theme divides its page budget into named zones. Zone names form a closed
enumeration so engine code and theme configs cannot drift apart silently.
"""

from dataclasses import dataclass
from enum import Enum


class ZoneName(Enum):
    """Named regions of the page budget."""

    HEADER = "header"
    SUMMARY = "summary"
    EXPERIENCES = "experiences"
    SKILLS = "skills"
    FORMATION = "formation"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    LANGUAGES = "languages"
    CLIENTS = "clients"
    INTERESTS = "interests"
    FOOTER = "footer"
    MARGINS = "margins"


# Zones that hold fitted content (margins are a reservation, not content)
CONTENT_ZONES = tuple(zone for zone in ZoneName if zone is not ZoneName.MARGINS)


class OverflowStrategy(Enum):
    """What a renderer should do with content that does not fit a zone."""

    HIDE = "hide"
    COMPACT = "compact"
    SPLIT_PAGE = "split_page"


class SkillsDisplayMode(Enum):
    """How the skills zone lays out its items."""

    AUTO = "auto"
    FULL = "full"
    COMPACT = "compact"


@dataclass(frozen=True)
class Zone:
    """
    Capacity definition for one named zone of a theme.

    Attributes:
        name: Zone name
        capacity_units: Hard ceiling for content placed in the zone (0 disables it)
        min_units: Soft floor; falling below it is a validation warning
        flex: Whether the zone may lend or borrow capacity (informational)
        flex_priority: Redistribution priority, 1-10 (informational)
        overflow_strategy: Renderer hint for overflowing content (informational)
    """

    name: ZoneName
    capacity_units: int
    min_units: int = 0
    flex: bool = False
    flex_priority: int = 1
    overflow_strategy: OverflowStrategy = OverflowStrategy.HIDE

    @property
    def enabled(self) -> bool:
        return self.capacity_units > 0


@dataclass(frozen=True)
class AdaptiveRules:
    """
    Per-theme rules steering the allocation engine.

    Attributes:
        min_detailed_experiences: Most-relevant experiences kept detailed while capacity allows
        compact_after_years: Experiences that ended longer ago than this start compact
        max_bullet_points_per_exp: Achievement cap for detailed and standard formats
        skills_display_mode: Skills layout (auto picks full when everything fits)
        prefer_detailed_for_recent: Recent experiences start detailed (informational)
    """

    min_detailed_experiences: int = 2
    compact_after_years: float = 10
    max_bullet_points_per_exp: int = 5
    skills_display_mode: SkillsDisplayMode = SkillsDisplayMode.AUTO
    prefer_detailed_for_recent: bool = True


@dataclass(frozen=True)
class PageConfig:
    """
    Page-level budget of a theme.

    Attributes:
        total_height_units: Units available on one page, margins included
        supports_multi_page: Whether content may spill to a second page
        multi_page_threshold: Units (margins included) above which a second page is used
        max_pages: Upper bound on pages for multi-page themes
    """

    total_height_units: int = 200
    supports_multi_page: bool = False
    multi_page_threshold: int = 999
    max_pages: int = 1
