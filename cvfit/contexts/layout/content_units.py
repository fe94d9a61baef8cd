"""
Content unit reference: normalized heights of every renderable unit.

One unit is roughly 4mm of an A4 page at a 10-11pt body font, so a page holds
about 200 usable units. The table is fixed at import time; themes express
their zone capacities in the same units.

Format tiers are ordered from richest to cheapest and their costs are strictly
decreasing:

    detailed (22) > standard (15) > compact (8) > minimal (4)
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class ContentUnitType(Enum):
    """Every renderable unit variant."""

    HEADER_MINIMAL = "header_minimal"
    HEADER_WITH_CONTACTS = "header_with_contacts"
    HEADER_WITH_PHOTO = "header_with_photo"

    SUMMARY_SHORT = "summary_short"
    SUMMARY_STANDARD = "summary_standard"
    SUMMARY_ELEVATOR = "summary_elevator"

    EXPERIENCE_DETAILED = "experience_detailed"
    EXPERIENCE_STANDARD = "experience_standard"
    EXPERIENCE_COMPACT = "experience_compact"
    EXPERIENCE_MINIMAL = "experience_minimal"

    SKILL_LINE = "skill_line"
    SKILL_TAG = "skill_tag"

    FORMATION_DETAILED = "formation_detailed"
    FORMATION_STANDARD = "formation_standard"
    FORMATION_MINIMAL = "formation_minimal"
    CERTIFICATION = "certification"

    PROJECT_FULL = "project_full"
    PROJECT_COMPACT = "project_compact"

    LANGUAGE = "language"
    CLIENT_REFERENCE = "client_reference"
    ACHIEVEMENT_BULLET = "achievement_bullet"
    INTEREST_ITEM = "interest_item"
    FOOTER = "footer"


@dataclass(frozen=True)
class ContentUnit:
    """
    Height definition for one unit type.

    Attributes:
        type: Unit type
        height_units: Vertical space consumed on the page
        description: What the unit looks like when rendered
    """

    type: ContentUnitType
    height_units: int
    description: str


_UNITS = (
    ContentUnit(ContentUnitType.HEADER_MINIMAL, 8, "Name and professional title"),
    ContentUnit(ContentUnitType.HEADER_WITH_CONTACTS, 12, "Minimal header plus email, phone, location"),
    ContentUnit(ContentUnitType.HEADER_WITH_PHOTO, 20, "Contact header plus square photo"),
    ContentUnit(ContentUnitType.SUMMARY_SHORT, 5, "Two-line pitch, up to 40 words"),
    ContentUnit(ContentUnitType.SUMMARY_STANDARD, 8, "Three to four line pitch, up to 70 words"),
    ContentUnit(ContentUnitType.SUMMARY_ELEVATOR, 12, "Full five to six line pitch"),
    ContentUnit(ContentUnitType.EXPERIENCE_DETAILED, 22, "Role, employer, context and up to 5 achievements"),
    ContentUnit(ContentUnitType.EXPERIENCE_STANDARD, 15, "Role, employer and up to 3 achievements"),
    ContentUnit(ContentUnitType.EXPERIENCE_COMPACT, 8, "Role, employer and one summary sentence"),
    ContentUnit(ContentUnitType.EXPERIENCE_MINIMAL, 4, "Role | Employer | Dates on one line"),
    ContentUnit(ContentUnitType.SKILL_LINE, 2, "One skill with its own line"),
    ContentUnit(ContentUnitType.SKILL_TAG, 1, "One skill rendered as an inline tag"),
    ContentUnit(ContentUnitType.FORMATION_DETAILED, 10, "Degree, school, dates and course details"),
    ContentUnit(ContentUnitType.FORMATION_STANDARD, 6, "Degree, school and dates"),
    ContentUnit(ContentUnitType.FORMATION_MINIMAL, 3, "Degree | School | Year on one line"),
    ContentUnit(ContentUnitType.CERTIFICATION, 3, "Certification | Issuer | Date on one line"),
    ContentUnit(ContentUnitType.PROJECT_FULL, 10, "Project with description, stack and impact"),
    ContentUnit(ContentUnitType.PROJECT_COMPACT, 4, "Project name and one descriptive line"),
    ContentUnit(ContentUnitType.LANGUAGE, 2, "Language: level"),
    ContentUnit(ContentUnitType.CLIENT_REFERENCE, 2, "One client reference"),
    ContentUnit(ContentUnitType.ACHIEVEMENT_BULLET, 2, "One achievement bullet"),
    ContentUnit(ContentUnitType.INTEREST_ITEM, 2, "One interest with a short description"),
    ContentUnit(ContentUnitType.FOOTER, 5, "Footer links or legal note"),
)

CONTENT_UNITS_REFERENCE: Mapping[ContentUnitType, ContentUnit] = MappingProxyType(
    {unit.type: unit for unit in _UNITS}
)

_missing_units = set(ContentUnitType) - set(CONTENT_UNITS_REFERENCE)
if _missing_units:
    raise RuntimeError(f"Content units without a height: {sorted(u.value for u in _missing_units)}")


# =============================================================================
# Format tiers
# =============================================================================


class ExperienceFormat(Enum):
    """Rendering tiers for an experience entry, richest first."""

    DETAILED = "detailed"
    STANDARD = "standard"
    COMPACT = "compact"
    MINIMAL = "minimal"


class HeaderFormat(Enum):
    """Header variants, richest first."""

    WITH_PHOTO = "with_photo"
    WITH_CONTACTS = "with_contacts"
    MINIMAL = "minimal"


class SummaryFormat(Enum):
    """Summary variants, richest first."""

    ELEVATOR = "elevator"
    STANDARD = "standard"
    SHORT = "short"


EXPERIENCE_TIERS: Tuple[ExperienceFormat, ...] = tuple(ExperienceFormat)
HEADER_TIERS: Tuple[HeaderFormat, ...] = tuple(HeaderFormat)
SUMMARY_TIERS: Tuple[SummaryFormat, ...] = tuple(SummaryFormat)

EXPERIENCE_FORMAT_UNITS = MappingProxyType(
    {
        ExperienceFormat.DETAILED: ContentUnitType.EXPERIENCE_DETAILED,
        ExperienceFormat.STANDARD: ContentUnitType.EXPERIENCE_STANDARD,
        ExperienceFormat.COMPACT: ContentUnitType.EXPERIENCE_COMPACT,
        ExperienceFormat.MINIMAL: ContentUnitType.EXPERIENCE_MINIMAL,
    }
)

HEADER_FORMAT_UNITS = MappingProxyType(
    {
        HeaderFormat.WITH_PHOTO: ContentUnitType.HEADER_WITH_PHOTO,
        HeaderFormat.WITH_CONTACTS: ContentUnitType.HEADER_WITH_CONTACTS,
        HeaderFormat.MINIMAL: ContentUnitType.HEADER_MINIMAL,
    }
)

SUMMARY_FORMAT_UNITS = MappingProxyType(
    {
        SummaryFormat.ELEVATOR: ContentUnitType.SUMMARY_ELEVATOR,
        SummaryFormat.STANDARD: ContentUnitType.SUMMARY_STANDARD,
        SummaryFormat.SHORT: ContentUnitType.SUMMARY_SHORT,
    }
)


# =============================================================================
# Queries
# =============================================================================


def cost(unit_type: ContentUnitType) -> int:
    """Height in units of a content unit type."""
    return CONTENT_UNITS_REFERENCE[unit_type].height_units


def fits(unit_type: ContentUnitType, remaining_units: int) -> bool:
    """True if one unit of ``unit_type`` fits in ``remaining_units``."""
    return cost(unit_type) <= remaining_units


def experience_cost(fmt: ExperienceFormat) -> int:
    return cost(EXPERIENCE_FORMAT_UNITS[fmt])


def header_cost(fmt: HeaderFormat) -> int:
    return cost(HEADER_FORMAT_UNITS[fmt])


def summary_cost(fmt: SummaryFormat) -> int:
    return cost(SUMMARY_FORMAT_UNITS[fmt])


def next_tier(fmt: ExperienceFormat) -> Optional[ExperienceFormat]:
    """
    The format one step less detailed than ``fmt``.

    Returns:
        Next cheaper format, or None if ``fmt`` is already minimal
    """
    index = EXPERIENCE_TIERS.index(fmt)
    if index + 1 >= len(EXPERIENCE_TIERS):
        return None
    return EXPERIENCE_TIERS[index + 1]


def tier_rank(fmt: ExperienceFormat) -> int:
    """Position of ``fmt`` in the tier order (0 = detailed)."""
    return EXPERIENCE_TIERS.index(fmt)


def best_format_for_remaining(remaining_units: int) -> Optional[ExperienceFormat]:
    """
    Most detailed experience format whose cost fits in ``remaining_units``.

    Formats are tried in strictly descending cost order.

    Returns:
        The richest fitting format, or None if even minimal does not fit

    Examples:
        >>> best_format_for_remaining(16)
        <ExperienceFormat.STANDARD: 'standard'>
        >>> best_format_for_remaining(3) is None
        True
    """
    for fmt in EXPERIENCE_TIERS:
        if experience_cost(fmt) <= remaining_units:
            return fmt
    return None


def max_items_in_capacity(unit_type: ContentUnitType, capacity: int) -> int:
    """Number of ``unit_type`` items that fit in ``capacity`` (never negative)."""
    if capacity <= 0:
        return 0
    return capacity // cost(unit_type)
