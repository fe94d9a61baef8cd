"""
Zone steps for the header, the summary and the flat-list zones.

Each step is a pure function returning a ZoneAllocation: the retained items,
their unit cost, and the actions taken to make them fit. Experiences have their
own module because they carry format tiers.
"""

import re
from dataclasses import replace
from typing import Optional, Sequence

from cvfit.contexts.fitting.content import (
    ActionKind,
    FitAction,
    FitPreferences,
    FittedHeader,
    FittedSummary,
    Profile,
    ZoneAllocation,
)
from cvfit.contexts.fitting.text import SUMMARY_WORD_LIMITS, truncate_words
from cvfit.contexts.layout.content_units import (
    SUMMARY_TIERS,
    ContentUnitType,
    HeaderFormat,
    SummaryFormat,
    cost,
    header_cost,
    max_items_in_capacity,
    summary_cost,
)
from cvfit.contexts.layout.zones import SkillsDisplayMode, ZoneName

_PUNCTUATION = re.compile(r"[^\w\s&]")
_WHITESPACE = re.compile(r"\s+")

# Display label per flat-list zone, for warnings
ZONE_LABELS = {
    ZoneName.SKILLS: "skill",
    ZoneName.FORMATION: "formation",
    ZoneName.PROJECTS: "project",
    ZoneName.CERTIFICATIONS: "certification",
    ZoneName.LANGUAGES: "language",
    ZoneName.CLIENTS: "client",
    ZoneName.INTERESTS: "interest",
}


def _plural(count: int, label: str) -> str:
    return f"{count} {label}{'s' if count != 1 else ''}"


# =============================================================================
# Header
# =============================================================================


def allocate_header(profile: Profile, capacity: int, preferences: FitPreferences) -> ZoneAllocation:
    """
    Pick the richest header format that fits.

    with_photo needs the photo requested, a photo URL and room; with_contacts needs
    at least one contact field and room; minimal is always placed.
    """
    actions = []
    photo_wanted = preferences.include_photo and bool(profile.photo_url)

    if photo_wanted and header_cost(HeaderFormat.WITH_PHOTO) <= capacity:
        fmt = HeaderFormat.WITH_PHOTO
    elif profile.has_contacts and header_cost(HeaderFormat.WITH_CONTACTS) <= capacity:
        fmt = HeaderFormat.WITH_CONTACTS
    else:
        fmt = HeaderFormat.MINIMAL

    if photo_wanted and fmt is not HeaderFormat.WITH_PHOTO:
        actions.append(
            FitAction(
                kind=ActionKind.DEGRADED,
                zone=ZoneName.HEADER,
                message=(
                    f"Photo omitted: header zone holds {capacity} units, "
                    f"photo header needs {header_cost(HeaderFormat.WITH_PHOTO)}"
                ),
            )
        )

    show_contacts = fmt is not HeaderFormat.MINIMAL
    header = FittedHeader(
        format=fmt,
        full_name=profile.full_name,
        title=profile.title,
        email=profile.email if show_contacts else None,
        phone=profile.phone if show_contacts else None,
        location=profile.location if show_contacts else None,
        linkedin=profile.linkedin if show_contacts else None,
        photo_url=profile.photo_url if fmt is HeaderFormat.WITH_PHOTO else None,
    )
    return ZoneAllocation(
        zone=ZoneName.HEADER,
        items=(header,),
        units_used=header_cost(fmt),
        actions=tuple(actions),
        format=fmt,
    )


# =============================================================================
# Summary
# =============================================================================


def _summary_allocation(text: str, fmt: Optional[SummaryFormat], actions) -> ZoneAllocation:
    if fmt is None:
        return ZoneAllocation(zone=ZoneName.SUMMARY, actions=tuple(actions))

    limit = SUMMARY_WORD_LIMITS[fmt]
    fitted_text = text.strip() if limit is None else truncate_words(text, limit)
    return ZoneAllocation(
        zone=ZoneName.SUMMARY,
        items=(FittedSummary(format=fmt, text=fitted_text),),
        units_used=summary_cost(fmt),
        actions=tuple(actions),
        format=fmt,
    )


def _summary_action(fmt: Optional[SummaryFormat], reason: str) -> FitAction:
    if fmt is None:
        return FitAction(
            kind=ActionKind.EXCLUDED,
            zone=ZoneName.SUMMARY,
            message=f"Summary excluded ({reason})",
        )
    limit = SUMMARY_WORD_LIMITS[fmt]
    return FitAction(
        kind=ActionKind.TRUNCATED,
        zone=ZoneName.SUMMARY,
        message=f"Summary shortened to {fmt.value} format ({limit} words max, {reason})",
    )


def allocate_summary(profile: Profile, capacity: int) -> ZoneAllocation:
    """
    Fit the elevator pitch into the summary zone.

    Tries elevator, standard (70 words), short (40 words) in order. Anything below
    elevator is one compression action; if nothing fits the summary is excluded.
    """
    text = profile.summary or ""
    if not text.strip():
        return ZoneAllocation(zone=ZoneName.SUMMARY)

    fmt = next((tier for tier in SUMMARY_TIERS if summary_cost(tier) <= capacity), None)

    actions = []
    if fmt is not SummaryFormat.ELEVATOR:
        actions.append(_summary_action(fmt, f"summary zone holds {capacity} units"))
    return _summary_allocation(text, fmt, actions)


def shrink_summary(allocation: ZoneAllocation, profile: Profile) -> ZoneAllocation:
    """
    Step an allocated summary down one tier (or out) to recover page space.

    Returns the allocation unchanged when there is no summary to shrink.
    """
    if allocation.format is None:
        return allocation

    index = SUMMARY_TIERS.index(allocation.format)
    fmt = SUMMARY_TIERS[index + 1] if index + 1 < len(SUMMARY_TIERS) else None
    action = _summary_action(fmt, "page budget exceeded")
    return _summary_allocation(profile.summary, fmt, allocation.actions + (action,))


# =============================================================================
# Flat lists
# =============================================================================


def allocate_flat_list(
    zone: ZoneName, items: Sequence, unit_type: ContentUnitType, capacity: int
) -> ZoneAllocation:
    """
    Keep the first ``floor(capacity / cost)`` items, in their original order.

    Truncating a zone is one compression action. A disabled zone (capacity 0)
    omits its entries with a warning but does not count as compression.
    """
    items = tuple(items)
    if not items:
        return ZoneAllocation(zone=zone)

    label = ZONE_LABELS[zone]
    max_items = max_items_in_capacity(unit_type, capacity)
    kept = items[:max_items]
    dropped = len(items) - len(kept)

    actions = ()
    if dropped and capacity <= 0:
        actions = (
            FitAction(
                kind=ActionKind.EXCLUDED,
                zone=zone,
                message=f"Theme has no {zone.value} zone: {_plural(dropped, label)} omitted",
                compression=False,
            ),
        )
    elif dropped:
        actions = (
            FitAction(
                kind=ActionKind.TRUNCATED,
                zone=zone,
                message=(
                    f"{zone.value.capitalize()} truncated: kept {len(kept)} of {len(items)}, "
                    f"{_plural(dropped, label)} excluded (no space)"
                ),
            ),
        )

    return ZoneAllocation(
        zone=zone,
        items=kept,
        units_used=len(kept) * cost(unit_type),
        actions=actions,
    )


def skills_unit_type(skills: Sequence[str], capacity: int, mode: SkillsDisplayMode) -> ContentUnitType:
    """
    Per-skill unit type for a display mode.

    auto renders one line per skill when all of them fit that way, else tags.
    """
    if mode is SkillsDisplayMode.FULL:
        return ContentUnitType.SKILL_LINE
    if mode is SkillsDisplayMode.COMPACT:
        return ContentUnitType.SKILL_TAG
    if len(skills) * cost(ContentUnitType.SKILL_LINE) <= capacity:
        return ContentUnitType.SKILL_LINE
    return ContentUnitType.SKILL_TAG


def allocate_skills(skills: Sequence[str], capacity: int, mode: SkillsDisplayMode) -> ZoneAllocation:
    unit_type = skills_unit_type(skills, capacity, mode)
    display = (
        SkillsDisplayMode.FULL if unit_type is ContentUnitType.SKILL_LINE else SkillsDisplayMode.COMPACT
    )
    allocation = allocate_flat_list(ZoneName.SKILLS, skills, unit_type, capacity)
    return replace(allocation, format=display)


def normalize_name(value: str) -> str:
    """
    Comparison key for organisation names.

    Examples:
        >>> normalize_name("  Acme,  Corp. ")
        'acme corp'
    """
    without_punctuation = _PUNCTUATION.sub("", str(value).casefold())
    return _WHITESPACE.sub(" ", without_punctuation).strip()


def allocate_clients(clients: Sequence[str], employers: Sequence[str], capacity: int) -> ZoneAllocation:
    """
    Fit client references, leaving out the candidate's own employers.

    Falls back to the unfiltered list when every client is also an employer.
    """
    own = {normalize_name(employer) for employer in employers}
    filtered = [client for client in clients if normalize_name(client) not in own]
    candidates = filtered or list(clients)
    return allocate_flat_list(
        ZoneName.CLIENTS, candidates, ContentUnitType.CLIENT_REFERENCE, capacity
    )
