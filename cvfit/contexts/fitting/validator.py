"""
Post-hoc validation of fitting results.

The engine never consults these checks; they run after a result exists and
report errors (the result should not be rendered) and warnings (the result is
usable but weaker than it could be). Zone usage is re-derived from the
retained content so a result whose bookkeeping drifted is caught here.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from cvfit.contexts.fitting.content import FittingResult
from cvfit.contexts.layout.content_units import (
    ContentUnitType,
    ExperienceFormat,
    cost,
    experience_cost,
    header_cost,
    summary_cost,
)
from cvfit.contexts.layout.themes import Theme
from cvfit.contexts.layout.zones import CONTENT_ZONES, SkillsDisplayMode, ZoneName

# Utilization (share of the page ceiling) above which small variations may overflow
HIGH_UTILIZATION_PERCENT = 95.0

# Fewer achievements than this makes a detailed entry look thin
MIN_DETAILED_ACHIEVEMENTS = 2

# Per-item cost of each flat-list zone, keyed by the FittedContent attribute it reads
FLAT_ZONE_COSTS = {
    ZoneName.FORMATION: ("formations", ContentUnitType.FORMATION_STANDARD),
    ZoneName.PROJECTS: ("projects", ContentUnitType.PROJECT_COMPACT),
    ZoneName.CERTIFICATIONS: ("certifications", ContentUnitType.CERTIFICATION),
    ZoneName.LANGUAGES: ("languages", ContentUnitType.LANGUAGE),
    ZoneName.CLIENTS: ("clients", ContentUnitType.CLIENT_REFERENCE),
    ZoneName.INTERESTS: ("interests", ContentUnitType.INTEREST_ITEM),
}


class IssueTemplates:
    """Centralized issue message templates (f-string style)."""

    # Errors
    PAGE_OVERFLOW = (
        "Total units ({total} content + {margins} margins) exceeds page capacity "
        "({capacity} for {pages} page(s))"
    )
    NO_EXPERIENCES = "No experiences included in the resume"
    ZONE_USAGE_MISMATCH = 'Zone "{zone}": reported {reported} units, retained content costs {derived}'
    TOTAL_MISMATCH = "Zone usage sums to {derived} units but total_units_used is {reported}"
    CONTENT_OVERFLOW = "Content overflow: {total} units > {capacity} units ({pages} page(s))"

    # Warnings
    ZONE_BELOW_MINIMUM = 'Zone "{zone}": {used} units < minimum {minimum} units'
    FEW_DETAILED = "Only {count} detailed experience(s) (minimum: {minimum})"
    RELEVANCE_ORDER = (
        "Experiences not properly sorted by relevance ({first} < {second} at position {position})"
    )
    DETAILED_WITHOUT_CONTEXT = 'Experience "{role}" is detailed but has no context'
    DETAILED_FEW_ACHIEVEMENTS = 'Experience "{role}" is detailed but has only {count} achievement(s)'
    NO_SKILLS = "No skills included in the resume"
    NO_FORMATION = "No formation included in the resume"
    HIGH_UTILIZATION = (
        "High space utilization: {percent:.1f}% (risk of overflow with slight variations)"
    )


@dataclass(frozen=True)
class FitValidation:
    """
    Result of validating a fitting result.

    Attributes:
        valid: True when there are no errors
        errors: Problems that invalidate the result
        warnings: Quality concerns that do not invalidate it
    """

    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


def derive_zone_usage(result: FittingResult) -> Dict[ZoneName, int]:
    """Recompute per-zone usage from the retained content alone."""
    content = result.content
    usage = {zone: 0 for zone in CONTENT_ZONES}

    usage[ZoneName.HEADER] = header_cost(content.header.format)
    if content.summary is not None:
        usage[ZoneName.SUMMARY] = summary_cost(content.summary.format)
    usage[ZoneName.EXPERIENCES] = sum(experience_cost(exp.format) for exp in content.experiences)

    skill_unit = (
        ContentUnitType.SKILL_LINE
        if content.skills_display is SkillsDisplayMode.FULL
        else ContentUnitType.SKILL_TAG
    )
    usage[ZoneName.SKILLS] = len(content.skills) * cost(skill_unit)

    for zone, (attribute, unit_type) in FLAT_ZONE_COSTS.items():
        usage[zone] = len(getattr(content, attribute)) * cost(unit_type)

    return usage


def validate_fitting(result: FittingResult, theme: Theme) -> FitValidation:
    """
    Validate a fitting result against its theme.

    Errors:
    - Total usage plus margins exceeds total_height_units x pages
    - No experiences retained
    - Reported zone usage differs from the cost of the retained content

    Warnings:
    - A content zone below its min_units
    - Fewer detailed experiences than min_detailed_experiences
    - Experiences out of relevance order (first violation only)
    - Detailed experiences without context or with fewer than 2 achievements
    - No skills or no formation
    """
    errors = []
    warnings = []
    experiences = result.content.experiences

    capacity = theme.page_capacity(result.pages)
    if result.total_units_used + theme.margin_units > capacity:
        errors.append(
            IssueTemplates.PAGE_OVERFLOW.format(
                total=result.total_units_used,
                margins=theme.margin_units,
                capacity=capacity,
                pages=result.pages,
            )
        )

    if not experiences:
        errors.append(IssueTemplates.NO_EXPERIENCES)

    derived = derive_zone_usage(result)
    for zone in CONTENT_ZONES:
        reported = result.zone_usage.get(zone, 0)
        if reported != derived[zone]:
            errors.append(
                IssueTemplates.ZONE_USAGE_MISMATCH.format(
                    zone=zone.value, reported=reported, derived=derived[zone]
                )
            )
    usage_sum = sum(result.zone_usage.values())
    if usage_sum != result.total_units_used:
        errors.append(
            IssueTemplates.TOTAL_MISMATCH.format(derived=usage_sum, reported=result.total_units_used)
        )

    for zone in CONTENT_ZONES:
        minimum = theme.zone(zone).min_units
        used = result.zone_usage.get(zone, 0)
        if used < minimum:
            warnings.append(
                IssueTemplates.ZONE_BELOW_MINIMUM.format(zone=zone.value, used=used, minimum=minimum)
            )

    detailed = [exp for exp in experiences if exp.format is ExperienceFormat.DETAILED]
    if len(detailed) < theme.rules.min_detailed_experiences:
        warnings.append(
            IssueTemplates.FEW_DETAILED.format(
                count=len(detailed), minimum=theme.rules.min_detailed_experiences
            )
        )

    for position, (current, following) in enumerate(zip(experiences, experiences[1:])):
        first, second = current.relevance_score, following.relevance_score
        if first is not None and second is not None and first < second:
            warnings.append(
                IssueTemplates.RELEVANCE_ORDER.format(first=first, second=second, position=position)
            )
            break

    for exp in detailed:
        if not exp.context:
            warnings.append(IssueTemplates.DETAILED_WITHOUT_CONTEXT.format(role=exp.role))
        if len(exp.achievements) < MIN_DETAILED_ACHIEVEMENTS:
            warnings.append(
                IssueTemplates.DETAILED_FEW_ACHIEVEMENTS.format(
                    role=exp.role, count=len(exp.achievements)
                )
            )

    if not result.content.skills:
        warnings.append(IssueTemplates.NO_SKILLS)
    if not result.content.formations:
        warnings.append(IssueTemplates.NO_FORMATION)

    return FitValidation(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def check_overflow(total_units: int, theme: Theme, pages: int) -> FitValidation:
    """
    Check a unit total against the page ceiling.

    Pass the total with margins included for a whole-page view. Utilization above
    95% of the ceiling is a warning: small rendering variations may overflow.
    """
    errors = []
    warnings = []

    capacity = theme.page_capacity(pages)
    if total_units > capacity:
        errors.append(
            IssueTemplates.CONTENT_OVERFLOW.format(total=total_units, capacity=capacity, pages=pages)
        )

    utilization = total_units / capacity * 100 if capacity else 0.0
    if utilization > HIGH_UTILIZATION_PERCENT:
        warnings.append(IssueTemplates.HIGH_UTILIZATION.format(percent=utilization))

    return FitValidation(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
