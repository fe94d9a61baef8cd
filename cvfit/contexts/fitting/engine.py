"""
Allocation engine: fits résumé content into a theme's page budget.

The engine is a pipeline of pure zone steps (header, summary, experiences, then
the flat lists), followed by page-count selection and a global overflow pass.
Each step returns a ZoneAllocation; warnings and the compression level are
derived from the ordered actions those steps report.

Capacity problems never raise. The engine always returns a best-effort result
whose warnings explain everything that was shortened or left out.

Examples:
    >>> content = ResumeContent.from_dict(data)
    >>> result = fit_content(content, "modern")
    >>> result.theme_id
    'modern_spacious'
    >>> result.experience_formats
    {'exp_0': <ExperienceFormat.DETAILED: 'detailed'>, ...}
"""

from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from cvfit.contexts.fitting.allocation import (
    allocate_clients,
    allocate_flat_list,
    allocate_header,
    allocate_skills,
    allocate_summary,
    shrink_summary,
)
from cvfit.contexts.fitting.content import (
    ActionKind,
    FitAction,
    FitPreferences,
    FittedContent,
    FittingResult,
    ResumeContent,
    ZoneAllocation,
)
from cvfit.contexts.fitting.experiences import allocate_experiences
from cvfit.contexts.fitting.logger import log_fit_result, log_fit_start, log_zone_allocation
from cvfit.contexts.layout.content_units import ContentUnitType
from cvfit.contexts.layout.themes import Theme, ThemeRegistry, get_registry
from cvfit.contexts.layout.zones import SkillsDisplayMode, ZoneName
from cvfit.utils.dates import today


def page_count(theme: Theme, content_units: int) -> int:
    """One page, or two when the theme allows it and content plus margins passes the threshold."""
    if (
        theme.page.supports_multi_page
        and theme.page.max_pages > 1
        and content_units + theme.margin_units > theme.page.multi_page_threshold
    ):
        return 2
    return 1


def _allocate_zones(
    content: ResumeContent, theme: Theme, preferences: FitPreferences, as_of: date
) -> Dict[ZoneName, ZoneAllocation]:
    """Run every zone step independently against its own zone capacity."""
    capacity = theme.capacity
    rules = theme.rules

    allocations = [
        allocate_header(content.profile, capacity(ZoneName.HEADER), preferences),
        allocate_summary(content.profile, capacity(ZoneName.SUMMARY)),
        allocate_experiences(content.experiences, capacity(ZoneName.EXPERIENCES), rules, as_of),
        allocate_skills(content.skills, capacity(ZoneName.SKILLS), rules.skills_display_mode),
        allocate_flat_list(
            ZoneName.FORMATION,
            content.formations,
            ContentUnitType.FORMATION_STANDARD,
            capacity(ZoneName.FORMATION),
        ),
        allocate_flat_list(
            ZoneName.PROJECTS,
            content.projects,
            ContentUnitType.PROJECT_COMPACT,
            capacity(ZoneName.PROJECTS),
        ),
        allocate_flat_list(
            ZoneName.CERTIFICATIONS,
            content.certifications,
            ContentUnitType.CERTIFICATION,
            capacity(ZoneName.CERTIFICATIONS),
        ),
        allocate_flat_list(
            ZoneName.LANGUAGES,
            content.languages,
            ContentUnitType.LANGUAGE,
            capacity(ZoneName.LANGUAGES),
        ),
        allocate_clients(
            content.clients,
            [exp.employer for exp in content.experiences],
            capacity(ZoneName.CLIENTS),
        ),
    ]
    if preferences.include_interests:
        allocations.append(
            allocate_flat_list(
                ZoneName.INTERESTS,
                content.interests,
                ContentUnitType.INTEREST_ITEM,
                capacity(ZoneName.INTERESTS),
            )
        )

    return {allocation.zone: allocation for allocation in allocations}


def _total(allocations: Mapping[ZoneName, ZoneAllocation]) -> int:
    return sum(allocation.units_used for allocation in allocations.values())


def _build_content(allocations: Mapping[ZoneName, ZoneAllocation]) -> FittedContent:
    def items(zone: ZoneName) -> tuple:
        allocation = allocations.get(zone)
        return allocation.items if allocation else ()

    summary = items(ZoneName.SUMMARY)
    skills = allocations[ZoneName.SKILLS]
    return FittedContent(
        header=items(ZoneName.HEADER)[0],
        summary=summary[0] if summary else None,
        experiences=items(ZoneName.EXPERIENCES),
        skills=skills.items,
        skills_display=skills.format or SkillsDisplayMode.FULL,
        formations=items(ZoneName.FORMATION),
        projects=items(ZoneName.PROJECTS),
        certifications=items(ZoneName.CERTIFICATIONS),
        languages=items(ZoneName.LANGUAGES),
        clients=items(ZoneName.CLIENTS),
        interests=items(ZoneName.INTERESTS),
    )


def fit_to_theme(
    content: ResumeContent,
    theme: Theme,
    preferences: Optional[FitPreferences] = None,
    as_of: Optional[date] = None,
    requested_theme_id: Optional[str] = None,
    fell_back: bool = False,
) -> FittingResult:
    """
    Fit content into a resolved theme.

    Args:
        content: Relevance-ordered résumé content
        theme: Target theme
        preferences: User preferences (defaults to FitPreferences())
        as_of: Reference date for experience ages (defaults to today)
        requested_theme_id: Theme id the caller asked for, if it differs from theme.id
        fell_back: Whether theme replaces an unknown requested id

    Returns:
        FittingResult with fitted content, zone usage, pages and warnings
    """
    preferences = preferences or FitPreferences()
    as_of = as_of or today()
    log_fit_start(theme.id, len(content.experiences), as_of)

    allocations = _allocate_zones(content, theme, preferences, as_of)
    total = _total(allocations)
    pages = page_count(theme, total)
    budget = theme.content_budget(pages)

    overflow_actions = []
    if total > budget:
        allocations[ZoneName.SUMMARY] = shrink_summary(
            allocations[ZoneName.SUMMARY], content.profile
        )
        total = _total(allocations)
        if total > budget:
            overflow_actions.append(
                FitAction(
                    kind=ActionKind.OVERFLOW,
                    zone=None,
                    message=(
                        f"Content overflow: {total} units used, {budget} available on "
                        f"{pages} page(s) (over by {total - budget} units)"
                    ),
                    compression=False,
                )
            )

    for allocation in allocations.values():
        log_zone_allocation(allocation)

    actions = tuple(
        action for allocation in allocations.values() for action in allocation.actions
    ) + tuple(overflow_actions)

    result = FittingResult(
        theme_id=theme.id,
        requested_theme_id=requested_theme_id or theme.id,
        content=_build_content(allocations),
        zone_usage={zone: allocation.units_used for zone, allocation in allocations.items()},
        total_units_used=total,
        pages=pages,
        compression_level_applied=sum(1 for action in actions if action.compression),
        actions=actions,
        warnings=tuple(action.message for action in actions),
        fell_back=fell_back,
    )
    log_fit_result(result)
    return result


def fit_content(
    content: Union[ResumeContent, Mapping[str, Any]],
    theme_id: Optional[str] = None,
    preferences: Optional[FitPreferences] = None,
    as_of: Optional[date] = None,
    registry: Optional[ThemeRegistry] = None,
) -> FittingResult:
    """
    Fit content into the theme named ``theme_id``.

    Unknown theme ids fall back to the registry's default theme; the result's
    ``requested_theme_id`` keeps what was asked for.

    Args:
        content: ResumeContent, or plain data accepted by ResumeContent.from_dict
        theme_id: Theme id or alias (None selects the default theme)
        preferences: User preferences
        as_of: Reference date for experience ages (defaults to today)
        registry: Theme registry (defaults to the process-wide registry)
    """
    if not isinstance(content, ResumeContent):
        content = ResumeContent.from_dict(content)
    registry = registry or get_registry()
    resolution = registry.resolve(theme_id)
    return fit_to_theme(
        content,
        resolution.theme,
        preferences=preferences,
        as_of=as_of,
        requested_theme_id=resolution.requested_id,
        fell_back=resolution.fell_back,
    )


def fit_multi_theme(
    content: Union[ResumeContent, Mapping[str, Any]],
    theme_ids: Iterable[str],
    preferences: Optional[FitPreferences] = None,
    as_of: Optional[date] = None,
    registry: Optional[ThemeRegistry] = None,
) -> Dict[str, FittingResult]:
    """One fitting result per requested theme id, keyed by the requested id."""
    if not isinstance(content, ResumeContent):
        content = ResumeContent.from_dict(content)
    as_of = as_of or today()
    return {
        theme_id: fit_content(content, theme_id, preferences, as_of, registry)
        for theme_id in theme_ids
    }
