"""
Experience allocation: the greedy degradation heart of the engine.

Experiences arrive ordered most relevant first. The first
``min_detailed_experiences`` entries form the protected floor. Fitting runs in
these phases, each stopping as soon as the zone fits:

1. Initial formats: everything starts detailed, except experiences that ended
   more than ``compact_after_years`` ago, which start compact. Floor entries
   always start detailed.
2. Degradation: step entries below the floor down one tier at a time, the
   least relevant first, until they are all minimal.
3. Exclusion: drop entries below the floor from the back. The floor stays
   detailed whenever it fits on its own.
4. Floor: only when the floor alone overflows are its entries degraded
   back-to-front, then dropped from the back.

The sequence of steps does not depend on capacity, only on how many of them
are needed. A smaller zone therefore never yields a more detailed format for
any retained experience, nor retains an experience a larger zone dropped.
"""

from datetime import date
from typing import List, Sequence

from cvfit.contexts.fitting.content import (
    ActionKind,
    Experience,
    FitAction,
    FittedExperience,
    ZoneAllocation,
)
from cvfit.contexts.fitting.text import select_achievements
from cvfit.contexts.layout.content_units import (
    EXPERIENCE_TIERS,
    ExperienceFormat,
    experience_cost,
    next_tier,
)
from cvfit.contexts.layout.zones import AdaptiveRules, ZoneName
from cvfit.utils.dates import format_date_range, years_since

# Each entry can be stepped down at most (tiers - 1) times before it is minimal
MAX_DEGRADATION_STEPS_PER_ENTRY = len(EXPERIENCE_TIERS) - 1

NO_EXPERIENCES_WARNING = "No experiences available to fit"


def initial_formats(
    experiences: Sequence[Experience], rules: AdaptiveRules, as_of: date
) -> List[ExperienceFormat]:
    """Phase 1: starting format per experience, before any capacity pressure."""
    formats = []
    for index, exp in enumerate(experiences):
        protected = index < rules.min_detailed_experiences
        if not protected and years_since(exp.end_date, as_of) > rules.compact_after_years:
            formats.append(ExperienceFormat.COMPACT)
        else:
            formats.append(ExperienceFormat.DETAILED)
    return formats


def total_cost(formats: Sequence[ExperienceFormat]) -> int:
    return sum(experience_cost(fmt) for fmt in formats)


def degrade_to_fit(
    experiences: Sequence[Experience],
    formats: Sequence[ExperienceFormat],
    capacity: int,
    candidates: range,
):
    """
    Step formats down one tier at a time until they fit or every candidate is minimal.

    Args:
        experiences: Experiences matching ``formats``
        formats: Current format per experience
        capacity: Experiences zone capacity in units
        candidates: Indices that may be degraded, tried last one first

    Returns:
        Tuple of (new formats, degradation actions)
    """
    formats = list(formats)
    actions = []
    max_steps = MAX_DEGRADATION_STEPS_PER_ENTRY * len(candidates)

    for _ in range(max_steps):
        if total_cost(formats) <= capacity:
            break
        index = next(
            (i for i in reversed(candidates) if formats[i] is not ExperienceFormat.MINIMAL), None
        )
        if index is None:
            break

        previous = formats[index]
        formats[index] = next_tier(previous)
        actions.append(
            FitAction(
                kind=ActionKind.DEGRADED,
                zone=ZoneName.EXPERIENCES,
                message=(
                    f"Experience {experiences[index].label} condensed "
                    f"from {previous.value} to {formats[index].value}"
                ),
            )
        )

    return formats, actions


def exclude_to_fit(
    experiences: Sequence[Experience],
    formats: Sequence[ExperienceFormat],
    capacity: int,
    keep: int = 0,
):
    """
    Drop experiences from the back until the rest fits, never going below ``keep`` entries.

    Returns:
        Tuple of (retained experiences, their formats, exclusion actions)
    """
    retained = list(experiences)
    formats = list(formats)
    actions = []

    while len(formats) > keep and total_cost(formats) > capacity:
        dropped = retained.pop()
        formats.pop()
        actions.append(
            FitAction(
                kind=ActionKind.EXCLUDED,
                zone=ZoneName.EXPERIENCES,
                message=f"Experience {dropped.label} excluded (no space)",
            )
        )

    return retained, formats, actions


def render_experience(exp: Experience, fmt: ExperienceFormat, rules: AdaptiveRules) -> FittedExperience:
    """Apply a format's transformation rule to one experience."""
    return FittedExperience(
        id=exp.id,
        format=fmt,
        units_used=experience_cost(fmt),
        role=exp.role,
        employer=exp.employer,
        dates=format_date_range(exp.start_date, exp.end_date),
        relevance_score=exp.relevance_score,
        context=exp.context if fmt is ExperienceFormat.DETAILED else None,
        achievements=select_achievements(exp.achievements, fmt, rules.max_bullet_points_per_exp),
        technologies=exp.technologies,
    )


def allocate_experiences(
    experiences: Sequence[Experience], capacity: int, rules: AdaptiveRules, as_of: date
) -> ZoneAllocation:
    """
    Fit relevance-ordered experiences into the experiences zone.

    Args:
        experiences: Experiences, most relevant first
        capacity: Experiences zone capacity in units
        rules: Theme adaptive rules
        as_of: Reference date for experience ages

    Returns:
        ZoneAllocation of FittedExperience items with degradation/exclusion actions
    """
    if not experiences:
        return ZoneAllocation(
            zone=ZoneName.EXPERIENCES,
            actions=(
                FitAction(
                    kind=ActionKind.MISSING,
                    zone=ZoneName.EXPERIENCES,
                    message=NO_EXPERIENCES_WARNING,
                    compression=False,
                ),
            ),
        )

    floor = min(rules.min_detailed_experiences, len(experiences))
    formats = initial_formats(experiences, rules, as_of)
    actions = []

    formats, steps = degrade_to_fit(experiences, formats, capacity, range(floor, len(formats)))
    actions += steps
    retained, formats, steps = exclude_to_fit(experiences, formats, capacity, keep=floor)
    actions += steps

    # Floor alone overflows
    formats, steps = degrade_to_fit(retained, formats, capacity, range(floor))
    actions += steps
    retained, formats, steps = exclude_to_fit(retained, formats, capacity)
    actions += steps

    items = tuple(render_experience(exp, fmt, rules) for exp, fmt in zip(retained, formats))
    return ZoneAllocation(
        zone=ZoneName.EXPERIENCES,
        items=items,
        units_used=sum(item.units_used for item in items),
        actions=tuple(actions),
    )
