"""Unit tests for the content unit cost model."""

import pytest

from cvfit.contexts.layout.content_units import (
    CONTENT_UNITS_REFERENCE,
    EXPERIENCE_TIERS,
    ContentUnitType,
    ExperienceFormat,
    SummaryFormat,
    best_format_for_remaining,
    cost,
    experience_cost,
    fits,
    max_items_in_capacity,
    next_tier,
    summary_cost,
    tier_rank,
)


@pytest.mark.unit
def test_every_unit_type_has_a_cost():
    """The reference table is total over ContentUnitType."""
    assert set(CONTENT_UNITS_REFERENCE) == set(ContentUnitType)
    assert all(cost(unit_type) > 0 for unit_type in ContentUnitType)


@pytest.mark.unit
def test_reference_table_is_read_only():
    with pytest.raises(TypeError):
        CONTENT_UNITS_REFERENCE[ContentUnitType.SKILL_TAG] = None


@pytest.mark.unit
@pytest.mark.parametrize(
    "unit_type,expected",
    [
        (ContentUnitType.HEADER_WITH_PHOTO, 20),
        (ContentUnitType.SUMMARY_ELEVATOR, 12),
        (ContentUnitType.EXPERIENCE_DETAILED, 22),
        (ContentUnitType.EXPERIENCE_MINIMAL, 4),
        (ContentUnitType.SKILL_TAG, 1),
        (ContentUnitType.CLIENT_REFERENCE, 2),
        (ContentUnitType.FOOTER, 5),
    ],
)
def test_known_costs(unit_type, expected):
    assert cost(unit_type) == expected


@pytest.mark.unit
def test_experience_tiers_strictly_decrease_in_cost():
    costs = [experience_cost(fmt) for fmt in EXPERIENCE_TIERS]
    assert costs == sorted(costs, reverse=True)
    assert len(set(costs)) == len(costs)


@pytest.mark.unit
def test_summary_tiers_strictly_decrease_in_cost():
    assert (
        summary_cost(SummaryFormat.ELEVATOR)
        > summary_cost(SummaryFormat.STANDARD)
        > summary_cost(SummaryFormat.SHORT)
    )


@pytest.mark.unit
def test_next_tier_walks_down_to_minimal():
    assert next_tier(ExperienceFormat.DETAILED) is ExperienceFormat.STANDARD
    assert next_tier(ExperienceFormat.STANDARD) is ExperienceFormat.COMPACT
    assert next_tier(ExperienceFormat.COMPACT) is ExperienceFormat.MINIMAL
    assert next_tier(ExperienceFormat.MINIMAL) is None


@pytest.mark.unit
def test_tier_rank_orders_richest_first():
    assert tier_rank(ExperienceFormat.DETAILED) == 0
    assert tier_rank(ExperienceFormat.MINIMAL) == len(EXPERIENCE_TIERS) - 1


@pytest.mark.unit
@pytest.mark.parametrize(
    "remaining,expected",
    [
        (100, ExperienceFormat.DETAILED),
        (22, ExperienceFormat.DETAILED),
        (21, ExperienceFormat.STANDARD),
        (16, ExperienceFormat.STANDARD),
        (14, ExperienceFormat.COMPACT),
        (8, ExperienceFormat.COMPACT),
        (4, ExperienceFormat.MINIMAL),
        (3, None),
        (0, None),
    ],
)
def test_best_format_for_remaining(remaining, expected):
    assert best_format_for_remaining(remaining) is expected


@pytest.mark.unit
def test_fits():
    assert fits(ContentUnitType.CERTIFICATION, 3)
    assert not fits(ContentUnitType.CERTIFICATION, 2)


@pytest.mark.unit
@pytest.mark.parametrize(
    "capacity,expected",
    [(9, 3), (10, 3), (2, 0), (0, 0), (-6, 0)],
)
def test_max_items_in_capacity(capacity, expected):
    assert max_items_in_capacity(ContentUnitType.CERTIFICATION, capacity) == expected
