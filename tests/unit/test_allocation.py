"""Unit tests for the header, summary and flat-list zone steps."""

import pytest

from cvfit.contexts.fitting.allocation import (
    allocate_clients,
    allocate_flat_list,
    allocate_header,
    allocate_skills,
    allocate_summary,
    normalize_name,
    shrink_summary,
)
from cvfit.contexts.fitting.content import (
    ActionKind,
    Certification,
    FitPreferences,
    Profile,
    Project,
)
from cvfit.contexts.fitting.text import word_count
from cvfit.contexts.layout.content_units import ContentUnitType, HeaderFormat, SummaryFormat
from cvfit.contexts.layout.zones import SkillsDisplayMode, ZoneName

LONG_PITCH = " ".join(f"word{i}" for i in range(500))


@pytest.fixture
def full_profile():
    return Profile(
        first_name="Jane",
        last_name="Doe",
        title="Data Engineer",
        email="jane@example.com",
        phone="+33 6 00 00 00 00",
        location="Lyon",
        photo_url="https://example.com/jane.jpg",
        summary=LONG_PITCH,
    )


# =============================================================================
# Header
# =============================================================================


@pytest.mark.unit
def test_header_with_photo_when_requested_and_room(full_profile):
    allocation = allocate_header(full_profile, 20, FitPreferences(include_photo=True))

    assert allocation.format is HeaderFormat.WITH_PHOTO
    assert allocation.units_used == 20
    assert allocation.items[0].photo_url == full_profile.photo_url
    assert allocation.actions == ()


@pytest.mark.unit
def test_header_photo_degraded_when_zone_too_small(full_profile):
    allocation = allocate_header(full_profile, 12, FitPreferences(include_photo=True))

    assert allocation.format is HeaderFormat.WITH_CONTACTS
    assert allocation.items[0].photo_url is None
    assert len(allocation.actions) == 1
    action = allocation.actions[0]
    assert action.kind is ActionKind.DEGRADED
    assert action.compression
    assert action.message == "Photo omitted: header zone holds 12 units, photo header needs 20"


@pytest.mark.unit
def test_header_without_photo_url_never_uses_photo_format():
    profile = Profile(first_name="Ann", last_name="Roe", email="ann@example.com")
    allocation = allocate_header(profile, 40, FitPreferences(include_photo=True))

    assert allocation.format is HeaderFormat.WITH_CONTACTS
    assert allocation.actions == ()


@pytest.mark.unit
def test_header_photo_not_requested(full_profile):
    allocation = allocate_header(full_profile, 40, FitPreferences())

    assert allocation.format is HeaderFormat.WITH_CONTACTS
    assert allocation.actions == ()


@pytest.mark.unit
def test_header_is_always_placed(bare_profile, full_profile):
    allocation = allocate_header(bare_profile, 0, FitPreferences())
    assert allocation.format is HeaderFormat.MINIMAL
    assert allocation.units_used == 8
    assert allocation.items[0].full_name == "Sam Lee"

    allocation = allocate_header(full_profile, 8, FitPreferences())
    assert allocation.format is HeaderFormat.MINIMAL
    assert allocation.items[0].email is None


# =============================================================================
# Summary
# =============================================================================


@pytest.mark.unit
def test_summary_elevator_keeps_full_text(full_profile):
    allocation = allocate_summary(full_profile, 12)

    assert allocation.format is SummaryFormat.ELEVATOR
    assert allocation.items[0].text == LONG_PITCH
    assert allocation.actions == ()


@pytest.mark.unit
def test_summary_truncated_to_short(full_profile):
    allocation = allocate_summary(full_profile, 5)

    assert allocation.format is SummaryFormat.SHORT
    assert allocation.units_used == 5
    text = allocation.items[0].text
    assert word_count(text) <= 40
    assert text.endswith("...")
    assert len(allocation.actions) == 1
    assert allocation.actions[0].kind is ActionKind.TRUNCATED
    assert "short format (40 words max" in allocation.actions[0].message


@pytest.mark.unit
def test_summary_excluded_when_nothing_fits(full_profile):
    allocation = allocate_summary(full_profile, 4)

    assert allocation.items == ()
    assert allocation.units_used == 0
    assert allocation.actions[0].kind is ActionKind.EXCLUDED
    assert allocation.actions[0].compression


@pytest.mark.unit
def test_missing_summary_is_silent(bare_profile):
    allocation = allocate_summary(bare_profile, 12)

    assert allocation.items == ()
    assert allocation.actions == ()


@pytest.mark.unit
def test_shrink_summary_steps_one_tier(full_profile):
    shrunk = shrink_summary(allocate_summary(full_profile, 12), full_profile)

    assert shrunk.format is SummaryFormat.STANDARD
    assert word_count(shrunk.items[0].text) == 70
    assert "page budget exceeded" in shrunk.actions[-1].message

    gone = shrink_summary(allocate_summary(full_profile, 5), full_profile)
    assert gone.items == ()
    assert len(gone.actions) == 2


@pytest.mark.unit
def test_shrink_summary_without_summary_is_a_no_op(bare_profile):
    allocation = allocate_summary(bare_profile, 12)
    assert shrink_summary(allocation, bare_profile) is allocation


# =============================================================================
# Flat lists
# =============================================================================


@pytest.mark.unit
def test_flat_list_keeps_leading_items_in_order():
    certifications = [Certification(name=f"Cert {i}") for i in range(3)]
    allocation = allocate_flat_list(
        ZoneName.CERTIFICATIONS, certifications, ContentUnitType.CERTIFICATION, 7
    )

    assert [c.name for c in allocation.items] == ["Cert 0", "Cert 1"]
    assert allocation.units_used == 6
    assert allocation.actions[0].message == (
        "Certifications truncated: kept 2 of 3, 1 certification excluded (no space)"
    )
    assert allocation.actions[0].compression


@pytest.mark.unit
def test_disabled_zone_omits_without_compression():
    allocation = allocate_flat_list(
        ZoneName.PROJECTS, [Project(name="tool")], ContentUnitType.PROJECT_COMPACT, 0
    )

    assert allocation.items == ()
    assert allocation.actions[0].message == "Theme has no projects zone: 1 project omitted"
    assert not allocation.actions[0].compression


@pytest.mark.unit
def test_empty_flat_list():
    allocation = allocate_flat_list(ZoneName.LANGUAGES, [], ContentUnitType.LANGUAGE, 0)
    assert allocation.items == ()
    assert allocation.actions == ()


@pytest.mark.unit
@pytest.mark.parametrize(
    "mode,capacity,expected_display,expected_units",
    [
        (SkillsDisplayMode.AUTO, 10, SkillsDisplayMode.FULL, 10),
        (SkillsDisplayMode.AUTO, 9, SkillsDisplayMode.COMPACT, 5),
        (SkillsDisplayMode.COMPACT, 40, SkillsDisplayMode.COMPACT, 5),
        (SkillsDisplayMode.FULL, 6, SkillsDisplayMode.FULL, 6),
    ],
)
def test_skills_display_modes(mode, capacity, expected_display, expected_units):
    skills = ["Python", "SQL", "Spark", "Kafka", "dbt"]
    allocation = allocate_skills(skills, capacity, mode)

    assert allocation.format is expected_display
    assert allocation.units_used == expected_units


# =============================================================================
# Clients
# =============================================================================


@pytest.mark.unit
def test_normalize_name():
    assert normalize_name("  Acme,  Corp. ") == "acme corp"
    assert normalize_name("AT&T") == "at&t"


@pytest.mark.unit
def test_clients_skip_own_employers():
    allocation = allocate_clients(["Acme Corp.", "BNP Paribas"], ["acme corp"], 10)
    assert allocation.items == ("BNP Paribas",)


@pytest.mark.unit
def test_clients_fall_back_when_all_are_employers():
    allocation = allocate_clients(["Acme", "Globex"], ["ACME", "globex"], 10)
    assert allocation.items == ("Acme", "Globex")
