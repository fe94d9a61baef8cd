"""Unit tests for the allocation engine pipeline."""

import json

import pytest

from cvfit.contexts.fitting.content import (
    ActionKind,
    FitPreferences,
    Profile,
    ResumeContent,
)
from cvfit.contexts.fitting.engine import (
    fit_content,
    fit_multi_theme,
    fit_to_theme,
    page_count,
)
from cvfit.contexts.layout.content_units import (
    ExperienceFormat,
    HeaderFormat,
    SummaryFormat,
)
from cvfit.contexts.layout.zones import CONTENT_ZONES, AdaptiveRules, SkillsDisplayMode, ZoneName


@pytest.mark.unit
def test_floor_keeps_most_relevant_detailed(make_theme, make_experience, bare_profile, as_of):
    theme = make_theme(header=8, experiences=52, rules=AdaptiveRules(min_detailed_experiences=2))
    content = ResumeContent(
        profile=bare_profile, experiences=tuple(make_experience(i) for i in range(3))
    )

    result = fit_to_theme(content, theme, as_of=as_of)

    formats = [exp.format for exp in result.experiences]
    assert formats[:2] == [ExperienceFormat.DETAILED, ExperienceFormat.DETAILED]
    assert formats[2] is ExperienceFormat.COMPACT


@pytest.mark.unit
def test_floor_survives_long_experience_lists(make_theme, make_experience, bare_profile, as_of):
    theme = make_theme(header=8, experiences=50, rules=AdaptiveRules(min_detailed_experiences=2))
    content = ResumeContent(
        profile=bare_profile, experiences=tuple(make_experience(i) for i in range(10))
    )

    result = fit_to_theme(content, theme, as_of=as_of)

    formats = [exp.format for exp in result.experiences]
    assert formats[:2] == [ExperienceFormat.DETAILED, ExperienceFormat.DETAILED]
    assert result.zone_usage[ZoneName.EXPERIENCES] <= 50


@pytest.mark.unit
def test_fitting_is_deterministic(sample_content, as_of):
    first = fit_content(sample_content, "modern", as_of=as_of)
    second = fit_content(sample_content, "modern", as_of=as_of)

    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


@pytest.mark.unit
def test_photo_header_in_spacious_theme(sample_content, as_of):
    result = fit_content(sample_content, "modern_spacious", FitPreferences(include_photo=True), as_of)

    assert result.content.header.format is HeaderFormat.WITH_PHOTO
    assert result.zone_usage[ZoneName.HEADER] == 20


@pytest.mark.unit
def test_photo_degraded_in_classic_theme(sample_content, as_of):
    result = fit_content(sample_content, "classic", FitPreferences(include_photo=True), as_of)

    assert result.content.header.format is HeaderFormat.WITH_CONTACTS
    photo_actions = [a for a in result.actions if a.zone is ZoneName.HEADER]
    assert len(photo_actions) == 1
    assert photo_actions[0].kind is ActionKind.DEGRADED
    assert result.compression_level_applied == 2


@pytest.mark.unit
def test_long_summary_is_truncated_into_short_zone(make_theme, as_of):
    pitch = " ".join(f"word{i}" for i in range(500))
    content = ResumeContent(profile=Profile(first_name="Sam", last_name="Lee", summary=pitch))
    theme = make_theme(header=8, summary=5)

    result = fit_to_theme(content, theme, as_of=as_of)

    summary = result.content.summary
    assert summary.format is SummaryFormat.SHORT
    assert len(summary.text.split()) <= 40
    assert summary.text.endswith("...")
    assert result.compression_level_applied == 1


@pytest.mark.unit
def test_no_experiences_is_a_warning_not_compression(bare_profile, make_theme, as_of):
    result = fit_to_theme(ResumeContent(profile=bare_profile), make_theme(header=8), as_of=as_of)

    assert result.experiences == ()
    assert result.compression_level_applied == 0
    assert [a.kind for a in result.actions] == [ActionKind.MISSING]
    assert result.warnings == ("No experiences available to fit",)


@pytest.mark.unit
@pytest.mark.parametrize("theme_id", ["classic", "modern_spacious", "compact_ats"])
def test_zone_usage_respects_capacities(sample_content, registry, theme_id, as_of):
    result = fit_content(sample_content, theme_id, as_of=as_of)
    theme = registry.find(theme_id)

    assert ZoneName.MARGINS not in result.zone_usage
    assert list(result.zone_usage) == list(CONTENT_ZONES)
    assert sum(result.zone_usage.values()) == result.total_units_used
    for zone, used in result.zone_usage.items():
        if zone is not ZoneName.HEADER:
            assert used <= theme.capacity(zone)
    assert result.compression_level_applied <= len(result.warnings)


@pytest.mark.unit
def test_global_overflow_shrinks_summary_then_reports(make_theme, make_experience, as_of):
    theme = make_theme(total_height_units=50, header=8, summary=12, experiences=60)
    profile = Profile(first_name="Sam", last_name="Lee", summary="Builds reliable data platforms.")
    content = ResumeContent(profile=profile, experiences=(make_experience(0), make_experience(1)))

    result = fit_to_theme(content, theme, as_of=as_of)

    assert result.content.summary.format is SummaryFormat.STANDARD
    assert result.total_units_used == 60
    assert result.pages == 1
    overflow = result.actions[-1]
    assert overflow.kind is ActionKind.OVERFLOW
    assert overflow.zone is None
    assert not overflow.compression
    assert "over by 10 units" in overflow.message
    assert result.compression_level_applied == 1


@pytest.mark.unit
def test_shrinking_summary_can_resolve_overflow(make_theme, make_experience, as_of):
    theme = make_theme(total_height_units=60, header=8, summary=12, experiences=60)
    profile = Profile(first_name="Sam", last_name="Lee", summary="Builds reliable data platforms.")
    content = ResumeContent(profile=profile, experiences=(make_experience(0), make_experience(1)))

    result = fit_to_theme(content, theme, as_of=as_of)

    assert result.content.summary.format is SummaryFormat.STANDARD
    assert result.total_units_used == 60
    assert result.compression_level_applied == 1
    assert all(a.kind is not ActionKind.OVERFLOW for a in result.actions)


@pytest.mark.unit
def test_multi_page_when_threshold_exceeded(make_theme, make_experience, bare_profile, as_of):
    theme = make_theme(
        total_height_units=100,
        supports_multi_page=True,
        multi_page_threshold=90,
        max_pages=2,
        header=8,
        experiences=200,
    )
    content = ResumeContent(
        profile=bare_profile, experiences=tuple(make_experience(i) for i in range(5))
    )

    result = fit_to_theme(content, theme, as_of=as_of)

    assert result.pages == 2
    assert result.total_units_used == 118
    assert all(a.kind is not ActionKind.OVERFLOW for a in result.actions)


@pytest.mark.unit
def test_page_count_single_page_theme(make_theme):
    theme = make_theme(total_height_units=100, multi_page_threshold=10)
    assert page_count(theme, 500) == 1


@pytest.mark.unit
def test_unknown_theme_falls_back_to_default(sample_content, as_of):
    result = fit_content(sample_content, "nope", as_of=as_of)

    assert result.theme_id == "classic"
    assert result.requested_theme_id == "nope"
    assert result.fell_back


@pytest.mark.unit
def test_alias_is_not_a_fallback(sample_content, as_of):
    result = fit_content(sample_content, "ats", as_of=as_of)

    assert result.theme_id == "compact_ats"
    assert result.requested_theme_id == "ats"
    assert not result.fell_back


@pytest.mark.unit
def test_clients_exclude_own_employers(sample_content, as_of):
    result = fit_content(sample_content, "classic", as_of=as_of)
    assert result.content.clients == ("BNP Paribas", "Airbus", "Renault")


@pytest.mark.unit
def test_interests_preference(sample_content, as_of):
    with_interests = fit_content(sample_content, "modern_spacious", as_of=as_of)
    assert with_interests.content.interests == ("Trail running", "Open-source data tooling")

    without = fit_content(
        sample_content, "modern_spacious", FitPreferences(include_interests=False), as_of
    )
    assert without.content.interests == ()
    assert without.zone_usage[ZoneName.INTERESTS] == 0
    assert without.total_units_used == with_interests.total_units_used - 4


@pytest.mark.unit
def test_skills_display_follows_theme(sample_content, as_of):
    classic = fit_content(sample_content, "classic", as_of=as_of)
    assert classic.content.skills_display is SkillsDisplayMode.COMPACT
    assert classic.zone_usage[ZoneName.SKILLS] == 12

    ats = fit_content(sample_content, "compact_ats", as_of=as_of)
    assert ats.content.skills_display is SkillsDisplayMode.FULL
    assert ats.zone_usage[ZoneName.SKILLS] == 24


@pytest.mark.unit
def test_fit_multi_theme_keys_by_requested_id(sample_content, as_of):
    results = fit_multi_theme(sample_content, ["classic", "modern", "nope"], as_of=as_of)

    assert list(results) == ["classic", "modern", "nope"]
    assert results["modern"].theme_id == "modern_spacious"
    assert results["nope"].fell_back


@pytest.mark.unit
def test_fit_content_accepts_plain_data(sample_data, sample_content, as_of):
    from_dict = fit_content(sample_data, "classic", as_of=as_of)
    from_content = fit_content(sample_content, "classic", as_of=as_of)

    assert from_dict.to_dict() == from_content.to_dict()


@pytest.mark.unit
def test_to_dict_is_json_serializable(sample_content, as_of):
    data = fit_content(sample_content, "classic", as_of=as_of).to_dict()
    decoded = json.loads(json.dumps(data))

    assert decoded["theme_id"] == "classic"
    assert decoded["zone_usage"]["experiences"] == 96
    assert decoded["content"]["header"]["format"] == "with_contacts"
