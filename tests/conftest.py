"""Shared fixtures for cvfit tests."""

from datetime import date
from pathlib import Path

import pytest
from omegaconf import OmegaConf

from cvfit.contexts.fitting.content import Achievement, Experience, Profile, ResumeContent
from cvfit.contexts.layout.themes import Theme, get_registry
from cvfit.contexts.layout.zones import AdaptiveRules, PageConfig, Zone, ZoneName

FIXTURES_PATH = Path(__file__).parent / "fixtures"

# Reference date used by every fitting test so experience ages never drift
AS_OF = date(2025, 1, 1)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def registry():
    return get_registry()


@pytest.fixture
def sample_resume_path() -> Path:
    return FIXTURES_PATH / "sample_resume.yaml"


@pytest.fixture
def sample_data(sample_resume_path) -> dict:
    return OmegaConf.to_container(OmegaConf.load(sample_resume_path), resolve=True)


@pytest.fixture
def sample_content(sample_data) -> ResumeContent:
    return ResumeContent.from_dict(sample_data)


@pytest.fixture
def bare_profile() -> Profile:
    """Profile without contacts, photo or summary (always a minimal header)."""
    return Profile(first_name="Sam", last_name="Lee", title="Engineer")


@pytest.fixture
def make_experience():
    """Factory for recent, well-formed experiences."""

    def _make(index: int, relevance=None, end_date="present", achievements=3, context=True):
        return Experience(
            role=f"Role {index}",
            employer=f"Employer {index}",
            start_date="2020-01",
            end_date=end_date,
            context=f"Context {index}" if context else None,
            achievements=tuple(
                Achievement(description=f"Achievement {index}.{n}") for n in range(achievements)
            ),
            relevance_score=relevance,
            id=f"exp_{index}",
        )

    return _make


@pytest.fixture
def make_theme():
    """
    Factory for ad-hoc themes: zone capacities as keyword arguments, every other zone 0.

    Example:
        theme = make_theme(header=8, experiences=60, total_height_units=100)
    """

    def _make(
        theme_id: str = "test",
        total_height_units: int = 200,
        supports_multi_page: bool = False,
        multi_page_threshold: int = 999,
        max_pages: int = 1,
        rules: AdaptiveRules = None,
        min_units: dict = None,
        **capacities,
    ) -> Theme:
        min_units = min_units or {}
        zones = {
            zone: Zone(
                name=zone,
                capacity_units=capacities.get(zone.value, 0),
                min_units=min_units.get(zone.value, 0),
            )
            for zone in ZoneName
        }
        return Theme(
            id=theme_id,
            name=f"Test theme {theme_id}",
            description="Theme built for tests",
            page=PageConfig(
                total_height_units=total_height_units,
                supports_multi_page=supports_multi_page,
                multi_page_threshold=multi_page_threshold,
                max_pages=max_pages,
            ),
            zones=zones,
            rules=rules or AdaptiveRules(),
        )

    return _make
