"""
Reporting statistics for fitting results and A/B comparison between them.

Stats are read-only views over a FittingResult. They never feed back into the
allocation itself.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from cvfit.contexts.fitting.content import FittingResult
from cvfit.contexts.fitting.validator import HIGH_UTILIZATION_PERCENT, FitValidation
from cvfit.contexts.layout.content_units import EXPERIENCE_TIERS, ExperienceFormat
from cvfit.contexts.layout.themes import Theme
from cvfit.contexts.layout.zones import CONTENT_ZONES, ZoneName
from cvfit.utils.report_formatter import Column, TableFormatter


@dataclass(frozen=True)
class ZoneShare:
    units: int
    percentage: float


@dataclass(frozen=True)
class QualityIndicators:
    detailed_experiences_count: int
    total_experiences_count: int
    total_achievements_count: int
    avg_relevance_score: float


@dataclass(frozen=True)
class FitStats:
    """
    Summary statistics of one fitting result.

    Attributes:
        theme_id: Theme the result was fitted into
        total_units: Content units used
        pages: Page count
        utilization_rate: total_units as a percentage of total_height_units x pages
        zone_breakdown: Units per content zone and share of total_units
        experience_formats: Count of retained experiences per format
        quality: Experience-level quality indicators
        compression_level: Compression actions applied while fitting
    """

    theme_id: str
    total_units: int
    pages: int
    utilization_rate: float
    zone_breakdown: Dict[ZoneName, ZoneShare]
    experience_formats: Dict[ExperienceFormat, int]
    quality: QualityIndicators
    compression_level: int


@dataclass(frozen=True)
class FitDifferences:
    """Stats of A minus stats of B."""

    utilization_rate_diff: float
    experiences_count_diff: int
    detailed_count_diff: int
    avg_relevance_diff: float


@dataclass(frozen=True)
class FitComparison:
    stats_a: FitStats
    stats_b: FitStats
    differences: FitDifferences
    recommendation: str


def compute_stats(result: FittingResult, theme: Theme) -> FitStats:
    """Derive utilization, zone breakdown, format histogram and quality indicators."""
    total = result.total_units_used
    capacity = theme.page_capacity(result.pages)
    experiences = result.content.experiences

    zone_breakdown = {
        zone: ZoneShare(
            units=result.zone_usage.get(zone, 0),
            percentage=result.zone_usage.get(zone, 0) / total * 100 if total else 0.0,
        )
        for zone in CONTENT_ZONES
    }

    experience_formats = {fmt: 0 for fmt in EXPERIENCE_TIERS}
    for exp in experiences:
        experience_formats[exp.format] += 1

    scores = [exp.relevance_score for exp in experiences if exp.relevance_score is not None]
    quality = QualityIndicators(
        detailed_experiences_count=experience_formats[ExperienceFormat.DETAILED],
        total_experiences_count=len(experiences),
        total_achievements_count=sum(len(exp.achievements) for exp in experiences),
        avg_relevance_score=sum(scores) / len(scores) if scores else 0.0,
    )

    return FitStats(
        theme_id=result.theme_id,
        total_units=total,
        pages=result.pages,
        utilization_rate=total / capacity * 100 if capacity else 0.0,
        zone_breakdown=zone_breakdown,
        experience_formats=experience_formats,
        quality=quality,
        compression_level=result.compression_level_applied,
    )


def _better(a: float, b: float) -> int:
    """+1 when a wins, -1 when b wins, 0 on a tie."""
    return (a > b) - (a < b)


def compare_results(
    result_a: FittingResult, result_b: FittingResult, theme_a: Theme, theme_b: Theme
) -> FitComparison:
    """
    Compare two fitting results (e.g. the same content in two themes).

    The recommendation scores one point per criterion:
    - higher utilization, as long as it stays below 95%
    - more detailed experiences
    - higher average relevance

    Returns:
        FitComparison with a recommendation of "A", "B" or "Equal"
    """
    stats_a = compute_stats(result_a, theme_a)
    stats_b = compute_stats(result_b, theme_b)
    qa, qb = stats_a.quality, stats_b.quality

    differences = FitDifferences(
        utilization_rate_diff=stats_a.utilization_rate - stats_b.utilization_rate,
        experiences_count_diff=qa.total_experiences_count - qb.total_experiences_count,
        detailed_count_diff=qa.detailed_experiences_count - qb.detailed_experiences_count,
        avg_relevance_diff=qa.avg_relevance_score - qb.avg_relevance_score,
    )

    score = 0
    if (
        stats_a.utilization_rate < HIGH_UTILIZATION_PERCENT
        and stats_a.utilization_rate > stats_b.utilization_rate
    ):
        score += 1
    elif (
        stats_b.utilization_rate < HIGH_UTILIZATION_PERCENT
        and stats_b.utilization_rate > stats_a.utilization_rate
    ):
        score -= 1
    score += _better(qa.detailed_experiences_count, qb.detailed_experiences_count)
    score += _better(qa.avg_relevance_score, qb.avg_relevance_score)

    if score > 0:
        recommendation = "A"
    elif score < 0:
        recommendation = "B"
    else:
        recommendation = "Equal"

    return FitComparison(
        stats_a=stats_a, stats_b=stats_b, differences=differences, recommendation=recommendation
    )


def format_stats_report(
    stats: FitStats, theme: Theme, validation: Optional[FitValidation] = None
) -> str:
    """Render stats (and optionally a validation) as a plain-text report."""
    formatter = TableFormatter(
        columns=[
            Column("Zone", 16),
            Column("Used", 8, ">"),
            Column("Capacity", 10, ">"),
            Column("% of total", 12, ">"),
        ]
    )
    formatter.add_section_header(f"FIT REPORT: {theme.name} ({theme.id})")
    formatter.add_line(
        f"Total: {stats.total_units} units on {stats.pages} page(s), "
        f"utilization {stats.utilization_rate:.1f}%, compression level {stats.compression_level}"
    )
    formatter.add_line()
    formatter.add_column_headers()
    for zone, share in stats.zone_breakdown.items():
        if share.units or theme.capacity(zone):
            formatter.add_row(zone.value, share.units, theme.capacity(zone), share.percentage)
    formatter.add_separator()

    histogram = ", ".join(f"{fmt.value} {count}" for fmt, count in stats.experience_formats.items())
    quality = stats.quality
    formatter.add_line(f"Experience formats: {histogram}")
    formatter.add_line(
        f"Experiences: {quality.total_experiences_count} "
        f"({quality.detailed_experiences_count} detailed), "
        f"{quality.total_achievements_count} achievements, "
        f"avg relevance {quality.avg_relevance_score:.1f}"
    )

    if validation is not None:
        formatter.add_line()
        formatter.add_line(f"Validation: {'PASSED' if validation.valid else 'FAILED'}")
        for error in validation.errors:
            formatter.add_line(f"  ERROR: {error}")
        for warning in validation.warnings:
            formatter.add_line(f"  WARNING: {warning}")

    return formatter.render()
