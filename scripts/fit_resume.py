#!/usr/bin/env python3
"""
Fit résumé content into a theme and report what was kept.

Usage:
    python scripts/fit_resume.py content.yaml
    python scripts/fit_resume.py content.yaml --theme compact_ats --no-photo
    python scripts/fit_resume.py content.yaml --theme classic --compare modern
    python scripts/fit_resume.py content.yaml --as-of 2025-01-01 --output fitted.json
"""

import json
import os
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf

from cvfit.contexts.fitting import (
    FitPreferences,
    ResumeContent,
    check_overflow,
    compare_results,
    compute_stats,
    fit_content,
    format_stats_report,
    validate_fitting,
)
from cvfit.contexts.fitting.logger import log_validation_result, setup_fitting_logger
from cvfit.contexts.layout import get_registry, recommend_theme
from cvfit.utils.dates import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(add_completion=False, help="Fit résumé content into a theme's page budget.")


def _load_content(content_file: Path) -> ResumeContent:
    if not content_file.exists():
        typer.echo(f"ERROR: Content file not found: {content_file}", err=True)
        raise typer.Exit(1)
    data = OmegaConf.to_container(OmegaConf.load(content_file), resolve=True)
    try:
        return ResumeContent.from_dict(data)
    except (KeyError, ValueError) as e:
        typer.echo(f"ERROR: Invalid content in {content_file}: {e}", err=True)
        raise typer.Exit(1)


def _parse_as_of(as_of: Optional[str]) -> Optional[date]:
    if as_of is None:
        return None
    try:
        return date.fromisoformat(as_of)
    except ValueError:
        typer.echo(f"ERROR: --as-of must be YYYY-MM-DD, got {as_of!r}", err=True)
        raise typer.Exit(1)


@app.command()
def main(
    content_file: Path = typer.Argument(..., help="Résumé content YAML"),
    theme: Optional[str] = typer.Option(
        None, "--theme", "-t", help="Theme id or alias (default: recommended for the content)"
    ),
    compare: Optional[str] = typer.Option(
        None, "--compare", "-c", help="Second theme to compare against"
    ),
    photo: bool = typer.Option(True, "--photo/--no-photo", help="Request the photo header"),
    interests: bool = typer.Option(True, "--interests/--no-interests", help="Fit interests"),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Reference date for experience ages (YYYY-MM-DD)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the fitting result as JSON to this file"
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Session log directory (default: $LOGS_PATH/fit_<timestamp>)"
    ),
):
    """Fit content into a theme, validate it and print a report."""
    content = _load_content(content_file)
    reference_date = _parse_as_of(as_of)
    registry = get_registry()

    if theme is None:
        theme = recommend_theme(len(content.experiences), has_projects=bool(content.projects))
        typer.echo(f"No theme given, using recommended theme: {theme}")

    setup_fitting_logger(log_dir or LOGS_PATH / f"fit_{now()}", theme_id=theme)

    preferences = FitPreferences(include_photo=photo, include_interests=interests)
    result = fit_content(content, theme, preferences, as_of=reference_date, registry=registry)
    resolved = registry.find(result.theme_id)

    if result.fell_back:
        typer.secho(
            f"Unknown theme '{result.requested_theme_id}', used '{result.theme_id}' instead",
            fg=typer.colors.YELLOW,
        )

    validation = validate_fitting(result, resolved)
    log_validation_result(validation)

    typer.echo(format_stats_report(compute_stats(result, resolved), resolved, validation))

    page_check = check_overflow(result.total_units_used + resolved.margin_units, resolved, result.pages)
    for message in page_check.errors + page_check.warnings:
        typer.echo(f"  ! {message}")

    if result.warnings:
        typer.echo(f"\n=== Fitting warnings ({len(result.warnings)}) ===")
        for warning in result.warnings:
            typer.echo(f"  - {warning}")

    if compare is not None:
        other = fit_content(content, compare, preferences, as_of=reference_date, registry=registry)
        comparison = compare_results(result, other, resolved, registry.find(other.theme_id))
        diff = comparison.differences
        typer.echo(f"\n=== Comparison: A={result.theme_id} vs B={other.theme_id} ===")
        typer.echo(f"  Utilization diff: {diff.utilization_rate_diff:+.1f}%")
        typer.echo(f"  Experiences diff: {diff.experiences_count_diff:+d}")
        typer.echo(f"  Detailed diff: {diff.detailed_count_diff:+d}")
        typer.echo(f"  Avg relevance diff: {diff.avg_relevance_diff:+.1f}")
        typer.echo(f"  Recommendation: {comparison.recommendation}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        typer.echo(f"\nWrote {output}")

    if validation.valid:
        typer.secho("\n✓ Fit is valid", fg=typer.colors.GREEN)
    else:
        typer.secho("\n✗ Fit has errors", fg=typer.colors.RED)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
