#!/usr/bin/env python3
"""
List available themes with their capacities, and check theme definitions.

Usage:
    python scripts/list_themes.py
    python scripts/list_themes.py --zones
    python scripts/list_themes.py --config path/to/themes.yaml --check
"""

from pathlib import Path
from typing import Optional

import typer

from cvfit.contexts.layout import (
    InvalidThemeConfigError,
    ZoneName,
    get_registry,
    load_theme_registry,
    theme_capacity_summary,
    validate_theme_config,
)
from cvfit.utils.report_formatter import Column, TableFormatter

app = typer.Typer(add_completion=False, help="List and check résumé themes.")


@app.command()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Theme config file (default: $CVFIT_THEMES_PATH or bundled)"
    ),
    zones: bool = typer.Option(False, "--zones", help="Show per-zone capacities"),
    check: bool = typer.Option(False, "--check", help="Exit with an error if any theme is invalid"),
):
    """Show a capacity summary for every theme."""
    try:
        registry = load_theme_registry(config) if config else get_registry()
    except (FileNotFoundError, InvalidThemeConfigError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    formatter = TableFormatter(
        columns=[
            Column("Theme", 18),
            Column("Pages", 6, ">"),
            Column("Detailed", 9, ">"),
            Column("Total exp", 10, ">"),
            Column("Projects", 9, ">"),
            Column("Interests", 10, ">"),
        ]
    )
    formatter.add_section_header(f"THEMES (default: {registry.default_id})")
    formatter.add_column_headers()
    for theme in registry.all():
        summary = theme_capacity_summary(theme)
        formatter.add_row(
            theme.id,
            theme.page.max_pages if summary.supports_multi_page else 1,
            summary.estimated_experiences_detailed,
            summary.estimated_experiences_total,
            "yes" if summary.has_space_for_projects else "no",
            "yes" if summary.has_space_for_interests else "no",
        )
    typer.echo(formatter.render())

    if zones:
        for theme in registry.all():
            zone_table = TableFormatter(
                columns=[Column("Zone", 16), Column("Capacity", 10, ">"), Column("Min", 6, ">")]
            )
            zone_table.add_line()
            zone_table.add_line(f"{theme.name} ({theme.id}): {theme.description}")
            zone_table.add_column_headers()
            for zone_name in ZoneName:
                zone = theme.zone(zone_name)
                zone_table.add_row(zone_name.value, zone.capacity_units, zone.min_units)
            typer.echo(zone_table.render())

    invalid = []
    typer.echo("\n=== Theme checks ===")
    for theme in registry.all():
        result = validate_theme_config(theme)
        status = "OK" if result.valid else "INVALID"
        typer.echo(f"  {theme.id}: {status}")
        for error in result.errors:
            typer.echo(f"    ERROR: {error}")
        for warning in result.warnings:
            typer.echo(f"    ! {warning}")
        if not result.valid:
            invalid.append(theme.id)

    if check and invalid:
        typer.secho(f"\n✗ Invalid themes: {', '.join(invalid)}", fg=typer.colors.RED)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
