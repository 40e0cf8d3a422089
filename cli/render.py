from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_value(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}"


def render_report(payload: Dict[str, Any]) -> None:
    echo_heading("Summary")
    echo_key_values(
        [
            ("average_index", _format_value(payload.get("averageIndex"))),
            ("max_secondary", _format_value(payload.get("maxSecondary"))),
            ("trend_slope", _format_value(payload.get("trendSlope"))),
            ("trend_intercept", _format_value(payload.get("trendIntercept"))),
        ]
    )

    labels = payload.get("labels") or []
    observed = payload.get("observedTrack") or []
    forecast = payload.get("forecastTrack") or []
    typer.echo()
    echo_heading("Series")
    if labels:
        typer.echo(f"{'period':>8}  {'observed':>10}  {'forecast':>10}")
        for label, seen, projected in zip(labels, observed, forecast):
            typer.echo(
                f"{label:>8}  {_format_value(seen):>10}  {_format_value(projected):>10}"
            )
    else:
        typer.echo("No series available.")

    gap_years = payload.get("gapYears") or []
    if gap_years:
        typer.echo()
        typer.secho(
            "Years without data: " + ", ".join(str(year) for year in gap_years),
            fg=typer.colors.YELLOW,
        )
