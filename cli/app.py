from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from app.schemas import TrendReportResponse
from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_report
from models.errors import MalformedInput
from models.records import Measurement
from services.analytics import build_engine
from services.parser import MeasurementParser, to_record


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for analysing air-quality measurements and talking to the trends service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _read_measurements(path: Path) -> List[Measurement]:
    """Parse a CSV or JSON file, exiting with a readable message on bad input."""
    parser = MeasurementParser()
    try:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInput("file is not valid UTF-8") from exc
        if path.suffix.lower() == ".json":
            try:
                records = json.loads(text or "[]")
            except json.JSONDecodeError as exc:
                raise MalformedInput(f"invalid JSON: {exc.msg}") from exc
            if not isinstance(records, list):
                raise MalformedInput("expected a JSON array of records")
            return parser.parse_records(records)
        return parser.parse_csv(text)
    except MalformedInput as exc:
        typer.secho(f"Malformed input in {path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Trends API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds for service calls.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, http_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("analyze")
def analyze_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="CSV or JSON file of measurements."
    ),
    horizon: Optional[int] = typer.Option(
        None,
        "--horizon",
        min=1,
        help="Number of periods to forecast (defaults to ANALYTICS_FORECAST_HORIZON or 3).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Compute the trend report locally without contacting the service."""
    measurements = _read_measurements(file)
    report = build_engine(horizon).analyze(measurements)
    payload = TrendReportResponse.from_report(report).model_dump(mode="json", by_alias=True)
    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        return
    render_report(payload)


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="CSV or JSON file of measurements."
    ),
) -> None:
    """Validate a file locally and store its measurements in the service."""
    state = _get_state(ctx)
    measurements = _read_measurements(file)
    typer.echo(f"Uploading {len(measurements)} measurements to {state.config.base_url} ...")
    payload = state.client.upload_records([to_record(item) for item in measurements])
    typer.secho(
        f"Upload accepted. accepted={payload.get('accepted')} total={payload.get('total')}",
        fg=typer.colors.GREEN,
    )


@app.command("report")
def report_command(ctx: typer.Context) -> None:
    """Fetch the trend report over measurements stored in the service."""
    state = _get_state(ctx)
    render_report(state.client.get_report())
