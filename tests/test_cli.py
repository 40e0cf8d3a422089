from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app

CSV_BODY = "date,aqi,pm25\n2019-01-01,80,10\n2020-01-01,90,12\n2021-01-01,100,30\n"


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.uploaded: List[Dict[str, Any]] | None = None
        self.report_payload: Dict[str, Any] = {
            "averageIndex": 90.0,
            "maxSecondary": 30.0,
            "trendSlope": 10.0,
            "trendIntercept": 80.0,
            "labels": ["2019", "2020", "2021", "+1"],
            "observedTrack": [80.0, 90.0, 100.0, None],
            "forecastTrack": [None, None, None, 110.0],
            "gapYears": [],
        }
        self.closed = False

    def upload_records(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        self.uploaded = records
        return {"accepted": len(records), "total": len(records)}

    def get_report(self) -> Dict[str, Any]:
        return self.report_payload

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_analyze_csv_locally(runner: CliRunner, stub: StubClient, tmp_path: Path) -> None:
    csv_path = tmp_path / "air.csv"
    csv_path.write_text(CSV_BODY)

    result = runner.invoke(app, ["analyze", str(csv_path)])

    assert result.exit_code == 0
    assert "trend_slope: 10.00" in result.stdout
    assert "110.00" in result.stdout
    assert stub.uploaded is None


def test_analyze_json_output_with_horizon(runner: CliRunner, stub: StubClient, tmp_path: Path) -> None:
    json_path = tmp_path / "air.json"
    json_path.write_text(
        json.dumps(
            [
                {"date": "2019-01-01", "aqi": 80, "pm25": 1},
                {"date": "2020-01-01", "aqi": 90, "pm25": 2},
            ]
        )
    )

    result = runner.invoke(app, ["analyze", str(json_path), "--json", "--horizon", "2"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["labels"] == ["2019", "2020", "+1", "+2"]
    assert payload["forecastTrack"] == [None, None, 100.0, 110.0]


def test_analyze_malformed_file_exits_with_error(
    runner: CliRunner, stub: StubClient, tmp_path: Path
) -> None:
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("date,aqi,pm25\n2019-01-01,eighty,10\n")

    result = runner.invoke(app, ["analyze", str(csv_path)])

    assert result.exit_code == 1
    assert "Malformed input" in result.output
    assert "row 2" in result.output


def test_upload_sends_normalized_records(runner: CliRunner, stub: StubClient, tmp_path: Path) -> None:
    csv_path = tmp_path / "air.csv"
    csv_path.write_text(CSV_BODY)

    result = runner.invoke(app, ["--base-url", "http://trends.test/", "upload", str(csv_path)])

    assert result.exit_code == 0
    assert "Upload accepted. accepted=3 total=3" in result.stdout
    assert stub.config.base_url == "http://trends.test"
    assert stub.uploaded is not None
    assert stub.uploaded[0] == {"date": "2019-01-01T00:00:00", "aqi": 80.0, "pm25": 10.0}
    assert stub.closed is True


def test_report_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["report"])

    assert result.exit_code == 0
    assert "Summary" in result.stdout
    assert "average_index: 90.00" in result.stdout
    assert "+1" in result.stdout
    assert stub.closed is True


def test_analyze_non_utf8_file_exits_with_error(
    runner: CliRunner, stub: StubClient, tmp_path: Path
) -> None:
    csv_path = tmp_path / "latin1.csv"
    csv_path.write_bytes(b"date,aqi,pm25\n2019-01-01,80,10\xff\xfe\n")

    result = runner.invoke(app, ["analyze", str(csv_path)])

    assert result.exit_code == 1
    assert "not valid UTF-8" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
