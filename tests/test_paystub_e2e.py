"""End-to-end tests: parameters file in, JSON and CSV out.

Drives the installed CLI entry point the way a user would and checks that
the JSON and CSV renditions of the same calculation agree.
"""

import csv
import json
from decimal import Decimal

import pytest
from click.testing import CliRunner

from paystub.cli.__main__ import cli


@pytest.fixture
def params_file(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        "hourlyRate": 48.5,
        "hoursPerPeriod": 86.67,
        "overtimeHours": 4,
        "filingStatus": "headOfHousehold",
        "taxYear": 2025,
        "state": "CA",
        "payFrequency": "semimonthly",
        "additionalDeductions": [
            {"name": "Union Dues", "amount": 75},
            {"name": "Dental", "amount": 12.5},
        ],
    }))
    return path


def test_json_and_csv_agree(params_file, tmp_path):
    runner = CliRunner()

    json_result = runner.invoke(cli, ["calc", "-i", str(params_file), "--format", "json"])
    assert json_result.exit_code == 0, json_result.output
    payload = json.loads(json_result.output)

    csv_path = tmp_path / "out.csv"
    csv_result = runner.invoke(cli, [
        "calc", "-i", str(params_file), "--format", "csv", "-o", str(csv_path),
    ])
    assert csv_result.exit_code == 0, csv_result.output

    with open(csv_path, newline="") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == len(payload["payPeriods"]) == 24
    for row, period in zip(rows, payload["payPeriods"]):
        assert row["Pay Date"] == period["payDate"]
        assert Decimal(row["Net Pay"]) == Decimal(str(period["netPay"])).quantize(Decimal("0.01"))
        assert Decimal(row["Other Deductions"]) == Decimal("87.50")

    net_total = sum(Decimal(row["Net Pay"]) for row in rows)
    assert net_total == Decimal(str(payload["totals"]["netPay"])).quantize(Decimal("0.01"))


def test_deterministic_across_runs(params_file):
    runner = CliRunner()
    first = runner.invoke(cli, ["calc", "-i", str(params_file), "--format", "json"])
    second = runner.invoke(cli, ["calc", "-i", str(params_file), "--format", "json"])
    assert first.output == second.output


def test_validate_then_calc_rejects_same_inputs(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("hourlyRate: 0\nhoursPerPeriod: 80\nfilingStatus: single\n"
                    "taxYear: 2024\nstate: TX\npayFrequency: weekly\n")
    runner = CliRunner()

    validated = runner.invoke(cli, ["validate", "-i", str(path), "--format", "json"])
    calculated = runner.invoke(cli, ["calc", "-i", str(path), "--format", "json"])

    assert validated.exit_code == calculated.exit_code == 1
    assert json.loads(validated.output)["errors"] == json.loads(calculated.output)["fieldErrors"]
