"""Tests for the calc and validate CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from paystub.cli.__main__ import cli
from paystub.sdk import set_setting

BASE_ARGS = [
    "--hourly-rate", "31.25", "--hours", "80", "--filing-status", "single",
    "--year", "2024", "--state", "TX", "--frequency", "biweekly",
]


@pytest.fixture
def runner():
    return CliRunner()


class TestCalc:

    def test_table_output(self, runner):
        result = runner.invoke(cli, ["calc", *BASE_ARGS])
        assert result.exit_code == 0, result.output
        assert "Pay Periods for 2024" in result.output
        assert "$2,500.00" in result.output
        assert "$1,949.02" in result.output
        assert "TOTAL" in result.output

    def test_json_output(self, runner):
        result = runner.invoke(cli, ["calc", *BASE_ARGS, "--format", "json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert len(payload["payPeriods"]) == 26
        assert payload["totals"]["grossPay"] == 65000.0

    def test_csv_output(self, runner):
        result = runner.invoke(cli, ["calc", *BASE_ARGS, "--format", "csv"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("Period,Pay Date,Hours")
        assert len(lines) == 27

    def test_csv_to_file(self, runner, tmp_path):
        out = tmp_path / "periods.csv"
        result = runner.invoke(cli, ["calc", *BASE_ARGS, "--format", "csv", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Wrote 26 pay periods" in result.output
        assert len(out.read_text().splitlines()) == 27

    def test_deduction_option(self, runner):
        result = runner.invoke(cli, [
            "calc", *BASE_ARGS, "--format", "json",
            "-d", "Health Insurance=100", "-d", "401k=50.25",
        ])
        assert result.exit_code == 0, result.output
        first = json.loads(result.output)["payPeriods"][0]
        assert first["otherDeductions"] == 150.25

    def test_bad_deduction_option(self, runner):
        result = runner.invoke(cli, ["calc", *BASE_ARGS, "-d", "Health Insurance"])
        assert result.exit_code != 0
        assert "NAME=AMOUNT" in result.output

    def test_input_file_with_override(self, runner, tmp_path):
        params_file = tmp_path / "params.yaml"
        params_file.write_text(yaml.safe_dump({
            "hourlyRate": 31.25, "hoursPerPeriod": 80, "filingStatus": "single",
            "taxYear": 2024, "state": "TX", "payFrequency": "biweekly",
        }))
        result = runner.invoke(cli, [
            "calc", "-i", str(params_file), "--frequency", "monthly", "--format", "json",
        ])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["payPeriods"]) == 12

    def test_invalid_inputs_json(self, runner):
        args = [a if a != "31.25" else "0" for a in BASE_ARGS]
        result = runner.invoke(cli, ["calc", *args, "--format", "json"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["error"] == "Invalid paystub inputs"
        assert payload["fieldErrors"] == {"hourlyRate": "Hourly rate must be greater than $0"}

    def test_missing_inputs(self, runner):
        result = runner.invoke(cli, ["calc", "--hourly-rate", "25"])
        assert result.exit_code == 1

    def test_default_format_from_settings(self, runner):
        set_setting("default_output_format", "csv")
        result = runner.invoke(cli, ["calc", *BASE_ARGS])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("Period,Pay Date")

    def test_table_with_output_rejected(self, runner, tmp_path):
        result = runner.invoke(cli, ["calc", *BASE_ARGS, "-o", str(tmp_path / "x.txt")])
        assert result.exit_code != 0


class TestValidate:

    def test_valid(self, runner):
        result = runner.invoke(cli, ["validate", *BASE_ARGS])
        assert result.exit_code == 0
        assert "Inputs are valid." in result.output

    def test_invalid_json(self, runner):
        result = runner.invoke(cli, ["validate", *BASE_ARGS, "--state", "ZZ", "--format", "json"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["isValid"] is False
        assert "state" in payload["errors"]

    def test_first_pay_date_out_of_range(self, runner):
        result = runner.invoke(cli, [
            "validate", *BASE_ARGS, "--first-pay-date", "2024-02-01", "--format", "json",
        ])
        assert result.exit_code == 1
        assert "firstPayDate" in json.loads(result.output)["errors"]
