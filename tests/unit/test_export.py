"""Unit tests for CSV export."""

from paystub.sdk import CSV_HEADER, calculate, to_csv, write_csv
from paystub.sdk.export import escape_formula

HEADER_LINE = (
    "Period,Pay Date,Hours,Gross Pay,Federal Tax,Social Security,"
    "Medicare,State Tax,Other Deductions,Net Pay"
)


class TestToCsv:

    def test_header(self, base_params):
        lines = to_csv(calculate(base_params).pay_periods).splitlines()
        assert lines[0] == HEADER_LINE
        assert ",".join(CSV_HEADER) == HEADER_LINE

    def test_one_row_per_period(self, base_params):
        text = to_csv(calculate(base_params).pay_periods)
        assert len(text.splitlines()) == 27
        assert text.endswith("\n")

    def test_row_format(self, base_params):
        lines = to_csv(calculate(base_params).pay_periods).splitlines()
        assert lines[1] == '1,"2024-01-01",80.00,2500.00,359.73,155.00,36.25,0.00,0.00,1949.02'

    def test_negative_amounts_are_bare(self, base_params):
        base_params.update({"hourlyRate": 10, "hoursPerPeriod": 10})
        base_params["additionalDeductions"] = [{"name": "Garnishment", "amount": 500}]
        row = to_csv(calculate(base_params).pay_periods).splitlines()[1]
        assert row.endswith(",500.00,-417.65")

    def test_empty(self):
        assert to_csv([]) == HEADER_LINE + "\n"


class TestFormulaGuard:

    def test_formula_prefixes_escaped(self):
        for text in ("=SUM(A1)", "+1", "-1", "@cmd", "\tx", "\rx"):
            assert escape_formula(text) == "'" + text

    def test_plain_text_unchanged(self):
        assert escape_formula("2024-01-01") == "2024-01-01"
        assert escape_formula("Health Insurance") == "Health Insurance"


def test_write_csv(tmp_path, base_params):
    result = calculate(base_params)
    path = write_csv(result.pay_periods, tmp_path / "periods.csv")
    assert path.read_text() == to_csv(result.pay_periods)
