"""Unit tests for per-period withholding math."""

import pytest

from paystub.sdk.taxes import (
    TaxBracket,
    apply_ss_cap,
    calc_federal_withholding,
    calc_medicare_withholding,
    calc_ss_withholding,
    calculate_progressive_tax,
    load_tax_tables,
    round_cents,
    sum_cents,
)


@pytest.fixture
def table_2024():
    return load_tax_tables().get(2024)


class TestRounding:
    """round_cents rounds half up; sum_cents sums without float drift."""

    @pytest.mark.parametrize("amount,expected", [
        (402.045, 402.05),
        (2.675, 2.68),
        (0.004, 0.0),
        (-1.005, -1.01),
        (359.7307, 359.73),
    ])
    def test_round_cents(self, amount, expected):
        assert round_cents(amount) == expected

    def test_sum_cents(self):
        assert sum_cents([0.1, 0.2]) == 0.3
        assert sum_cents([0.01] * 100) == 1.0


class TestProgressiveTax:
    """Each rate applies only to its slice of income."""

    BRACKETS = (
        TaxBracket(limit=10000, rate=0.10),
        TaxBracket(limit=40000, rate=0.20),
        TaxBracket(limit=float("inf"), rate=0.30),
    )

    def test_zero_income(self):
        assert calculate_progressive_tax(0, self.BRACKETS) == 0

    def test_first_bracket_only(self):
        assert calculate_progressive_tax(5000, self.BRACKETS) == pytest.approx(500)

    def test_spans_brackets(self):
        # 1000 + 6000 + 3000
        assert calculate_progressive_tax(50000, self.BRACKETS) == pytest.approx(10000)


class TestFederal:

    def test_biweekly_single_2024(self, table_2024):
        # 65000 annual: 1160 + 4266 + 3927 = 9353 / 26
        assert calc_federal_withholding(2500, 26, "single", table_2024) == 359.73

    def test_married_joint_lower(self, table_2024):
        single = calc_federal_withholding(2500, 26, "single", table_2024)
        joint = calc_federal_withholding(2500, 26, "marriedJoint", table_2024)
        assert joint < single


class TestSocialSecurity:

    def test_under_wage_base(self, table_2024):
        ss = calc_ss_withholding(2500, 26, table_2024)
        assert ss["withheld"] == 155.0
        assert ss["capped"] is False
        assert ss["max_annual"] == 10453.2

    def test_over_wage_base(self, table_2024):
        ss = calc_ss_withholding(8000, 26, table_2024)
        assert ss["capped"] is True
        assert ss["annual_taxable"] == 168600
        assert ss["withheld"] == 402.05

    def test_cap_clamps_final_share(self):
        assert apply_ss_cap(402.05, 10051.25, 10453.2) == 401.95

    def test_cap_reached(self):
        assert apply_ss_cap(402.05, 10453.2, 10453.2) == 0.0

    def test_cap_not_reached(self):
        assert apply_ss_cap(155.0, 1550.0, 10453.2) == 155.0


class TestMedicare:

    def test_base_rate(self, table_2024):
        medicare = calc_medicare_withholding(2500, 26, "single", table_2024)
        assert medicare["withheld"] == 36.25
        assert medicare["over_threshold"] is False

    def test_additional_medicare_over_threshold(self, table_2024):
        # 208000 annual: 8000 over the 200000 single threshold
        medicare = calc_medicare_withholding(8000, 26, "single", table_2024)
        assert medicare["over_threshold"] is True
        assert medicare["withheld"] == round_cents(116 + 8000 * 0.009 / 26)

    def test_threshold_depends_on_filing_status(self, table_2024):
        medicare = calc_medicare_withholding(8000, 26, "marriedJoint", table_2024)
        assert medicare["over_threshold"] is False
        assert medicare["withheld"] == 116.0
