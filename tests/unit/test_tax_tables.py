"""Unit tests for tax table loading and year resolution."""

import shutil

import pytest
import yaml

from paystub.sdk import TaxTableError, TaxTableRegistry, load_state_rules, load_tax_tables
from paystub.sdk.config import BUNDLED_TAX_RULES_DIR
from paystub.sdk.taxes import load_tax_table_file


@pytest.fixture
def rules_dir(tmp_path):
    """Writable copy of the bundled 2023 and 2024 tables."""
    target = tmp_path / "rules"
    target.mkdir()
    for name in ("2023.yaml", "2024.yaml"):
        shutil.copy(BUNDLED_TAX_RULES_DIR / name, target / name)
    return target


def read_table(path):
    with open(path) as f:
        return yaml.safe_load(f)


class TestBundledTables:

    def test_years_2020_through_2025(self):
        assert load_tax_tables().years == [2020, 2021, 2022, 2023, 2024, 2025]

    def test_every_table_has_all_statuses(self):
        registry = load_tax_tables()
        for year in registry.years:
            table = registry.get(year)
            assert set(table.federal_brackets) == {
                "single", "marriedJoint", "marriedSeparate",
                "headOfHousehold", "qualifyingSurvivingSpouse",
            }

    def test_wage_bases(self):
        registry = load_tax_tables()
        assert registry.get(2024).social_security.wage_base == 168600
        assert registry.get(2025).social_security.wage_base == 176100

    def test_registry_is_cached(self):
        assert load_tax_tables() is load_tax_tables()

    def test_state_rules(self):
        rules = load_state_rules()
        assert "TX" in rules.no_income_tax
        assert {"CA", "NY", "IL", "PA", "MA"} <= set(rules.states)


class TestResolve:

    def test_exact_year(self):
        table, is_fallback = load_tax_tables().resolve(2022)
        assert table.tax_year == 2022
        assert is_fallback is False

    def test_future_year_falls_back_to_latest(self):
        table, is_fallback = load_tax_tables().resolve(2030)
        assert table.tax_year == 2025
        assert is_fallback is True

    def test_no_earlier_table(self):
        with pytest.raises(TaxTableError, match="No tax table for 2019"):
            load_tax_tables().resolve(2019)

    def test_empty_registry_rejected(self):
        with pytest.raises(TaxTableError):
            TaxTableRegistry({})


class TestMalformedTables:
    """Bad rule files fail loudly with the file name in the message."""

    def test_invalid_yaml(self, rules_dir):
        (rules_dir / "2024.yaml").write_text("tax_year: [2024\n")
        with pytest.raises(TaxTableError, match="Invalid YAML"):
            load_tax_table_file(rules_dir / "2024.yaml")

    def test_year_mismatch(self, rules_dir):
        data = read_table(rules_dir / "2023.yaml")
        (rules_dir / "2022.yaml").write_text(yaml.safe_dump(data))
        with pytest.raises(TaxTableError, match="declares tax_year 2023"):
            load_tax_table_file(rules_dir / "2022.yaml")

    def test_missing_filing_status(self, rules_dir):
        data = read_table(rules_dir / "2024.yaml")
        del data["federal_brackets"]["headOfHousehold"]
        (rules_dir / "2024.yaml").write_text(yaml.safe_dump(data))
        with pytest.raises(TaxTableError, match="headOfHousehold"):
            load_tax_table_file(rules_dir / "2024.yaml")

    def test_last_bracket_must_be_unbounded(self, rules_dir):
        data = read_table(rules_dir / "2024.yaml")
        data["federal_brackets"]["single"][-1]["limit"] = 1000000
        (rules_dir / "2024.yaml").write_text(yaml.safe_dump(data))
        with pytest.raises(TaxTableError, match="last bracket limit"):
            load_tax_table_file(rules_dir / "2024.yaml")

    def test_unknown_key(self, rules_dir):
        data = read_table(rules_dir / "2024.yaml")
        data["fica"] = {}
        (rules_dir / "2024.yaml").write_text(yaml.safe_dump(data))
        with pytest.raises(TaxTableError, match="Invalid tax table 2024.yaml"):
            load_tax_table_file(rules_dir / "2024.yaml")

    def test_directory_without_tables(self, tmp_path):
        with pytest.raises(TaxTableError, match="No tax rule files"):
            TaxTableRegistry.from_directory(tmp_path)


class TestCustomDirectory:

    def test_loads_only_directory_tables(self, rules_dir):
        assert load_tax_tables(rules_dir).years == [2023, 2024]

    def test_state_rules_fall_back_to_bundled(self, rules_dir):
        assert "CA" in load_state_rules(rules_dir).states

    def test_tables_are_immutable(self, rules_dir):
        table = load_tax_tables(rules_dir).get(2024)
        with pytest.raises(Exception):
            table.tax_year = 2030
        assert isinstance(table.brackets_for("single"), tuple)
