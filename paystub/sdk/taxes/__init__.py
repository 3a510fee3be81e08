"""taxes - Tax tables and withholding logic.

Scope:
- Federal bracket tables and FICA constants by year (tax_rules/<year>.yaml)
- State wage tax tables (tax_rules/state_rules.yaml)
- Per-period withholding calculations (FIT, SS, Medicare, state)

Constraints:
- Pure calculation - tables are loaded once and passed in, never mutated
- No knowledge of pay schedules or request shapes

Usage:
    from paystub.sdk.taxes import load_tax_tables, calc_federal_withholding

    table = load_tax_tables().get(2024)
    fit = calc_federal_withholding(2500, 26, "single", table)
"""

from .schemas import (
    TaxBracket,
    TaxTable,
    SocialSecurityRules,
    MedicareRules,
    StateTaxRules,
)

from .tables import (
    TaxTableError,
    TaxTableRegistry,
    load_tax_tables,
    load_state_rules,
    load_tax_table_file,
    clear_cache,
)

from .withholding import (
    round_cents,
    sum_cents,
    calculate_progressive_tax,
    calc_federal_withholding,
    calc_ss_withholding,
    apply_ss_cap,
    calc_medicare_withholding,
)

from .state import StateTaxProvider, StateTaxTables

__all__ = [
    # Schemas
    "TaxBracket",
    "TaxTable",
    "SocialSecurityRules",
    "MedicareRules",
    "StateTaxRules",
    # Tables
    "TaxTableError",
    "TaxTableRegistry",
    "load_tax_tables",
    "load_state_rules",
    "load_tax_table_file",
    "clear_cache",
    # Withholding
    "round_cents",
    "sum_cents",
    "calculate_progressive_tax",
    "calc_federal_withholding",
    "calc_ss_withholding",
    "apply_ss_cap",
    "calc_medicare_withholding",
    # State
    "StateTaxProvider",
    "StateTaxTables",
]
