"""Paystub Calc SDK - Core functionality for paystub calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_tax_rules_dir,
    configure_logging,
    ConfigError,
)

from .schemas import (
    FILING_STATUSES,
    PAY_FREQUENCIES,
    STATE_CODES,
    AdditionalDeduction,
    CalculationParameters,
    ValidationResult,
    PayPeriod,
    PaystubTotals,
    PaystubResult,
)

from .taxes import (
    TaxTable,
    TaxTableError,
    TaxTableRegistry,
    StateTaxProvider,
    StateTaxTables,
    load_tax_tables,
    load_state_rules,
)

from .schedule import (
    PAY_PERIODS,
    generate_pay_dates,
    get_pay_periods,
)

from .validation import validate_inputs

from .calculator import (
    InvalidInputError,
    PaystubCalculator,
    build_calculator,
    get_default_calculator,
    calculate,
)

from .export import (
    CSV_HEADER,
    to_csv,
    write_csv,
)

from .boundary import handle_paystub_request

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_tax_rules_dir",
    "configure_logging",
    "ConfigError",
    # Schemas
    "FILING_STATUSES",
    "PAY_FREQUENCIES",
    "STATE_CODES",
    "AdditionalDeduction",
    "CalculationParameters",
    "ValidationResult",
    "PayPeriod",
    "PaystubTotals",
    "PaystubResult",
    # Tax tables
    "TaxTable",
    "TaxTableError",
    "TaxTableRegistry",
    "StateTaxProvider",
    "StateTaxTables",
    "load_tax_tables",
    "load_state_rules",
    # Schedule
    "PAY_PERIODS",
    "generate_pay_dates",
    "get_pay_periods",
    # Validation and calculation
    "validate_inputs",
    "InvalidInputError",
    "PaystubCalculator",
    "build_calculator",
    "get_default_calculator",
    "calculate",
    # Export
    "CSV_HEADER",
    "to_csv",
    "write_csv",
    # Request handling
    "handle_paystub_request",
]
