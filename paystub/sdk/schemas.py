"""Pydantic schemas for paystub calculation inputs and results.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in request bodies cause clear errors rather than silent ignoring.
Attribute names are snake_case; the JSON wire format is camelCase.
"""

from datetime import date
from typing import Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


FilingStatus = Literal[
    "single",
    "marriedJoint",
    "marriedSeparate",
    "headOfHousehold",
    "qualifyingSurvivingSpouse",
]
PayFrequency = Literal["weekly", "biweekly", "semimonthly", "monthly"]

FILING_STATUSES = get_args(FilingStatus)
PAY_FREQUENCIES = get_args(PayFrequency)

# 50 states plus the District of Columbia
STATE_CODES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL",
    "GA", "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME",
    "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH",
    "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI",
    "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
})

MIN_TAX_YEAR = 2020

# Upper bounds keep every amount well inside cent-exact Decimal precision
MAX_HOURLY_RATE = 1000
MAX_HOURS_PER_PERIOD = 200
MAX_OVERTIME_HOURS = 100
MAX_OVERTIME_RATE = 2000
MAX_DEDUCTION_AMOUNT = 1_000_000
MAX_DEDUCTION_NAME_LENGTH = 100


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_response(self) -> dict:
        """Dump to the JSON-ready camelCase shape used at the API boundary."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Inputs
# =============================================================================


class AdditionalDeduction(CamelModel):
    """A flat per-period deduction (health premium, garnishment, etc.)."""

    name: str = Field(..., min_length=1, max_length=MAX_DEDUCTION_NAME_LENGTH)
    amount: float = Field(..., ge=0, le=MAX_DEDUCTION_AMOUNT, description="Amount withheld every period")


class CalculationParameters(CamelModel):
    """Strongly typed calculation parameters.

    Build this only from input that passed validate_inputs(); the field
    constraints here are a backstop, not the user-facing validation.
    """

    hourly_rate: float = Field(..., gt=0, le=MAX_HOURLY_RATE)
    hours_per_period: float = Field(..., gt=0, le=MAX_HOURS_PER_PERIOD)
    overtime_hours: float = Field(default=0, ge=0, le=MAX_OVERTIME_HOURS)
    overtime_rate: Optional[float] = Field(
        default=None, gt=0, le=MAX_OVERTIME_RATE,
        description="Pay per overtime hour. Defaults to 1.5x hourly rate.",
    )
    filing_status: FilingStatus
    tax_year: int = Field(..., ge=MIN_TAX_YEAR, le=9999)
    state: str
    pay_frequency: PayFrequency
    additional_deductions: List[AdditionalDeduction] = Field(default_factory=list)
    first_pay_date: Optional[date] = Field(
        default=None,
        description="Anchor for weekly/biweekly schedules (first cycle of January)",
    )

    @field_validator("state")
    @classmethod
    def normalize_state(cls, value: str) -> str:
        code = value.strip().upper()
        if code not in STATE_CODES:
            raise ValueError(f"Invalid state code '{value}'")
        return code

    @property
    def effective_overtime_rate(self) -> float:
        if self.overtime_rate is not None:
            return self.overtime_rate
        return self.hourly_rate * 1.5

    @property
    def deductions_per_period(self) -> float:
        return sum(d.amount for d in self.additional_deductions)


# =============================================================================
# Results
# =============================================================================


class ValidationResult(CamelModel):
    """Outcome of validate_inputs(). errors is empty when is_valid is True."""

    is_valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class PayPeriod(CamelModel):
    """One pay cycle. Monetary fields hold exact cents."""

    period: int = Field(..., ge=1)
    pay_date: date
    hours: float = Field(..., description="Regular hours worked")
    overtime_hours: float = 0
    gross_pay: float
    federal_tax: float
    social_security: float
    medicare: float
    state_tax: float
    other_deductions: float
    net_pay: float = Field(..., description="May be negative when deductions exceed gross")


class PaystubTotals(CamelModel):
    """Sums of every PayPeriod field over the schedule."""

    hours: float = 0
    overtime_hours: float = 0
    gross_pay: float = 0
    federal_tax: float = 0
    social_security: float = 0
    medicare: float = 0
    state_tax: float = 0
    other_deductions: float = 0
    net_pay: float = 0


class PaystubResult(CamelModel):
    """Full calculation output."""

    pay_periods: List[PayPeriod]
    totals: PaystubTotals
    tax_table_year: int = Field(..., description="Year of the tax table actually applied")
    warnings: List[str] = Field(default_factory=list)
