"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed, frozen
access to bracket tables and FICA constants.
"""

import math
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..schemas import FILING_STATUSES


class TaxBracket(BaseModel):
    """Single progressive bracket. The top bracket's limit is infinite."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    limit: float = Field(..., gt=0, description="Upper income bound for this bracket")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")


def _check_brackets(label: str, brackets: Tuple[TaxBracket, ...]) -> List[str]:
    """Return problems with a bracket list (empty if it is well formed)."""
    if not brackets:
        return [f"{label}: at least one bracket is required"]

    errors = []
    limits = [b.limit for b in brackets]
    if any(lower >= upper for lower, upper in zip(limits, limits[1:])):
        errors.append(f"{label}: bracket limits must be strictly ascending")
    if not math.isinf(limits[-1]):
        errors.append(f"{label}: last bracket limit must be .inf")
    return errors


def _check_statuses(label: str, mapping: Dict[str, object]) -> List[str]:
    missing = [s for s in FILING_STATUSES if s not in mapping]
    unknown = [s for s in mapping if s not in FILING_STATUSES]
    errors = []
    if missing:
        errors.append(f"{label}: missing filing status(es) {', '.join(missing)}")
    if unknown:
        errors.append(f"{label}: unknown filing status(es) {', '.join(unknown)}")
    return errors


class SocialSecurityRules(BaseModel):
    """Social Security tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    wage_base: float = Field(..., gt=0, description="SS wage base (max taxable)")
    rate: float = Field(..., ge=0, le=1, description="SS tax rate (employee portion)")

    @property
    def max_annual_tax(self) -> float:
        return self.wage_base * self.rate


class MedicareRules(BaseModel):
    """Medicare and Additional Medicare tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(..., ge=0, le=1)
    additional_rate: float = Field(..., ge=0, le=1)
    additional_threshold: Dict[str, float] = Field(
        ..., description="Additional Medicare income threshold per filing status",
    )

    @model_validator(mode="after")
    def check_thresholds(self) -> "MedicareRules":
        errors = _check_statuses("medicare.additional_threshold", self.additional_threshold)
        if errors:
            raise ValueError("; ".join(errors))
        return self


class TaxTable(BaseModel):
    """Complete federal withholding rules for one tax year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: int = Field(..., ge=2000, le=9999)
    social_security: SocialSecurityRules
    medicare: MedicareRules
    federal_brackets: Dict[str, Tuple[TaxBracket, ...]]

    @model_validator(mode="after")
    def check_brackets(self) -> "TaxTable":
        errors = _check_statuses("federal_brackets", self.federal_brackets)
        for status, brackets in self.federal_brackets.items():
            errors.extend(_check_brackets(f"federal_brackets.{status}", brackets))
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def brackets_for(self, filing_status: str) -> Tuple[TaxBracket, ...]:
        return self.federal_brackets[filing_status]


class StateTaxRules(BaseModel):
    """State wage tax tables (not versioned by year)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    no_income_tax: List[str] = Field(default_factory=list)
    states: Dict[str, Dict[str, Tuple[TaxBracket, ...]]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_states(self) -> "StateTaxRules":
        errors = []
        for state, by_status in self.states.items():
            if state in self.no_income_tax:
                errors.append(f"{state}: listed in no_income_tax but has brackets")
            errors.extend(_check_statuses(f"states.{state}", by_status))
            for status, brackets in by_status.items():
                errors.extend(_check_brackets(f"states.{state}.{status}", brackets))
        if errors:
            raise ValueError("; ".join(errors))
        return self
