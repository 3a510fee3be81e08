"""State income tax withholding.

The calculator only needs a per-period amount; where it comes from is
pluggable. StateTaxTables is the bundled provider backed by
tax_rules/state_rules.yaml.
"""

from typing import Optional, Protocol

from .schemas import StateTaxRules
from .withholding import calculate_progressive_tax, round_cents


class StateTaxProvider(Protocol):
    """Anything that can produce per-period state withholding."""

    def has_income_tax(self, state: str) -> bool:
        ...

    def calc_period_tax(
        self,
        gross: float,
        periods: int,
        state: str,
        filing_status: str,
        tax_year: int,
    ) -> Optional[float]:
        """Per-period tax, or None when the state taxes wages but no table is known."""
        ...


class StateTaxTables:
    """State withholding from annual progressive brackets."""

    def __init__(self, rules: StateTaxRules):
        self.rules = rules

    def has_income_tax(self, state: str) -> bool:
        return state not in self.rules.no_income_tax

    def calc_period_tax(
        self,
        gross: float,
        periods: int,
        state: str,
        filing_status: str,
        tax_year: int,
    ) -> Optional[float]:
        if not self.has_income_tax(state):
            return 0.0
        by_status = self.rules.states.get(state)
        if by_status is None:
            return None

        annual_tax = calculate_progressive_tax(gross * periods, by_status[filing_status])
        return round_cents(annual_tax / periods)
