"""Tax table loading and year resolution.

Tables are read from <tax_rules_dir>/<year>.yaml, validated with the
TaxTable schema, and held in an immutable TaxTableRegistry. The registry is
built once per directory and injected into the calculator.
"""

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..config import BUNDLED_TAX_RULES_DIR, get_tax_rules_dir
from .schemas import StateTaxRules, TaxTable

logger = logging.getLogger(__name__)

STATE_RULES_FILENAME = "state_rules.yaml"


class TaxTableError(Exception):
    """Raised when tax rule files are missing or malformed."""
    pass


def _read_yaml(path: Path) -> dict:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TaxTableError(f"Invalid YAML in {path}: {e}")
    if not isinstance(data, dict):
        raise TaxTableError(f"{path} must contain a mapping")
    return data


def _format_errors(e: ValidationError) -> str:
    errors = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"])
        errors.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(errors)


def load_tax_table_file(path: Path) -> TaxTable:
    """Load and validate a single <year>.yaml tax table.

    Raises:
        TaxTableError: If the file is malformed or its tax_year disagrees
            with the file name
    """
    data = _read_yaml(path)
    try:
        table = TaxTable.model_validate(data)
    except ValidationError as e:
        raise TaxTableError(f"Invalid tax table {path.name}: {_format_errors(e)}")

    if path.stem.isdigit() and int(path.stem) != table.tax_year:
        raise TaxTableError(
            f"{path.name} declares tax_year {table.tax_year}, expected {path.stem}"
        )
    return table


def load_state_rules_file(path: Path) -> StateTaxRules:
    """Load and validate state_rules.yaml."""
    data = _read_yaml(path)
    try:
        return StateTaxRules.model_validate(data)
    except ValidationError as e:
        raise TaxTableError(f"Invalid state rules {path.name}: {_format_errors(e)}")


class TaxTableRegistry:
    """Read-only set of tax tables keyed by year."""

    def __init__(self, tables: Mapping[int, TaxTable]):
        if not tables:
            raise TaxTableError("At least one tax table is required")
        self._tables = MappingProxyType(dict(tables))

    @classmethod
    def from_directory(cls, rules_dir: Path) -> "TaxTableRegistry":
        """Load every <year>.yaml in rules_dir."""
        tables: Dict[int, TaxTable] = {}
        for path in sorted(rules_dir.glob("*.yaml")):
            if not path.stem.isdigit():
                continue
            table = load_tax_table_file(path)
            tables[table.tax_year] = table
        if not tables:
            raise TaxTableError(f"No tax rule files (<year>.yaml) found in {rules_dir}")
        logger.debug(f"Loaded tax tables {sorted(tables)} from {rules_dir}")
        return cls(tables)

    @property
    def years(self) -> List[int]:
        """Available years, ascending."""
        return sorted(self._tables)

    def resolve(self, year: int) -> Tuple[TaxTable, bool]:
        """Find the table for year, falling back to the latest prior year.

        Returns:
            Tuple of (table, is_fallback)

        Raises:
            TaxTableError: If no table exists at or before year
        """
        if year in self._tables:
            return self._tables[year], False

        candidates = [y for y in self.years if y <= year]
        if not candidates:
            raise TaxTableError(
                f"No tax table for {year} or earlier (available: {self.years})"
            )
        return self._tables[candidates[-1]], True

    def get(self, year: int) -> TaxTable:
        return self.resolve(year)[0]


@lru_cache(maxsize=None)
def _registry_for(rules_dir: Path) -> TaxTableRegistry:
    return TaxTableRegistry.from_directory(rules_dir)


@lru_cache(maxsize=None)
def _state_rules_for(rules_dir: Path) -> StateTaxRules:
    return load_state_rules_file(rules_dir / STATE_RULES_FILENAME)


def load_tax_tables(rules_dir: Optional[Path] = None) -> TaxTableRegistry:
    """Get the (cached) registry for rules_dir or the configured directory."""
    if rules_dir is None:
        rules_dir = get_tax_rules_dir()
    return _registry_for(Path(rules_dir).resolve())


def load_state_rules(rules_dir: Optional[Path] = None) -> StateTaxRules:
    """Get the (cached) state rules, falling back to the bundled file."""
    if rules_dir is None:
        rules_dir = get_tax_rules_dir()
    rules_dir = Path(rules_dir).resolve()
    if not (rules_dir / STATE_RULES_FILENAME).exists():
        rules_dir = BUNDLED_TAX_RULES_DIR.resolve()
    return _state_rules_for(rules_dir)


def clear_cache() -> None:
    """Forget loaded tables (after tax_rules_dir changes)."""
    _registry_for.cache_clear()
    _state_rules_for.cache_clear()
