"""Progressive tax liability and deduction savings."""

from __future__ import annotations

import math
from dataclasses import dataclass

from rrsp_planner.calculators.brackets import FEDERAL_TAX_BRACKETS, validate_bracket_table
from rrsp_planner.calculators.errors import InvalidInputError
from rrsp_planner.calculators.types import BracketTable


def _require_finite(field_name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(field_name, value, "must be a finite number")


def _walk_brackets(income: float, brackets: BracketTable) -> float:
    """Accumulate tax bracket by bracket, stopping at the first one not exceeded."""
    if income <= 0:
        return 0.0

    tax = 0.0
    previous_threshold = 0.0

    for bracket in brackets:
        if income > bracket.threshold:
            tax += (bracket.threshold - previous_threshold) * bracket.rate
            previous_threshold = bracket.threshold
        else:
            tax += (income - previous_threshold) * bracket.rate
            break

    return tax


def compute_tax(income: float, brackets: BracketTable = FEDERAL_TAX_BRACKETS) -> float:
    """Compute total tax owed on income under progressive brackets.

    Args:
        income: Taxable income. Zero or negative income owes nothing.
        brackets: Ordered low-to-high bracket table, last one unbounded.

    Returns:
        Total tax in dollars, unrounded.

    Raises:
        InvalidConfigurationError: If the bracket table is malformed.
        InvalidInputError: If income is NaN or infinite.
    """
    table = validate_bracket_table(brackets)
    _require_finite("income", income)
    return _walk_brackets(income, table)


@dataclass(frozen=True)
class TaxReduction:
    """Breakdown of the tax saved by a deduction."""

    gross_income: float
    deduction: float
    taxable_income: float
    tax_before: float
    tax_after: float

    @property
    def reduction(self) -> float:
        return self.tax_before - self.tax_after


def calculate_tax_reduction(
    gross_income: float,
    deduction: float,
    brackets: BracketTable = FEDERAL_TAX_BRACKETS,
) -> TaxReduction:
    """Tax before and after deducting from gross income.

    Taxable income after the deduction is floored at zero, so a deduction
    larger than the income saves at most the full tax on that income.
    """
    table = validate_bracket_table(brackets)
    _require_finite("gross_income", gross_income)
    _require_finite("deduction", deduction)

    taxable_income = max(gross_income - deduction, 0.0)
    return TaxReduction(
        gross_income=gross_income,
        deduction=deduction,
        taxable_income=taxable_income,
        tax_before=_walk_brackets(gross_income, table),
        tax_after=_walk_brackets(taxable_income, table),
    )


def estimate_reduction(
    gross_income: float,
    deduction: float,
    brackets: BracketTable = FEDERAL_TAX_BRACKETS,
) -> float:
    """Estimate how much tax a deduction saves."""
    return calculate_tax_reduction(gross_income, deduction, brackets).reduction


class TaxCalculator:
    """Calculates tax against one validated bracket table."""

    def __init__(self, brackets: BracketTable = FEDERAL_TAX_BRACKETS):
        self.brackets = validate_bracket_table(brackets)

    def calculate_tax(self, income: float) -> float:
        return compute_tax(income, self.brackets)

    def calculate_reduction(self, gross_income: float, deduction: float) -> TaxReduction:
        return calculate_tax_reduction(gross_income, deduction, self.brackets)

    def estimate_reduction(self, gross_income: float, deduction: float) -> float:
        return estimate_reduction(gross_income, deduction, self.brackets)
