"""Planner calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
import math
from dataclasses import dataclass
from typing import Any

from rrsp_planner.calculators.brackets import FEDERAL_TAX_BRACKETS, bracket_table_to_payload
from rrsp_planner.calculators.errors import InvalidInputError
from rrsp_planner.calculators.projector import ContributionProjector
from rrsp_planner.calculators.tax_calculator import TaxCalculator
from rrsp_planner.calculators.types import (
    BracketTable,
    PlannerInputs,
    ProjectionInputs,
    ProjectionRow,
    Province,
)
from rrsp_planner.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_CONTRIBUTION_LIMIT_RATE = 0.18


def calculate_contribution_limit(
    annual_income: float, rate: float = DEFAULT_CONTRIBUTION_LIMIT_RATE
) -> float:
    """Contribution room earned from a year's income.

    A flat share of income with no statutory dollar cap applied.
    """
    return annual_income * rate


@dataclass
class PlannerResult:
    """Result of one planner calculation."""

    inputs: PlannerInputs
    contribution_limit: float
    tax_reduction: float
    rows: list[ProjectionRow]
    inputs_fingerprint: str
    rules_fingerprint: str

    @property
    def final_balance(self) -> float:
        return self.rows[-1].ending_balance if self.rows else 0.0

    @property
    def total_contributed(self) -> float:
        return sum(row.contributed_this_year for row in self.rows)


class PlannerEngine:
    """Main planner calculation engine.

    Calculation pipeline:
    1) Validate inputs and build the contribution projector
    2) Contribution limit from annual income
    3) Tax reduction from deducting the planned contribution
    4) Year-by-year contribution projection
    """

    def __init__(
        self,
        brackets: BracketTable = FEDERAL_TAX_BRACKETS,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.tax_calculator = TaxCalculator(brackets)

    @property
    def brackets(self) -> BracketTable:
        return self.tax_calculator.brackets

    def calculate(self, inputs: PlannerInputs) -> PlannerResult:
        """Run every calculation for one set of user inputs."""
        self._validate(inputs)

        projector = ContributionProjector(
            ProjectionInputs(
                annual_return_rate_percent=inputs.rate_of_return_percent,
                periods_per_year=inputs.pay_interval,
                contribution_per_year=inputs.planned_contribution,
                number_of_years=inputs.years_to_work,
            )
        )

        contribution_limit = calculate_contribution_limit(
            inputs.annual_income, self.settings.contribution_limit_rate
        )
        tax_reduction = self.tax_calculator.estimate_reduction(
            inputs.annual_income, inputs.planned_contribution
        )
        rows = projector.project()

        inputs_fingerprint = self._compute_inputs_fingerprint(inputs)
        logger.debug(
            "Calculated plan %s: limit=%.2f reduction=%.2f years=%d",
            inputs_fingerprint,
            contribution_limit,
            tax_reduction,
            len(rows),
        )

        return PlannerResult(
            inputs=inputs,
            contribution_limit=contribution_limit,
            tax_reduction=tax_reduction,
            rows=rows,
            inputs_fingerprint=inputs_fingerprint,
            rules_fingerprint=self._compute_rules_fingerprint(),
        )

    def _validate(self, inputs: PlannerInputs) -> None:
        try:
            Province(inputs.province)
        except ValueError as e:
            raise InvalidInputError("province", inputs.province, "unknown province") from e

        for field_name in ("annual_income", "rrsp_room", "fhsa_room"):
            value = getattr(inputs, field_name)
            if not math.isfinite(value):
                raise InvalidInputError(field_name, value, "must be a finite number")

    def _compute_inputs_fingerprint(self, inputs: PlannerInputs) -> str:
        """Compute fingerprint of all inputs used in calculation."""
        json_str = json.dumps(inputs.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _compute_rules_fingerprint(self) -> str:
        """Compute fingerprint of the brackets and rates used in calculation."""
        rules: dict[str, Any] = bracket_table_to_payload(self.brackets)
        rules["contribution_limit_rate"] = self.settings.contribution_limit_rate
        rules["engine_version"] = self.settings.engine_version
        json_str = json.dumps(rules, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
