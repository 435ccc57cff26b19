"""Planner calculation engine."""

from rrsp_planner.calculators.engine import (
    PlannerEngine,
    PlannerResult,
    calculate_contribution_limit,
)
from rrsp_planner.calculators.errors import (
    InvalidConfigurationError,
    InvalidInputError,
    PlannerError,
)
from rrsp_planner.calculators.projector import ContributionProjector, project
from rrsp_planner.calculators.tax_calculator import (
    TaxCalculator,
    compute_tax,
    estimate_reduction,
)

__all__ = [
    "PlannerEngine",
    "PlannerResult",
    "calculate_contribution_limit",
    "ContributionProjector",
    "project",
    "TaxCalculator",
    "compute_tax",
    "estimate_reduction",
    "PlannerError",
    "InvalidConfigurationError",
    "InvalidInputError",
]
