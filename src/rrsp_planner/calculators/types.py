"""Type definitions for the planner calculations."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class Province(str, Enum):
    """Canadian provinces and territories.

    Collected from the user but not yet consumed by any calculation;
    reserved for provincial bracket support.
    """

    ALBERTA = "Alberta"
    BRITISH_COLUMBIA = "British Columbia"
    MANITOBA = "Manitoba"
    NEW_BRUNSWICK = "New Brunswick"
    NEWFOUNDLAND_AND_LABRADOR = "Newfoundland and Labrador"
    NORTHWEST_TERRITORIES = "Northwest Territories"
    NOVA_SCOTIA = "Nova Scotia"
    NUNAVUT = "Nunavut"
    ONTARIO = "Ontario"
    PRINCE_EDWARD_ISLAND = "Prince Edward Island"
    QUEBEC = "Quebec"
    SASKATCHEWAN = "Saskatchewan"
    YUKON = "Yukon"


class PayInterval(int, Enum):
    """Contribution frequency, valued by periods per year."""

    WEEKLY = 52
    BIWEEKLY = 26
    MONTHLY = 12

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation."""

    threshold: float  # Exclusive upper bound; math.inf for the top bracket
    rate: float  # As decimal, e.g., 0.205 for 20.5%

    @property
    def is_unbounded(self) -> bool:
        return math.isinf(self.threshold)


# Ordered low-to-high, last bracket unbounded.
BracketTable = tuple[TaxBracket, ...]


@dataclass(frozen=True)
class ProjectionInputs:
    """Parameters for a contribution growth projection."""

    annual_return_rate_percent: float
    periods_per_year: int
    contribution_per_year: float
    number_of_years: int


@dataclass(frozen=True)
class ProjectionRow:
    """One projected year of contributions."""

    year: int  # 1-indexed
    contributed_this_year: float
    contribution_growth_this_year: float
    ending_balance: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PlannerInputs:
    """Everything the presentation layer collects from the user.

    ``province``, ``rrsp_room`` and ``fhsa_room`` are carried through to
    the result untouched; no calculation reads them.
    """

    province: Province = Province.ALBERTA
    annual_income: float = 0.0
    rrsp_room: float = 0.0
    fhsa_room: float = 0.0
    planned_contribution: float = 0.0
    rate_of_return_percent: float = 7.0
    pay_interval: int = PayInterval.WEEKLY.value
    years_to_work: int = 0

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "province": Province(self.province).value,
            "annual_income": repr(float(self.annual_income)),
            "rrsp_room": repr(float(self.rrsp_room)),
            "fhsa_room": repr(float(self.fhsa_room)),
            "planned_contribution": repr(float(self.planned_contribution)),
            "rate_of_return_percent": repr(float(self.rate_of_return_percent)),
            "pay_interval": int(self.pay_interval),
            "years_to_work": int(self.years_to_work),
        }
