"""Year-by-year projection of periodic contributions under compound returns."""

from __future__ import annotations

import math
from collections.abc import Iterator

from rrsp_planner.calculators.errors import InvalidConfigurationError, InvalidInputError
from rrsp_planner.calculators.types import ProjectionInputs, ProjectionRow


def _is_integer(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


class ContributionProjector:
    """Projects contribution growth for a fixed set of inputs.

    Contributions are split evenly across the periods of each year. A
    contribution made in period ``i`` grows at the per-period rate for the
    periods left in that year. The balance carried in from the previous
    year grows once at the full annual rate before the year's
    contributions are added to it.

    Inputs are validated on construction. Iterating the projector runs the
    projection from year 1, so it can be iterated any number of times.
    """

    def __init__(self, inputs: ProjectionInputs):
        self._validate(inputs)
        self.inputs = inputs
        self.periods_per_year = int(inputs.periods_per_year)
        self.number_of_years = int(inputs.number_of_years)
        self.annual_rate = inputs.annual_return_rate_percent / 100
        # Geometric split of the annual rate, fixed for the whole run
        self.period_rate = (1 + self.annual_rate) ** (1 / self.periods_per_year) - 1
        self.contribution_per_period = inputs.contribution_per_year / self.periods_per_year

    @staticmethod
    def _validate(inputs: ProjectionInputs) -> None:
        periods = inputs.periods_per_year
        if not _is_integer(periods) or periods <= 0:
            raise InvalidConfigurationError(
                f"periods_per_year must be a positive integer, got {periods!r}"
            )

        years = inputs.number_of_years
        if not _is_integer(years):
            raise InvalidInputError("number_of_years", years, "must be a whole number")
        if years < 0:
            raise InvalidInputError("number_of_years", years, "must not be negative")

        for field_name in ("annual_return_rate_percent", "contribution_per_year"):
            value = getattr(inputs, field_name)
            if not math.isfinite(value):
                raise InvalidInputError(field_name, value, "must be a finite number")

        if inputs.annual_return_rate_percent < -100:
            raise InvalidInputError(
                "annual_return_rate_percent",
                inputs.annual_return_rate_percent,
                "cannot lose more than 100% in a year",
            )

    @staticmethod
    def _require_finite(field_name: str, value: float, year: int) -> None:
        if not math.isfinite(value):
            raise InvalidInputError(
                field_name, value, f"overflows in year {year}; inputs are too large to project"
            )

    def _year_contributions(self) -> tuple[float, float]:
        """Return (contributed, contributed with in-year growth) for one year."""
        contributed = 0.0
        with_growth = 0.0
        periods = self.periods_per_year

        for i in range(periods):
            try:
                growth_factor = (1 + self.period_rate) ** (periods - i - 1)
            except OverflowError:
                growth_factor = math.inf
            with_growth += self.contribution_per_period * growth_factor
            contributed += self.contribution_per_period

        self._require_finite("contribution_growth_this_year", with_growth, 1)
        self._require_finite("contributed_this_year", contributed, 1)
        return contributed, with_growth

    def __iter__(self) -> Iterator[ProjectionRow]:
        if not self.number_of_years:
            return

        # Every year sees identical contributions; only the balance differs.
        contributed, with_growth = self._year_contributions()
        balance = 0.0

        for year in range(1, self.number_of_years + 1):
            carried = balance * (1 + self.annual_rate)
            balance = carried + with_growth
            self._require_finite("ending_balance", balance, year)
            yield ProjectionRow(
                year=year,
                contributed_this_year=contributed,
                contribution_growth_this_year=with_growth,
                ending_balance=balance,
            )

    def __len__(self) -> int:
        return self.number_of_years

    def project(self) -> list[ProjectionRow]:
        return list(self)


def project(inputs: ProjectionInputs) -> list[ProjectionRow]:
    """Project contributions for ``inputs.number_of_years`` years.

    Raises:
        InvalidConfigurationError: If periods_per_year is not a positive integer.
        InvalidInputError: If number_of_years is negative or fractional, or a
            rate or contribution is not finite, or the balance overflows.
    """
    return ContributionProjector(inputs).project()
