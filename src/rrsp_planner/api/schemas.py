"""Pydantic schemas for API request/response models."""

from pydantic import BaseModel, ConfigDict, Field

from rrsp_planner.calculators.types import PayInterval, Province

# Request size caps; the engine rejects zero and negative counts itself
MAX_PERIODS_PER_YEAR = 365
MAX_YEARS = 100


# ============================================================================
# Plan schemas
# ============================================================================


class PlanRequest(BaseModel):
    """Schema for a full planner calculation.

    province, rrsp_room and fhsa_room are echoed back but not used in
    any calculation.
    """

    province: Province = Province.ALBERTA
    annual_income: float = 0.0
    rrsp_room: float = 0.0
    fhsa_room: float = 0.0
    planned_contribution: float = 0.0
    rate_of_return_percent: float = 7.0
    pay_interval: int = Field(
        default=PayInterval.WEEKLY.value,
        le=MAX_PERIODS_PER_YEAR,
        description="Periods per year",
    )
    years_to_work: int = Field(default=0, le=MAX_YEARS)


class ProjectionRowResponse(BaseModel):
    """Schema for one projected year."""

    model_config = ConfigDict(from_attributes=True)

    year: int
    contributed_this_year: float
    contribution_growth_this_year: float
    ending_balance: float


class PlanResponse(BaseModel):
    """Schema for planner calculation results."""

    inputs: PlanRequest
    contribution_limit: float
    tax_reduction: float
    final_balance: float
    total_contributed: float
    rows: list[ProjectionRowResponse]
    inputs_fingerprint: str
    rules_fingerprint: str


# ============================================================================
# Tax schemas
# ============================================================================


class TaxLiabilityRequest(BaseModel):
    """Schema for a tax liability calculation."""

    income: float


class TaxLiabilityResponse(BaseModel):
    """Schema for tax liability results."""

    income: float
    tax: float


class TaxReductionRequest(BaseModel):
    """Schema for a tax reduction estimate."""

    gross_income: float
    deduction: float = 0.0


class TaxReductionResponse(BaseModel):
    """Schema for tax reduction results."""

    model_config = ConfigDict(from_attributes=True)

    gross_income: float
    deduction: float
    taxable_income: float
    tax_before: float
    tax_after: float
    reduction: float


# ============================================================================
# Projection schemas
# ============================================================================


class ProjectionRequest(BaseModel):
    """Schema for a standalone contribution projection."""

    annual_return_rate_percent: float = 7.0
    periods_per_year: int = Field(default=PayInterval.WEEKLY.value, le=MAX_PERIODS_PER_YEAR)
    contribution_per_year: float = 0.0
    number_of_years: int = Field(default=0, le=MAX_YEARS)


class ProjectionResponse(BaseModel):
    """Schema for projection results."""

    rows: list[ProjectionRowResponse]


# ============================================================================
# Reference data schemas
# ============================================================================


class PayIntervalOption(BaseModel):
    """A selectable contribution frequency."""

    label: str
    periods_per_year: int


class BracketResponse(BaseModel):
    """A tax bracket; a null threshold means no upper limit."""

    threshold: float | None
    rate: float


class ReferenceResponse(BaseModel):
    """Static choices and configuration a client needs to render inputs."""

    provinces: list[str]
    pay_intervals: list[PayIntervalOption]
    brackets: list[BracketResponse]
    contribution_limit_rate: float


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
