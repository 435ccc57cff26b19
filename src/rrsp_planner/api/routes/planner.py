"""Planner API endpoints."""

from fastapi import APIRouter, status

from rrsp_planner.api.dependencies import AppSettings, Engine
from rrsp_planner.api.schemas import (
    BracketResponse,
    ErrorResponse,
    PayIntervalOption,
    PlanRequest,
    PlanResponse,
    ProjectionRequest,
    ProjectionResponse,
    ProjectionRowResponse,
    ReferenceResponse,
    TaxLiabilityRequest,
    TaxLiabilityResponse,
    TaxReductionRequest,
    TaxReductionResponse,
)
from rrsp_planner.calculators.brackets import bracket_table_to_payload
from rrsp_planner.calculators.projector import project
from rrsp_planner.calculators.types import (
    PayInterval,
    PlannerInputs,
    ProjectionInputs,
    Province,
)

router = APIRouter(tags=["planner"])

_ENGINE_ERRORS = {422: {"model": ErrorResponse}}


# ============================================================================
# Reference data
# ============================================================================


@router.get("/reference", response_model=ReferenceResponse)
async def get_reference(engine: Engine, settings: AppSettings) -> ReferenceResponse:
    """List provinces, pay intervals and the active tax brackets."""
    return ReferenceResponse(
        provinces=[p.value for p in Province],
        pay_intervals=[
            PayIntervalOption(label=interval.label, periods_per_year=interval.value)
            for interval in PayInterval
        ],
        brackets=[
            BracketResponse(**b)
            for b in bracket_table_to_payload(engine.brackets)["brackets"]
        ],
        contribution_limit_rate=settings.contribution_limit_rate,
    )


# ============================================================================
# Calculations
# ============================================================================


@router.post(
    "/plans",
    response_model=PlanResponse,
    status_code=status.HTTP_200_OK,
    responses=_ENGINE_ERRORS,
)
def calculate_plan(engine: Engine, payload: PlanRequest) -> PlanResponse:
    """Contribution limit, tax reduction and growth projection in one call."""
    result = engine.calculate(PlannerInputs(**payload.model_dump()))
    return PlanResponse(
        inputs=payload,
        contribution_limit=result.contribution_limit,
        tax_reduction=result.tax_reduction,
        final_balance=result.final_balance,
        total_contributed=result.total_contributed,
        rows=[ProjectionRowResponse.model_validate(row) for row in result.rows],
        inputs_fingerprint=result.inputs_fingerprint,
        rules_fingerprint=result.rules_fingerprint,
    )


@router.post(
    "/tax/liability",
    response_model=TaxLiabilityResponse,
    responses=_ENGINE_ERRORS,
)
def calculate_tax_liability(
    engine: Engine, payload: TaxLiabilityRequest
) -> TaxLiabilityResponse:
    """Total tax owed on an income."""
    tax = engine.tax_calculator.calculate_tax(payload.income)
    return TaxLiabilityResponse(income=payload.income, tax=tax)


@router.post(
    "/tax/reduction",
    response_model=TaxReductionResponse,
    responses=_ENGINE_ERRORS,
)
def calculate_tax_reduction(
    engine: Engine, payload: TaxReductionRequest
) -> TaxReductionResponse:
    """Tax saved by deducting a contribution from gross income."""
    breakdown = engine.tax_calculator.calculate_reduction(
        payload.gross_income, payload.deduction
    )
    return TaxReductionResponse.model_validate(breakdown)


@router.post(
    "/projections",
    response_model=ProjectionResponse,
    responses=_ENGINE_ERRORS,
)
def calculate_projection(payload: ProjectionRequest) -> ProjectionResponse:
    """Year-by-year contribution growth."""
    rows = project(ProjectionInputs(**payload.model_dump()))
    return ProjectionResponse(
        rows=[ProjectionRowResponse.model_validate(row) for row in rows]
    )
