"""Calculation route: raw scenario -> traditional vs sweep comparison."""

import logging

from fastapi import APIRouter, HTTPException

from heloc_accelerator.api.schemas import (
    CalculateRequest,
    CalculateResponse,
    ComparisonSummary,
    MonthResponse,
    SweepMonthResponse,
    SweepSummary,
    TraditionalSummary,
)
from heloc_accelerator.engine.comparison import compare_scenario
from heloc_accelerator.engine.errors import (
    InsufficientPaymentError,
    SimulationDidNotConvergeError,
    ValidationError,
)
from heloc_accelerator.models.results import StrategyComparison
from heloc_accelerator.models.scenario import SweepPolicy, SweepStrategy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["calculate"])

POLICY_FIELDS = {"sweep_strategy", "chunk_amount", "include_schedules"}


def _policy_error(field: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": "Invalid input data", "errors": [{"field": field, "message": message}]},
    )


def _build_policy(req: CalculateRequest) -> SweepPolicy:
    overrides = {}
    if req.sweep_strategy:
        try:
            overrides["strategy"] = SweepStrategy(req.sweep_strategy)
        except ValueError:
            choices = ", ".join(s.value for s in SweepStrategy)
            raise _policy_error("sweep_strategy", f"Must be one of: {choices}")
    if req.chunk_amount is not None:
        overrides["chunk_amount"] = req.chunk_amount
    try:
        return SweepPolicy.from_settings(**overrides)
    except ValueError:
        raise _policy_error("chunk_amount", "chunk_amount must be greater than zero")


def _result_to_response(result: StrategyComparison, include_schedules: bool) -> CalculateResponse:
    """Convert engine StrategyComparison to API response."""
    trad = result.traditional
    sweep = result.sweep
    c = result.comparison

    trad_schedule = []
    sweep_schedule = []
    if include_schedules:
        trad_schedule = [
            MonthResponse(
                month=m.month_index,
                starting_balance=m.starting_principal_balance,
                interest=m.interest_accrued,
                principal=m.principal_paid,
                payment=m.payment,
                ending_balance=m.ending_principal_balance,
                cumulative_interest=m.cumulative_interest,
                pmi_payment=m.pmi_payment,
            )
            for m in trad.schedule
        ]
        sweep_schedule = [
            SweepMonthResponse(
                month=m.month_index,
                starting_balance=m.starting_principal_balance,
                interest=m.interest_accrued,
                principal=m.principal_paid,
                payment=m.payment,
                ending_balance=m.ending_principal_balance,
                cumulative_interest=m.cumulative_interest,
                pmi_payment=m.pmi_payment,
                starting_credit_line_balance=m.starting_credit_line_balance,
                credit_line_interest=m.credit_line_interest_accrued,
                credit_line_draw=m.credit_line_draw,
                credit_line_repayment=m.credit_line_repayment,
                ending_credit_line_balance=m.ending_credit_line_balance,
                cash_outlay=m.cash_outlay,
            )
            for m in sweep.schedule
        ]

    return CalculateResponse(
        traditional=TraditionalSummary(
            payoff_months=trad.payoff_months,
            monthly_payment=trad.monthly_payment,
            total_interest=trad.total_interest_paid,
            total_paid=trad.total_paid,
            schedule=trad_schedule,
        ),
        sweep=SweepSummary(
            strategy=sweep.policy.strategy.value,
            payoff_months=sweep.payoff_months,
            mortgage_payoff_month=sweep.mortgage_payoff_month,
            total_interest=sweep.total_interest_paid,
            total_mortgage_interest=sweep.total_mortgage_interest,
            total_credit_line_interest=sweep.total_credit_line_interest,
            total_paid=sweep.total_paid,
            max_credit_line_used=sweep.max_credit_line_balance_used,
            average_credit_line_balance=sweep.average_credit_line_balance,
            schedule=sweep_schedule,
        ),
        comparison=ComparisonSummary(
            months_saved=c.months_saved,
            years_saved=c.years_saved,
            interest_saved=c.interest_saved,
            percent_interest_saved=c.percent_interest_saved,
            monthly_payment_difference=c.monthly_payment_difference,
        ),
        monthly_discretionary_income=result.scenario.monthly_discretionary_income,
        monthly_carrying_costs=result.scenario.monthly_carrying_costs,
    )


@router.post("/calculate", response_model=CalculateResponse)
async def calculate(req: CalculateRequest):
    """Compare the traditional schedule against the sweep strategy."""
    policy = _build_policy(req)
    raw = req.model_dump(exclude=POLICY_FIELDS)

    try:
        result = compare_scenario(raw, policy)
    except InsufficientPaymentError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "message": str(e),
                "errors": [{"field": err.field, "message": err.message} for err in e.errors],
                "minimum_payment": str(e.minimum_payment),
            },
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Invalid input data",
                "errors": [{"field": err.field, "message": err.message} for err in e.errors],
            },
        )
    except SimulationDidNotConvergeError as e:
        logger.warning("Calculation did not converge: %s", e)
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "months_simulated": e.months_simulated},
        )

    return _result_to_response(result, req.include_schedules)
