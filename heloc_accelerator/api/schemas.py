"""Pydantic schemas for API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---- Request schemas ----

class CalculateRequest(BaseModel):
    # Mortgage
    mortgage_balance: Decimal | None = None
    mortgage_annual_rate: Decimal | None = Field(None, description="Percent, e.g. 6.5")
    remaining_term_months: Decimal | None = None
    monthly_payment: Decimal | None = None

    # Credit line
    credit_line_limit: Decimal | None = None
    credit_line_annual_rate: Decimal | None = Field(None, description="Percent, e.g. 8.25")
    credit_line_available: Decimal | None = None

    # Income
    monthly_gross_income: Decimal | None = None
    monthly_net_income: Decimal | None = None
    monthly_expenses: Decimal | None = None

    # Property (informational)
    property_value: Decimal | None = None
    property_tax_monthly: Decimal | None = None
    insurance_monthly: Decimal | None = None
    hoa_fees_monthly: Decimal | None = None
    pmi_monthly: Decimal | None = None

    # Sweep policy overrides
    sweep_strategy: str | None = Field(None, description="prepay or chunk_draw")
    chunk_amount: Decimal | None = None

    include_schedules: bool = True


# ---- Response schemas ----

class FieldErrorResponse(BaseModel):
    field: str
    message: str


class MonthResponse(BaseModel):
    month: int
    starting_balance: Decimal
    interest: Decimal
    principal: Decimal
    payment: Decimal
    ending_balance: Decimal
    cumulative_interest: Decimal
    pmi_payment: Decimal = Decimal("0")


class SweepMonthResponse(MonthResponse):
    starting_credit_line_balance: Decimal
    credit_line_interest: Decimal
    credit_line_draw: Decimal
    credit_line_repayment: Decimal
    ending_credit_line_balance: Decimal
    cash_outlay: Decimal


class TraditionalSummary(BaseModel):
    payoff_months: int
    monthly_payment: Decimal
    total_interest: Decimal
    total_paid: Decimal
    schedule: list[MonthResponse] = []


class SweepSummary(BaseModel):
    strategy: str
    payoff_months: int
    mortgage_payoff_month: int
    total_interest: Decimal
    total_mortgage_interest: Decimal
    total_credit_line_interest: Decimal
    total_paid: Decimal
    max_credit_line_used: Decimal
    average_credit_line_balance: Decimal
    schedule: list[SweepMonthResponse] = []


class ComparisonSummary(BaseModel):
    months_saved: int
    years_saved: Decimal
    interest_saved: Decimal
    percent_interest_saved: Decimal
    monthly_payment_difference: Decimal


class CalculateResponse(BaseModel):
    traditional: TraditionalSummary
    sweep: SweepSummary
    comparison: ComparisonSummary
    monthly_discretionary_income: Decimal
    monthly_carrying_costs: Decimal
