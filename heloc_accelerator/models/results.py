from dataclasses import dataclass, field
from decimal import Decimal

from heloc_accelerator.models.scenario import ScenarioInput, SweepPolicy


@dataclass(frozen=True)
class AmortizationMonth:
    month_index: int
    starting_principal_balance: Decimal
    interest_accrued: Decimal
    principal_paid: Decimal
    ending_principal_balance: Decimal
    payment: Decimal  # Interest + principal applied to the mortgage
    cumulative_interest: Decimal
    pmi_payment: Decimal = Decimal("0")
    equity_pct: Decimal | None = None


@dataclass(frozen=True)
class SweepMonth(AmortizationMonth):
    starting_credit_line_balance: Decimal = Decimal("0")
    credit_line_interest_accrued: Decimal = Decimal("0")
    credit_line_draw: Decimal = Decimal("0")
    credit_line_repayment: Decimal = Decimal("0")
    ending_credit_line_balance: Decimal = Decimal("0")

    extra_principal_paid: Decimal = Decimal("0")  # Beyond the scheduled payment
    surplus_used: Decimal = Decimal("0")
    cash_outlay: Decimal = Decimal("0")  # Out of pocket: mortgage payment - draw + line repayment


@dataclass(frozen=True)
class SimulationResult:
    schedule: list[AmortizationMonth]
    monthly_payment: Decimal
    payoff_months: int
    total_interest_paid: Decimal
    total_principal_paid: Decimal
    total_paid: Decimal
    total_pmi_paid: Decimal = Decimal("0")


@dataclass(frozen=True)
class SweepSimulationResult(SimulationResult):
    total_mortgage_interest: Decimal = Decimal("0")
    total_credit_line_interest: Decimal = Decimal("0")
    total_credit_line_drawn: Decimal = Decimal("0")
    max_credit_line_balance_used: Decimal = Decimal("0")
    average_credit_line_balance: Decimal = Decimal("0")
    mortgage_payoff_month: int = 0
    credit_line_payoff_month: int = 0
    policy: SweepPolicy = field(default_factory=SweepPolicy)


@dataclass(frozen=True)
class ComparisonResult:
    months_saved: int
    years_saved: Decimal
    interest_saved: Decimal
    percent_interest_saved: Decimal
    monthly_payment_difference: Decimal


@dataclass(frozen=True)
class StrategyComparison:
    scenario: ScenarioInput
    traditional: SimulationResult
    sweep: SweepSimulationResult
    comparison: ComparisonResult
