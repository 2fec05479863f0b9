"""Traditional amortization: annuity math and the fixed-payment schedule.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from heloc_accelerator.config import settings
from heloc_accelerator.engine.errors import SimulationDidNotConvergeError
from heloc_accelerator.models.results import AmortizationMonth, SimulationResult, SweepMonth
from heloc_accelerator.models.scenario import ScenarioInput

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def _cents(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def _exact_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    if annual_rate <= 0:
        return principal / term_months
    r = annual_rate / 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** term_months
    return principal * (r * factor) / (factor - 1)


def minimum_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """Fixed monthly payment that retires ``principal`` in ``term_months``."""
    if principal <= 0:
        return ZERO
    return _cents(_exact_payment(principal, annual_rate, term_months))


def remaining_balance(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    months_paid: int,
) -> Decimal:
    """Outstanding balance of a fully amortizing loan after ``months_paid`` payments."""
    if months_paid >= term_months:
        return ZERO
    if months_paid <= 0:
        return principal

    pmt = _exact_payment(principal, annual_rate, term_months)
    remaining = term_months - months_paid
    if annual_rate <= 0:
        return _cents(pmt * remaining)

    r = annual_rate / 12
    factor = (1 + r) ** remaining
    # Present value of the remaining payments
    return _cents(pmt * (factor - 1) / (r * factor))


def equity_pct(property_value: Decimal | None, balance: Decimal) -> Decimal | None:
    if not property_value:
        return None
    return _cents((property_value - balance) / property_value * 100)


def pmi_for_month(scenario: ScenarioInput, starting_balance: Decimal) -> Decimal:
    """Mortgage insurance due this month; dropped once equity reaches the removal threshold."""
    pmi = scenario.carrying_costs.mortgage_insurance
    if pmi <= 0 or starting_balance <= 0:
        return ZERO
    equity = equity_pct(scenario.property_value, starting_balance)
    if equity is not None and equity >= settings.pmi_removal_equity_pct:
        return ZERO
    return pmi


def _amortize(
    scenario: ScenarioInput,
    payment: Decimal,
    max_months: int,
    final_month: int | None,
) -> SimulationResult:
    """Run a fixed-payment schedule until the balance reaches zero.

    ``final_month`` is the month that retires whatever balance remains (the
    payment is only validated to the cent). Without it, a balance still
    outstanding after ``max_months`` raises SimulationDidNotConvergeError.
    """
    r = scenario.mortgage_annual_rate / 12
    balance = scenario.mortgage_balance

    schedule: list[AmortizationMonth] = []
    total_interest = ZERO
    total_principal = ZERO
    total_pmi = ZERO

    for month in range(1, max_months + 1):
        if balance <= 0:
            break
        starting = balance
        interest = _cents(balance * r)
        principal_paid = payment - interest

        # Final payment adjustment
        if principal_paid > balance or month == final_month:
            principal_paid = balance

        balance -= principal_paid
        total_interest += interest
        total_principal += principal_paid
        pmi = pmi_for_month(scenario, starting)
        total_pmi += pmi

        schedule.append(AmortizationMonth(
            month_index=month,
            starting_principal_balance=starting,
            interest_accrued=interest,
            principal_paid=principal_paid,
            ending_principal_balance=balance,
            payment=interest + principal_paid,
            cumulative_interest=total_interest,
            pmi_payment=pmi,
            equity_pct=equity_pct(scenario.property_value, balance),
        ))

    if balance > 0:
        raise SimulationDidNotConvergeError(schedule, len(schedule))

    return SimulationResult(
        schedule=schedule,
        monthly_payment=payment,
        payoff_months=len(schedule),
        total_interest_paid=total_interest,
        total_principal_paid=total_principal,
        total_paid=total_interest + total_principal,
        total_pmi_paid=total_pmi,
    )


def simulate_traditional(scenario: ScenarioInput) -> SimulationResult:
    """Baseline schedule: the stated payment, no extra principal.

    Terminates within ``remaining_term_months``; the last month of the term
    retires any sub-cent rounding residual left by the stated payment.
    """
    term = scenario.remaining_term_months
    return _amortize(scenario, scenario.monthly_payment, max_months=term, final_month=term)


def payoff_with_extra_payment(
    scenario: ScenarioInput,
    extra_payment: Decimal = ZERO,
    max_months: int | None = None,
) -> SimulationResult:
    """Schedule with a constant extra principal payment on top of the stated payment.

    Capped at ``max_simulation_months``.
    """
    payment = scenario.monthly_payment + extra_payment
    return _amortize(
        scenario,
        payment,
        max_months=max_months or settings.max_simulation_months,
        final_month=None,
    )


def yearly_summary(schedule: list[AmortizationMonth]) -> list[dict[str, Decimal | None]]:
    """Roll a traditional or sweep schedule up into loan years.

    Each year reports mortgage principal, mortgage interest, PMI, payments and
    the year-end mortgage balance. Sweep schedules also report credit-line
    interest, draws, and the year-end credit-line balance. Traditional
    schedules report zero for these, so both roll-ups line up column for column.
    A partial final year closes on the last scheduled month.
    """
    yearly: list[dict[str, Decimal | None]] = []
    totals = dict.fromkeys(("principal", "interest", "pmi", "payments", "line_interest", "drawn"), ZERO)

    for m in schedule:
        totals["principal"] += m.principal_paid
        totals["interest"] += m.interest_accrued
        totals["pmi"] += m.pmi_payment
        totals["payments"] += m.payment
        if isinstance(m, SweepMonth):
            totals["line_interest"] += m.credit_line_interest_accrued
            totals["drawn"] += m.credit_line_draw

        if m.month_index % 12 and m is not schedule[-1]:
            continue
        yearly.append({
            "year": Decimal((m.month_index - 1) // 12 + 1),
            "principal": totals["principal"],
            "interest": totals["interest"],
            "pmi": totals["pmi"],
            "payments": totals["payments"],
            "ending_balance": m.ending_principal_balance,
            "equity_pct": m.equity_pct,
            "credit_line_interest": totals["line_interest"],
            "credit_line_drawn": totals["drawn"],
            "credit_line_balance": (
                m.ending_credit_line_balance if isinstance(m, SweepMonth) else ZERO
            ),
        })
        totals = dict.fromkeys(totals, ZERO)

    return yearly
