"""Sweep (HELOC) simulation: mortgage and credit line amortized side by side.

Monthly order:
    1. Accrue mortgage and credit-line interest independently. Line interest
       is added to the line balance.
    2. Apply the scheduled mortgage payment (interest, then principal). After
       mortgage payoff the freed payment joins the surplus if the policy says so.
    3. Surplus repays the credit line.
    4. Remaining surplus prepays mortgage principal.
    5. Draw from the line onto mortgage principal, capped by available credit
       and the mortgage balance. CHUNK_DRAW draws a chunk when the line is at
       or below the redraw threshold. MONTHLY_DRAW draws up to one month's
       discretionary income every month. PREPAY never draws.

Pure computation. No I/O.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from heloc_accelerator.config import settings
from heloc_accelerator.engine.amortization import equity_pct, pmi_for_month
from heloc_accelerator.engine.errors import SimulationDidNotConvergeError
from heloc_accelerator.models.results import SweepMonth, SweepSimulationResult
from heloc_accelerator.models.scenario import ScenarioInput, SweepPolicy, SweepStrategy

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def _cents(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def _draw_allowed(scenario: ScenarioInput, policy: SweepPolicy, mortgage: Decimal) -> bool:
    if not policy.require_rate_advantage:
        return True
    if scenario.mortgage_annual_rate >= scenario.credit_line_annual_rate:
        return True
    # Close to payoff a draw retires the mortgage outright
    return mortgage < scenario.credit_line_limit * policy.payoff_window_pct


def _draw_request(policy: SweepPolicy, line: Decimal, chunk: Decimal, surplus: Decimal) -> Decimal:
    """Amount the strategy asks to draw this month, before the credit and mortgage caps."""
    if policy.strategy is SweepStrategy.CHUNK_DRAW and line <= policy.redraw_threshold:
        return chunk
    if policy.strategy is SweepStrategy.MONTHLY_DRAW:
        return surplus
    return ZERO


def simulation_ceiling(scenario: ScenarioInput) -> int:
    return max(scenario.remaining_term_months, settings.max_simulation_months)


def simulate_sweep(
    scenario: ScenarioInput,
    policy: SweepPolicy | None = None,
) -> SweepSimulationResult:
    """Run the dual-balance sweep schedule until both balances are zero.

    Raises SimulationDidNotConvergeError (carrying the partial schedule) if
    the ceiling is reached first.
    """
    policy = policy or SweepPolicy.from_settings()

    mortgage_rate = scenario.mortgage_annual_rate / 12
    line_rate = scenario.credit_line_annual_rate / 12
    term = scenario.remaining_term_months
    payment = scenario.monthly_payment
    base_surplus = max(scenario.monthly_discretionary_income, ZERO)
    credit_cap = scenario.available_credit
    chunk = policy.chunk_amount if policy.chunk_amount is not None else credit_cap
    ceiling = simulation_ceiling(scenario)

    mortgage = scenario.mortgage_balance
    line = ZERO

    schedule: list[SweepMonth] = []
    total_mortgage_interest = ZERO
    total_line_interest = ZERO
    total_principal = ZERO
    total_drawn = ZERO
    total_paid = ZERO
    total_pmi = ZERO
    line_balance_sum = ZERO
    max_line = ZERO
    mortgage_payoff_month = 0
    line_payoff_month = 0

    for month in range(1, ceiling + 1):
        if mortgage <= 0 and line <= 0:
            break
        start_mortgage = mortgage
        start_line = line

        mortgage_interest = _cents(mortgage * mortgage_rate)
        line_interest = _cents(line * line_rate)
        line += line_interest

        # Scheduled payment
        freed = ZERO
        if mortgage > 0:
            scheduled = min(payment - mortgage_interest, mortgage)
            if month == term:
                scheduled = mortgage
        else:
            scheduled = ZERO
            if policy.redirect_freed_payment:
                freed = payment
        mortgage -= scheduled

        surplus = base_surplus + freed

        repayment = min(surplus, line)
        line -= repayment
        surplus -= repayment

        extra = min(surplus, mortgage)
        mortgage -= extra

        draw = ZERO
        wanted = _draw_request(policy, line, chunk, base_surplus)
        if wanted and base_surplus > 0 and mortgage > 0 and _draw_allowed(scenario, policy, mortgage):
            draw = max(min(wanted, credit_cap - line, mortgage), ZERO)
            line += draw
            mortgage -= draw

        principal_paid = scheduled + extra + draw
        cash_outlay = mortgage_interest + scheduled + extra + repayment
        pmi = pmi_for_month(scenario, start_mortgage)

        total_mortgage_interest += mortgage_interest
        total_line_interest += line_interest
        total_principal += principal_paid
        total_drawn += draw
        total_paid += cash_outlay
        total_pmi += pmi
        line_balance_sum += line
        max_line = max(max_line, line)

        if start_mortgage > 0 and mortgage == 0:
            mortgage_payoff_month = month
        if start_line > 0 and line == 0:
            line_payoff_month = month

        schedule.append(SweepMonth(
            month_index=month,
            starting_principal_balance=start_mortgage,
            interest_accrued=mortgage_interest,
            principal_paid=principal_paid,
            ending_principal_balance=mortgage,
            payment=mortgage_interest + principal_paid,
            cumulative_interest=total_mortgage_interest + total_line_interest,
            pmi_payment=pmi,
            equity_pct=equity_pct(scenario.property_value, mortgage),
            starting_credit_line_balance=start_line,
            credit_line_interest_accrued=line_interest,
            credit_line_draw=draw,
            credit_line_repayment=repayment,
            ending_credit_line_balance=line,
            extra_principal_paid=extra + draw,
            surplus_used=repayment + extra,
            cash_outlay=cash_outlay,
        ))

    if mortgage > 0 or line > 0:
        logger.warning(
            "Sweep did not converge in %d months (mortgage %s, credit line %s)",
            ceiling, mortgage, line,
        )
        raise SimulationDidNotConvergeError(schedule, len(schedule))

    payoff_months = len(schedule)
    logger.debug(
        "Sweep (%s) paid off in %d months: mortgage month %d, line month %d, max line %s",
        policy.strategy.value, payoff_months, mortgage_payoff_month, line_payoff_month, max_line,
    )

    return SweepSimulationResult(
        schedule=schedule,
        monthly_payment=payment,
        payoff_months=payoff_months,
        total_interest_paid=total_mortgage_interest + total_line_interest,
        total_principal_paid=total_principal,
        total_paid=total_paid,
        total_pmi_paid=total_pmi,
        total_mortgage_interest=total_mortgage_interest,
        total_credit_line_interest=total_line_interest,
        total_credit_line_drawn=total_drawn,
        max_credit_line_balance_used=max_line,
        average_credit_line_balance=(
            _cents(line_balance_sum / payoff_months) if payoff_months else ZERO
        ),
        mortgage_payoff_month=mortgage_payoff_month,
        credit_line_payoff_month=line_payoff_month,
        policy=policy,
    )
