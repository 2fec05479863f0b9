"""Traditional vs sweep comparison.

Pure functions. Both results must come from converged simulations;
simulate_sweep raises instead of returning a partial result.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from heloc_accelerator.engine.amortization import simulate_traditional
from heloc_accelerator.engine.normalize import normalize_scenario
from heloc_accelerator.engine.sweep import simulate_sweep
from heloc_accelerator.models.results import (
    ComparisonResult,
    SimulationResult,
    StrategyComparison,
    SweepSimulationResult,
)
from heloc_accelerator.models.scenario import ScenarioInput, SweepPolicy

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")


def average_monthly_outlay(result: SimulationResult) -> Decimal:
    if result.payoff_months == 0:
        return Decimal("0")
    return (result.total_paid / result.payoff_months).quantize(TWO_PLACES, ROUND_HALF_UP)


def compare_results(
    traditional: SimulationResult,
    sweep: SimulationResult,
) -> ComparisonResult:
    """Savings of the sweep schedule relative to the traditional one."""
    months_saved = max(traditional.payoff_months - sweep.payoff_months, 0)
    interest_saved = traditional.total_interest_paid - sweep.total_interest_paid

    if traditional.total_interest_paid > 0:
        percent_saved = (interest_saved / traditional.total_interest_paid * 100).quantize(
            TWO_PLACES, ROUND_HALF_UP
        )
    else:
        percent_saved = Decimal("0")

    return ComparisonResult(
        months_saved=months_saved,
        years_saved=(Decimal(months_saved) / 12).quantize(ONE_PLACE, ROUND_HALF_UP),
        interest_saved=interest_saved,
        percent_interest_saved=percent_saved,
        monthly_payment_difference=average_monthly_outlay(sweep) - traditional.monthly_payment,
    )


def run_comparison(
    scenario: ScenarioInput,
    policy: SweepPolicy | None = None,
) -> StrategyComparison:
    """Run both simulators on one scenario and compare them."""
    traditional = simulate_traditional(scenario)
    sweep: SweepSimulationResult = simulate_sweep(scenario, policy)
    comparison = compare_results(traditional, sweep)

    logger.info(
        "Compared strategies: traditional %d months, sweep %d months, interest saved %s",
        traditional.payoff_months, sweep.payoff_months, comparison.interest_saved,
    )
    return StrategyComparison(
        scenario=scenario,
        traditional=traditional,
        sweep=sweep,
        comparison=comparison,
    )


def compare_scenario(
    raw: Mapping[str, Any],
    policy: SweepPolicy | None = None,
) -> StrategyComparison:
    """Normalize raw fields, then run_comparison."""
    return run_comparison(normalize_scenario(raw), policy)
