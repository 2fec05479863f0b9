from dataclasses import replace
from decimal import Decimal

import pytest

from heloc_accelerator.engine.amortization import (
    minimum_payment,
    remaining_balance,
    simulate_traditional,
    payoff_with_extra_payment,
    yearly_summary,
)
from heloc_accelerator.engine.errors import SimulationDidNotConvergeError
from heloc_accelerator.engine.sweep import simulate_sweep
from heloc_accelerator.models.scenario import CarryingCosts, SweepPolicy, SweepStrategy


class TestMinimumPayment:
    def test_standard_mortgage(self):
        """$300K loan at 6.5% for 360 months."""
        pmt = minimum_payment(Decimal("300000"), Decimal("0.065"), 360)
        assert pmt == Decimal("1896.20")

    def test_seven_percent(self):
        pmt = minimum_payment(Decimal("400000"), Decimal("0.07"), 360)
        assert pmt == Decimal("2661.21")

    def test_zero_rate(self):
        pmt = minimum_payment(Decimal("360000"), Decimal("0"), 360)
        assert pmt == Decimal("1000.00")

    def test_zero_principal(self):
        assert minimum_payment(Decimal("0"), Decimal("0.065"), 360) == Decimal("0")


class TestRemainingBalance:
    def test_before_first_payment(self):
        assert remaining_balance(Decimal("300000"), Decimal("0.065"), 360, 0) == Decimal("300000")

    def test_after_term(self):
        assert remaining_balance(Decimal("300000"), Decimal("0.065"), 360, 360) == Decimal("0")

    def test_matches_schedule(self, canonical_scenario):
        balance = remaining_balance(Decimal("300000"), Decimal("0.065"), 360, 84)
        schedule = simulate_traditional(canonical_scenario).schedule
        # Stated payment is rounded to the cent, so the schedule lags slightly
        assert abs(schedule[83].ending_principal_balance - balance) < Decimal("1.00")

    def test_zero_rate_linear(self):
        balance = remaining_balance(Decimal("120000"), Decimal("0"), 120, 60)
        assert balance == Decimal("60000.00")


class TestSimulateTraditional:
    def test_reference_scenario(self, canonical_scenario):
        result = simulate_traditional(canonical_scenario)
        assert result.payoff_months == 360
        # One cent per month, compounded over 360 months at 6.5%
        assert abs(result.total_interest_paid - Decimal("382632.00")) <= Decimal("11.07")

    def test_first_payment_mostly_interest(self, canonical_scenario):
        first = simulate_traditional(canonical_scenario).schedule[0]
        # 300000 * 0.065 / 12
        assert first.interest_accrued == Decimal("1625.00")
        assert first.principal_paid == Decimal("271.20")
        assert first.ending_principal_balance == Decimal("299728.80")

    def test_conservation(self, canonical_scenario):
        result = simulate_traditional(canonical_scenario)
        assert result.total_interest_paid + canonical_scenario.mortgage_balance == result.total_paid
        assert result.total_principal_paid == canonical_scenario.mortgage_balance

    def test_principal_never_increases(self, canonical_scenario):
        for m in simulate_traditional(canonical_scenario).schedule:
            assert m.ending_principal_balance <= m.starting_principal_balance
            assert m.ending_principal_balance == m.starting_principal_balance - m.principal_paid
            assert m.ending_principal_balance >= 0

    def test_final_balance_zero(self, canonical_scenario):
        schedule = simulate_traditional(canonical_scenario).schedule
        assert schedule[-1].ending_principal_balance == Decimal("0")

    def test_final_payment_absorbs_rounding_residual(self, canonical_scenario):
        last = simulate_traditional(canonical_scenario).schedule[-1]
        assert last.payment >= Decimal("1896.20")
        assert last.payment - Decimal("1896.20") < Decimal("20")

    def test_overpayment_ends_early_without_overshoot(self, canonical_scenario):
        scenario = replace(canonical_scenario, monthly_payment=Decimal("5000.00"))
        result = simulate_traditional(scenario)
        assert result.payoff_months < 360
        last = result.schedule[-1]
        assert last.principal_paid == last.starting_principal_balance
        assert last.payment <= Decimal("5000.00")

    def test_zero_rate(self, canonical_scenario):
        scenario = replace(
            canonical_scenario,
            mortgage_balance=Decimal("12000.00"),
            mortgage_annual_rate=Decimal("0"),
            remaining_term_months=12,
            monthly_payment=Decimal("1000.00"),
        )
        result = simulate_traditional(scenario)
        assert result.payoff_months == 12
        assert result.total_interest_paid == Decimal("0")
        assert result.total_paid == Decimal("12000.00")

    def test_deterministic(self, canonical_scenario):
        assert simulate_traditional(canonical_scenario) == simulate_traditional(canonical_scenario)


class TestMortgageInsurance:
    def test_charged_every_month_without_property_value(self, canonical_scenario):
        scenario = replace(
            canonical_scenario,
            carrying_costs=CarryingCosts(mortgage_insurance=Decimal("150.00")),
        )
        result = simulate_traditional(scenario)
        assert result.total_pmi_paid == Decimal("150.00") * 360

    def test_removed_at_twenty_percent_equity(self, canonical_scenario):
        scenario = replace(
            canonical_scenario,
            property_value=Decimal("350000.00"),
            carrying_costs=CarryingCosts(mortgage_insurance=Decimal("150.00")),
        )
        schedule = simulate_traditional(scenario).schedule
        assert schedule[0].pmi_payment == Decimal("150.00")
        assert schedule[-1].pmi_payment == Decimal("0")
        # Once dropped it stays dropped
        dropped = [m.month_index for m in schedule if m.pmi_payment == 0]
        assert dropped == list(range(dropped[0], 361))

    def test_no_pmi_with_enough_equity(self, canonical_scenario):
        scenario = replace(
            canonical_scenario,
            property_value=Decimal("500000.00"),
            carrying_costs=CarryingCosts(mortgage_insurance=Decimal("150.00")),
        )
        result = simulate_traditional(scenario)
        assert result.total_pmi_paid == Decimal("0")
        assert result.schedule[0].equity_pct == Decimal("40.05")

    def test_pmi_does_not_touch_interest(self, canonical_scenario):
        scenario = replace(
            canonical_scenario,
            carrying_costs=CarryingCosts(mortgage_insurance=Decimal("150.00")),
        )
        assert (
            simulate_traditional(scenario).total_interest_paid
            == simulate_traditional(canonical_scenario).total_interest_paid
        )


class TestPayoffWithExtraPayment:
    def test_extra_shortens_payoff(self, canonical_scenario):
        base = simulate_traditional(canonical_scenario)
        faster = payoff_with_extra_payment(canonical_scenario, Decimal("500"))
        assert faster.payoff_months < base.payoff_months
        assert faster.total_interest_paid < base.total_interest_paid

    def test_cap_raises(self, canonical_scenario):
        with pytest.raises(SimulationDidNotConvergeError) as exc:
            payoff_with_extra_payment(canonical_scenario, Decimal("0"), max_months=120)
        assert exc.value.months_simulated == 120
        assert len(exc.value.schedule) == 120


class TestYearlySummary:
    def test_thirty_years(self, canonical_scenario):
        result = simulate_traditional(canonical_scenario)
        yearly = yearly_summary(result.schedule)
        assert len(yearly) == 30

    def test_yearly_totals_match(self, canonical_scenario):
        result = simulate_traditional(canonical_scenario)
        yearly = yearly_summary(result.schedule)
        assert sum(y["interest"] for y in yearly) == result.total_interest_paid
        assert sum(y["principal"] for y in yearly) == result.total_principal_paid

    def test_partial_final_year(self, canonical_scenario):
        scenario = replace(canonical_scenario, monthly_payment=Decimal("5000.00"))
        result = simulate_traditional(scenario)
        yearly = yearly_summary(result.schedule)
        assert yearly[-1]["ending_balance"] == Decimal("0")
        assert len(yearly) == (result.payoff_months + 11) // 12

    def test_traditional_has_no_credit_line(self, canonical_scenario):
        yearly = yearly_summary(simulate_traditional(canonical_scenario).schedule)
        assert all(y["credit_line_balance"] == Decimal("0") for y in yearly)
        assert all(y["credit_line_interest"] == Decimal("0") for y in yearly)

    def test_sweep_credit_line_by_year(self, canonical_scenario):
        result = simulate_sweep(canonical_scenario, SweepPolicy(strategy=SweepStrategy.CHUNK_DRAW))
        yearly = yearly_summary(result.schedule)
        assert yearly[0]["credit_line_drawn"] == Decimal("50000.00")
        assert yearly[0]["credit_line_balance"] == result.schedule[11].ending_credit_line_balance
        assert yearly[-1]["credit_line_balance"] == Decimal("0")
        assert sum(y["credit_line_interest"] for y in yearly) == result.total_credit_line_interest
        assert sum(y["credit_line_drawn"] for y in yearly) == result.total_credit_line_drawn
        assert len(yearly) == (result.payoff_months + 11) // 12
