"""Canonical test fixtures used across all engine tests.

Fixture: $300K balance, 6.5% rate, 360 months left, $1,896.20 payment.
Credit line: $50K limit at 6.0%. Household: $2,000/mo discretionary.
"""

import pytest
from decimal import Decimal

from heloc_accelerator.models.scenario import ScenarioInput


@pytest.fixture
def canonical_raw() -> dict:
    """Raw form fields, percentages as whole numbers."""
    return {
        "mortgage_balance": "300000",
        "mortgage_annual_rate": "6.5",
        "remaining_term_months": 360,
        "monthly_payment": "1896.20",
        "credit_line_limit": "50000",
        "credit_line_annual_rate": "6.0",
        "monthly_gross_income": "12000",
        "monthly_net_income": "9000",
        "monthly_expenses": "7000",
    }


@pytest.fixture
def canonical_scenario() -> ScenarioInput:
    return ScenarioInput(
        mortgage_balance=Decimal("300000.00"),
        mortgage_annual_rate=Decimal("0.065"),
        remaining_term_months=360,
        monthly_payment=Decimal("1896.20"),
        credit_line_limit=Decimal("50000.00"),
        credit_line_annual_rate=Decimal("0.06"),
        monthly_gross_income=Decimal("12000.00"),
        monthly_net_income=Decimal("9000.00"),
        monthly_expenses=Decimal("7000.00"),
    )


@pytest.fixture
def no_surplus_scenario() -> ScenarioInput:
    """Net income fully consumed by expenses: nothing to sweep."""
    return ScenarioInput(
        mortgage_balance=Decimal("300000.00"),
        mortgage_annual_rate=Decimal("0.065"),
        remaining_term_months=360,
        monthly_payment=Decimal("1896.20"),
        credit_line_limit=Decimal("50000.00"),
        credit_line_annual_rate=Decimal("0.06"),
        monthly_gross_income=Decimal("12000.00"),
        monthly_net_income=Decimal("9000.00"),
        monthly_expenses=Decimal("9000.00"),
    )


@pytest.fixture
def runaway_scenario() -> ScenarioInput:
    """Credit-line interest outruns a $50/mo surplus."""
    return ScenarioInput(
        mortgage_balance=Decimal("300000.00"),
        mortgage_annual_rate=Decimal("0.08"),
        remaining_term_months=360,
        monthly_payment=Decimal("2300.00"),
        credit_line_limit=Decimal("100000.00"),
        credit_line_annual_rate=Decimal("0.08"),
        monthly_gross_income=Decimal("8000.00"),
        monthly_net_income=Decimal("6000.00"),
        monthly_expenses=Decimal("5950.00"),
    )
