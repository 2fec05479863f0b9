"""Input normalizer: raw scenario fields -> validated ScenarioInput.

Percentages arrive as whole numbers (6.5 means 6.5%), currency in decimal
units. Every violated field is reported, not just the first one.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from heloc_accelerator.config import settings
from heloc_accelerator.engine.amortization import minimum_payment
from heloc_accelerator.engine.errors import FieldError, InsufficientPaymentError, ValidationError
from heloc_accelerator.models.scenario import CarryingCosts, ScenarioInput

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")

# Raw carrying-cost field -> CarryingCosts attribute
CARRYING_COST_FIELDS = {
    "property_tax_monthly": "property_tax",
    "insurance_monthly": "insurance",
    "hoa_fees_monthly": "hoa",
    "pmi_monthly": "mortgage_insurance",
}


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, float):
        value = str(value)
    result = Decimal(value.strip() if isinstance(value, str) else value)
    if not result.is_finite():
        raise InvalidOperation(f"non-finite value {value!r}")
    return result


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class _FieldReader:
    """Collects parsed values and field errors from one raw mapping."""

    def __init__(self, raw: Mapping[str, Any]):
        self.raw = raw
        self.errors: list[FieldError] = []

    def fail(self, name: str, message: str) -> None:
        self.errors.append(FieldError(name, message))

    def number(self, name: str, required: bool = True) -> Decimal | None:
        value = self.raw.get(name)
        if _is_missing(value):
            if required:
                self.fail(name, f"{name} is required")
            return None
        try:
            return _to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            self.fail(name, f"{name} must be a valid number")
            return None

    def money(self, name: str, required: bool = True, positive: bool = False) -> Decimal | None:
        value = self.number(name, required)
        if value is None:
            return None
        if positive and value <= 0:
            self.fail(name, f"{name} must be greater than zero")
            return None
        if value < 0:
            self.fail(name, f"{name} cannot be negative")
            return None
        if value > settings.max_amount:
            self.fail(name, f"{name} cannot exceed ${settings.max_amount:,.0f}")
            return None
        try:
            return value.quantize(TWO_PLACES, ROUND_HALF_UP)
        except InvalidOperation:
            self.fail(name, f"{name} must be a valid number")
            return None

    def rate(self, name: str, required: bool = True) -> Decimal | None:
        value = self.number(name, required)
        if value is None:
            return None
        if value < 0 or value > settings.max_annual_rate_pct:
            self.fail(name, f"{name} must be between 0% and {settings.max_annual_rate_pct}%")
            return None
        return value / HUNDRED

    def months(self, name: str) -> int | None:
        value = self.number(name)
        if value is None:
            return None
        if value != value.to_integral_value():
            self.fail(name, f"{name} must be a whole number of months")
            return None
        if value < 1 or value > settings.max_term_months:
            self.fail(name, f"{name} must be between 1 and {settings.max_term_months} months")
            return None
        return int(value)


def check_payment(scenario: ScenarioInput) -> Decimal:
    """Raise InsufficientPaymentError unless the payment amortizes within the term.

    Returns the minimum required payment.
    """
    required = minimum_payment(
        scenario.mortgage_balance,
        scenario.mortgage_annual_rate,
        scenario.remaining_term_months,
    )
    first_interest = (
        scenario.mortgage_balance * scenario.mortgage_annual_rate / 12
    ).quantize(TWO_PLACES, ROUND_HALF_UP)
    if first_interest >= required:
        # Interest-only rounding at very long terms; the payment must still reduce principal
        required = first_interest + TWO_PLACES

    if scenario.monthly_payment < required:
        raise InsufficientPaymentError(scenario.monthly_payment, required)
    return required


def normalize_scenario(raw: Mapping[str, Any]) -> ScenarioInput:
    """Validate raw fields and convert them into computation units.

    Raises ValidationError listing every invalid field, or
    InsufficientPaymentError when the fields are individually valid but the
    payment cannot retire the balance within the term.
    """
    f = _FieldReader(raw)

    balance = f.money("mortgage_balance", positive=True)
    mortgage_rate = f.rate("mortgage_annual_rate")
    term = f.months("remaining_term_months")
    payment = f.money("monthly_payment", positive=True)

    credit_limit = f.money("credit_line_limit", required=False)
    credit_rate = f.rate("credit_line_annual_rate", required=False)
    credit_available = f.money("credit_line_available", required=False)

    gross = f.money("monthly_gross_income")
    net = f.money("monthly_net_income")
    expenses = f.money("monthly_expenses")

    property_value = f.money("property_value", required=False, positive=True)
    costs = {attr: f.money(name, required=False) for name, attr in CARRYING_COST_FIELDS.items()}

    # Cross-field rules
    if gross is not None and net is not None and net > gross:
        f.fail("monthly_net_income", "Net income cannot be higher than gross income")
    if credit_available is not None and credit_available > (credit_limit or 0):
        f.fail("credit_line_available", "Available credit cannot exceed the credit line limit")
    if property_value is not None and balance is not None and balance > property_value:
        f.fail("mortgage_balance", "Mortgage balance cannot exceed property value")

    if f.errors:
        logger.info("Rejected scenario: %s", ", ".join(e.field for e in f.errors))
        raise ValidationError(f.errors)

    scenario = ScenarioInput(
        mortgage_balance=balance,
        mortgage_annual_rate=mortgage_rate,
        remaining_term_months=term,
        monthly_payment=payment,
        credit_line_limit=credit_limit or Decimal("0"),
        credit_line_annual_rate=credit_rate or Decimal("0"),
        credit_line_available=credit_available,
        monthly_gross_income=gross,
        monthly_net_income=net,
        monthly_expenses=expenses,
        property_value=property_value,
        carrying_costs=CarryingCosts(
            **{attr: value for attr, value in costs.items() if value is not None}
        ),
    )

    required = check_payment(scenario)
    logger.debug(
        "Normalized scenario: balance=%s rate=%s term=%s payment=%s (minimum %s)",
        balance, mortgage_rate, term, payment, required,
    )
    return scenario
