from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from heloc_accelerator.config import settings


@dataclass(frozen=True)
class CarryingCosts:
    """Monthly property carrying costs. Informational only: never amortized."""
    property_tax: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    hoa: Decimal = Decimal("0")
    mortgage_insurance: Decimal = Decimal("0")  # PMI, removable at 20% equity

    @property
    def total(self) -> Decimal:
        return self.property_tax + self.insurance + self.hoa + self.mortgage_insurance


@dataclass(frozen=True)
class ScenarioInput:
    # Mortgage
    mortgage_balance: Decimal
    mortgage_annual_rate: Decimal  # Fraction, e.g. 0.065
    remaining_term_months: int
    monthly_payment: Decimal

    # Credit line
    credit_line_limit: Decimal = Decimal("0")
    credit_line_annual_rate: Decimal = Decimal("0")
    credit_line_available: Decimal | None = None  # Defaults to the limit

    # Income (monthly)
    monthly_gross_income: Decimal = Decimal("0")
    monthly_net_income: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")

    # Property
    property_value: Decimal | None = None
    carrying_costs: CarryingCosts = field(default_factory=CarryingCosts)

    @property
    def monthly_discretionary_income(self) -> Decimal:
        return self.monthly_net_income - self.monthly_expenses

    @property
    def available_credit(self) -> Decimal:
        if self.credit_line_available is None:
            return self.credit_line_limit
        return self.credit_line_available

    @property
    def monthly_carrying_costs(self) -> Decimal:
        return self.carrying_costs.total


class SweepStrategy(str, Enum):
    PREPAY = "prepay"  # Surplus repays the line, then prepays the mortgage. Never draws.
    CHUNK_DRAW = "chunk_draw"  # Also draws lump sums from the line onto mortgage principal.
    MONTHLY_DRAW = "monthly_draw"  # Draws up to one month's discretionary income every month.


@dataclass(frozen=True)
class SweepPolicy:
    """Draw/repay rules for the sweep simulation.

    Monthly order is fixed: surplus repays the credit line and the remainder
    prepays mortgage principal. Then, for the drawing strategies:

    - CHUNK_DRAW draws a new chunk once the line balance is at or below
      ``redraw_threshold``.
    - MONTHLY_DRAW draws up to the monthly discretionary income every month,
      whatever the line balance.
    """
    strategy: SweepStrategy = SweepStrategy.CHUNK_DRAW
    chunk_amount: Decimal | None = None  # None: all available credit
    redraw_threshold: Decimal = Decimal("0")
    require_rate_advantage: bool = True  # Only draw when mortgage rate >= line rate
    payoff_window_pct: Decimal = Decimal("0.10")  # ...unless mortgage < this share of the limit
    redirect_freed_payment: bool = True  # Old mortgage payment joins surplus after payoff

    def __post_init__(self):
        chunk = self.chunk_amount
        if chunk is not None and (not chunk.is_finite() or chunk <= 0):
            raise ValueError(f"chunk_amount must be a positive amount, got {chunk}")

    @classmethod
    def from_settings(cls, **overrides) -> "SweepPolicy":
        values = dict(
            strategy=SweepStrategy(settings.default_sweep_strategy),
            redraw_threshold=settings.redraw_threshold,
            require_rate_advantage=settings.require_rate_advantage,
            payoff_window_pct=settings.payoff_window_pct,
            redirect_freed_payment=settings.redirect_freed_payment,
        )
        values.update(overrides)
        return cls(**values)
