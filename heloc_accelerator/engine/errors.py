"""Named failures raised by the payoff engine.

Callers (API, CLI) translate these into user-facing messages. Validation
errors are raised before any simulation begins.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class EngineError(Exception):
    pass


class ValidationError(EngineError, ValueError):
    def __init__(self, errors: list[FieldError], message: str = "Invalid scenario input"):
        self.errors = list(errors)
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class InsufficientPaymentError(ValidationError):
    """The payment cannot amortize the balance within the remaining term."""

    def __init__(self, monthly_payment: Decimal, minimum_payment: Decimal):
        self.monthly_payment = monthly_payment
        self.minimum_payment = minimum_payment
        message = (
            f"Monthly payment ${monthly_payment:,.2f} does not amortize the balance;"
            f" at least ${minimum_payment:,.2f} is required"
        )
        super().__init__([FieldError("monthly_payment", message)], message)


class SimulationDidNotConvergeError(EngineError):
    """Sweep simulation hit the iteration ceiling with a balance outstanding."""

    def __init__(self, schedule: list, months_simulated: int):
        self.schedule = schedule
        self.months_simulated = months_simulated
        super().__init__(
            f"Sweep simulation did not pay off both balances within {months_simulated} months"
        )
