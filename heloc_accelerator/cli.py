"""CLI for comparing a traditional payoff against the HELOC sweep strategy.

Usage:
    python -m heloc_accelerator.cli --balance 300000 --rate 6.5 --term 360 --payment 1896.20 \
        --heloc-limit 50000 --heloc-rate 8.25 --gross 12000 --net 9000 --expenses 6500
    python -m heloc_accelerator.cli ... --strategy prepay --yearly
"""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation

from heloc_accelerator.config import settings
from heloc_accelerator.engine.amortization import yearly_summary
from heloc_accelerator.engine.comparison import compare_scenario
from heloc_accelerator.engine.errors import (
    InsufficientPaymentError,
    SimulationDidNotConvergeError,
    ValidationError,
)
from heloc_accelerator.models.results import StrategyComparison
from heloc_accelerator.models.scenario import SweepPolicy, SweepStrategy

EXIT_INVALID = 2
EXIT_NOT_CONVERGED = 3


def _chunk_arg(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError(f"chunk must be a positive amount: {value!r}")
    return amount


def print_comparison(result: StrategyComparison) -> None:
    trad = result.traditional
    sweep = result.sweep
    c = result.comparison

    print(f"\n{'=' * 60}")
    print(f"  Payoff Comparison ({sweep.policy.strategy.value})")
    print(f"{'=' * 60}")
    print(f"  {'':<26}{'Traditional':>16}{'Sweep':>16}")
    print(f"  {'Payoff (months)':<26}{trad.payoff_months:>16}{sweep.payoff_months:>16}")
    print(f"  {'Total interest':<26}{trad.total_interest_paid:>16,.2f}{sweep.total_interest_paid:>16,.2f}")
    print(f"  {'Total paid':<26}{trad.total_paid:>16,.2f}{sweep.total_paid:>16,.2f}")
    print()
    print(f"  Credit line interest:   ${sweep.total_credit_line_interest:,.2f}")
    print(f"  Max credit line used:   ${sweep.max_credit_line_balance_used:,.2f}")
    print(f"  Avg credit line:        ${sweep.average_credit_line_balance:,.2f}")
    print()
    print(f"  Time saved:             {c.months_saved} months ({c.years_saved} years)")
    print(f"  Interest saved:         ${c.interest_saved:,.2f} ({c.percent_interest_saved}%)")
    print(f"  Monthly outlay delta:   ${c.monthly_payment_difference:,.2f}")
    print()


def print_yearly(result: StrategyComparison) -> None:
    trad_years = yearly_summary(result.traditional.schedule)
    sweep_years = yearly_summary(result.sweep.schedule)

    print(f"  {'Year':>4}  {'Trad balance':>14}  {'Sweep balance':>14}  {'Sweep line':>12}  {'Line interest':>13}")
    for i, year in enumerate(trad_years):
        sweep = sweep_years[i] if i < len(sweep_years) else {}
        print(
            f"  {int(year['year']):>4}  {year['ending_balance']:>14,.2f}"
            f"  {sweep.get('ending_balance', 0):>14,.2f}"
            f"  {sweep.get('credit_line_balance', 0):>12,.2f}"
            f"  {sweep.get('credit_line_interest', 0):>13,.2f}"
        )
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HELOC sweep vs traditional payoff")
    parser.add_argument("--balance", required=True, help="Current mortgage balance")
    parser.add_argument("--rate", required=True, help="Mortgage annual rate in percent (e.g. 6.5)")
    parser.add_argument("--term", required=True, help="Remaining term in months")
    parser.add_argument("--payment", required=True, help="Monthly principal and interest payment")
    parser.add_argument("--heloc-limit", default="0", help="Credit line limit")
    parser.add_argument("--heloc-rate", default="0", help="Credit line annual rate in percent")
    parser.add_argument("--heloc-available", default=None, help="Available credit (default: limit)")
    parser.add_argument("--gross", required=True, help="Monthly gross income")
    parser.add_argument("--net", required=True, help="Monthly net income")
    parser.add_argument("--expenses", required=True, help="Monthly expenses")
    parser.add_argument("--property-value", default=None, help="Property value (enables PMI removal)")
    parser.add_argument("--pmi", default=None, help="Monthly mortgage insurance")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in SweepStrategy],
        default=settings.default_sweep_strategy,
        help="Sweep strategy",
    )
    parser.add_argument(
        "--chunk", type=_chunk_arg, default=None,
        help="Credit line chunk size (default: all available credit)",
    )
    parser.add_argument("--yearly", action="store_true", help="Print year-end balances")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    raw = {
        "mortgage_balance": args.balance,
        "mortgage_annual_rate": args.rate,
        "remaining_term_months": args.term,
        "monthly_payment": args.payment,
        "credit_line_limit": args.heloc_limit,
        "credit_line_annual_rate": args.heloc_rate,
        "credit_line_available": args.heloc_available,
        "monthly_gross_income": args.gross,
        "monthly_net_income": args.net,
        "monthly_expenses": args.expenses,
        "property_value": args.property_value,
        "pmi_monthly": args.pmi,
    }
    overrides = {"strategy": SweepStrategy(args.strategy)}
    if args.chunk is not None:
        overrides["chunk_amount"] = args.chunk
    policy = SweepPolicy.from_settings(**overrides)

    try:
        result = compare_scenario(raw, policy)
    except InsufficientPaymentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except ValidationError as e:
        for err in e.errors:
            print(f"error: {err.field}: {err.message}", file=sys.stderr)
        return EXIT_INVALID
    except SimulationDidNotConvergeError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_NOT_CONVERGED

    print_comparison(result)
    if args.yearly:
        print_yearly(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
