"""Planner Command Line Interface.

Provides the calculator from a terminal:
- Full plan (contribution limit, tax reduction, projection table)
- Tax liability and reduction for an income
- The active tax bracket table

Usage:
    python -m rrsp_planner.cli plan --income 80000 --contribution 12000 --years 5
    python -m rrsp_planner.cli tax --income 100000 --deduction 12000
    python -m rrsp_planner.cli brackets
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable

from rrsp_planner.calculators.brackets import bracket_table_to_payload, resolve_bracket_table
from rrsp_planner.calculators.engine import PlannerEngine, PlannerResult
from rrsp_planner.calculators.errors import PlannerError
from rrsp_planner.calculators.types import PayInterval, PlannerInputs, Province
from rrsp_planner.config import Settings, get_settings

logger = logging.getLogger(__name__)


def parse_pay_interval(s: str) -> int:
    """Parse a pay interval name or a periods-per-year count."""
    try:
        return PayInterval[s.strip().upper()].value
    except KeyError:
        pass
    try:
        return int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected one of {', '.join(i.name.lower() for i in PayInterval)} or a number"
        ) from None


def parse_province(s: str) -> Province:
    """Parse a province by name, case-insensitively."""
    for province in Province:
        if s.strip().lower() in (province.value.lower(), province.name.lower()):
            return province
    raise argparse.ArgumentTypeError(f"unknown province: {s}")


def format_money(amount: float) -> str:
    """Format as dollars with two decimals."""
    return f"${amount:,.2f}"


class PlannerCli:
    """Planner Command Line Interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m rrsp_planner.cli",
            description="RRSP contribution planner",
        )
        parser.add_argument(
            "--brackets-file",
            default=self.settings.tax_brackets_file,
            help="JSON bracket table to use instead of the federal default",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # plan command
        plan = subparsers.add_parser(
            "plan",
            help="Contribution limit, tax reduction and projection table",
        )
        plan.add_argument("--income", type=float, required=True, help="Annual income")
        plan.add_argument(
            "--contribution",
            type=float,
            default=0.0,
            help="Planned contribution per year",
        )
        plan.add_argument(
            "--rate",
            type=float,
            default=7.0,
            help="Expected annual rate of return in percent (default: 7)",
        )
        plan.add_argument(
            "--pay-interval",
            type=parse_pay_interval,
            default=PayInterval.WEEKLY.value,
            help="weekly, biweekly, monthly or periods per year (default: weekly)",
        )
        plan.add_argument(
            "--years",
            type=int,
            default=0,
            help="Years to continue working",
        )
        plan.add_argument(
            "--province",
            type=parse_province,
            default=Province.ALBERTA,
            help="Province of residence (not used in calculations yet)",
        )
        plan.add_argument("--rrsp-room", type=float, default=0.0, help="RRSP contribution room")
        plan.add_argument("--fhsa-room", type=float, default=0.0, help="FHSA contribution room")
        plan.add_argument("--json", action="store_true", help="Output JSON")

        # tax command
        tax = subparsers.add_parser(
            "tax",
            help="Tax owed on an income and the saving from a deduction",
        )
        tax.add_argument("--income", type=float, required=True, help="Gross income")
        tax.add_argument("--deduction", type=float, default=0.0, help="Deduction amount")
        tax.add_argument("--json", action="store_true", help="Output JSON")

        # brackets command
        subparsers.add_parser(
            "brackets",
            help="Show the active tax bracket table",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "plan": self._cmd_plan,
            "tax": self._cmd_tax,
            "brackets": self._cmd_brackets,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return handler(parsed)
        except PlannerError as e:
            logger.debug("Command %s failed", parsed.command, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def _engine(self, args: argparse.Namespace) -> PlannerEngine:
        return PlannerEngine(resolve_bracket_table(args.brackets_file), self.settings)

    def _cmd_plan(self, args: argparse.Namespace) -> int:
        """Calculate and print a full plan."""
        inputs = PlannerInputs(
            province=args.province,
            annual_income=args.income,
            rrsp_room=args.rrsp_room,
            fhsa_room=args.fhsa_room,
            planned_contribution=args.contribution,
            rate_of_return_percent=args.rate,
            pay_interval=args.pay_interval,
            years_to_work=args.years,
        )
        result = self._engine(args).calculate(inputs)

        if args.json:
            print(json.dumps(self._plan_to_dict(result), indent=2))
            return 0

        print(f"Province: {Province(inputs.province).value}")
        print(f"Maximum RRSP Contribution Limit: {format_money(result.contribution_limit)}")
        print(f"Estimated Tax Reduction: {format_money(result.tax_reduction)}")

        if not result.rows:
            return 0

        print("\nContribution Table")
        headers = ("Year", "Total Contributed", "Contribution w/ Returns", "Balance")
        table = [
            (
                str(row.year),
                format_money(row.contributed_this_year),
                format_money(row.contribution_growth_this_year),
                format_money(row.ending_balance),
            )
            for row in result.rows
        ]
        widths = [max(len(h), *(len(r[i]) for r in table)) for i, h in enumerate(headers)]
        print("  ".join(h.rjust(w) for h, w in zip(headers, widths)))
        for r in table:
            print("  ".join(cell.rjust(w) for cell, w in zip(r, widths)))

        return 0

    def _plan_to_dict(self, result: PlannerResult) -> dict[str, Any]:
        inputs = result.inputs
        return {
            "inputs": {
                "province": Province(inputs.province).value,
                "annual_income": inputs.annual_income,
                "rrsp_room": inputs.rrsp_room,
                "fhsa_room": inputs.fhsa_room,
                "planned_contribution": inputs.planned_contribution,
                "rate_of_return_percent": inputs.rate_of_return_percent,
                "pay_interval": inputs.pay_interval,
                "years_to_work": inputs.years_to_work,
            },
            "contribution_limit": result.contribution_limit,
            "tax_reduction": result.tax_reduction,
            "rows": [row.to_dict() for row in result.rows],
            "inputs_fingerprint": result.inputs_fingerprint,
        }

    def _cmd_tax(self, args: argparse.Namespace) -> int:
        """Print tax owed and the saving from a deduction."""
        breakdown = self._engine(args).tax_calculator.calculate_reduction(
            args.income, args.deduction
        )

        if args.json:
            print(
                json.dumps(
                    {
                        "gross_income": breakdown.gross_income,
                        "deduction": breakdown.deduction,
                        "taxable_income": breakdown.taxable_income,
                        "tax_before": breakdown.tax_before,
                        "tax_after": breakdown.tax_after,
                        "reduction": breakdown.reduction,
                    },
                    indent=2,
                )
            )
            return 0

        print(f"Tax on {format_money(breakdown.gross_income)}: {format_money(breakdown.tax_before)}")
        if args.deduction:
            print(
                f"Tax on {format_money(breakdown.taxable_income)} after deduction: "
                f"{format_money(breakdown.tax_after)}"
            )
            print(f"Estimated Tax Reduction: {format_money(breakdown.reduction)}")
        return 0

    def _cmd_brackets(self, args: argparse.Namespace) -> int:
        """Print the bracket table."""
        payload = bracket_table_to_payload(self._engine(args).brackets)
        previous = 0.0
        for b in payload["brackets"]:
            upper = "and up" if b["threshold"] is None else f"to {format_money(b['threshold'])}"
            print(f"  {format_money(previous)} {upper}: {b['rate'] * 100:g}%")
            if b["threshold"] is not None:
                previous = b["threshold"]
        return 0


def main() -> int:
    """CLI entry point."""
    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli = PlannerCli(settings)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
