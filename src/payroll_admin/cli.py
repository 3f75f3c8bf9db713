"""Payroll admin command line interface.

Provides operator tools for:
- Resetting the stored state to seed data
- One-off pay calculations
- CSV export of employees and payslips
- A dashboard summary
- Running the API server

Usage:
    payroll-admin seed --seed 42
    payroll-admin calc --base-salary 60000 --earning Bonus=1000 --deduction Loan=200
    payroll-admin export-employees --output employees.csv
    payroll-admin export-payslips --run-id run-1
    payroll-admin summary
    payroll-admin serve
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable

from payroll_admin.calculators.engine import PayrollEngine
from payroll_admin.calculators.types import LineItem
from payroll_admin.config import Settings, configure_logging, get_settings
from payroll_admin.formatting import format_currency, format_date
from payroll_admin.services.csv_export import (
    export_employees_csv,
    export_filename,
    export_payslips_csv,
)
from payroll_admin.services.reports import build_dashboard
from payroll_admin.services.store import Store

logger = logging.getLogger(__name__)


def parse_line_item(s: str) -> LineItem:
    """Parse LABEL=AMOUNT into a line item."""
    label, sep, amount = s.rpartition("=")
    if not sep or not label:
        raise argparse.ArgumentTypeError(f"expected LABEL=AMOUNT, got {s!r}")
    try:
        return LineItem(type=label, amount=Decimal(amount))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount in {s!r}")


def parse_amount(s: str) -> Decimal:
    try:
        return Decimal(s)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {s!r}")


class PayrollAdminCli:
    """Payroll admin command line interface."""

    def __init__(self, store: Store | None = None, settings: Settings | None = None) -> None:
        self._store = store
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    @property
    def store(self) -> Store:
        if self._store is None:
            self._store = Store.from_settings(self.settings)
        return self._store

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="payroll-admin",
            description="Payroll admin operator tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # seed command
        seed = subparsers.add_parser(
            "seed",
            help="Replace stored data with generated seed data",
        )
        seed.add_argument(
            "--seed",
            type=int,
            default=None,
            help="PRNG seed (default: SEED setting)",
        )

        # calc command
        calc = subparsers.add_parser(
            "calc",
            help="Calculate pay for one employee",
        )
        calc.add_argument(
            "--base-salary",
            type=parse_amount,
            required=True,
            help="Base salary amount",
        )
        calc.add_argument(
            "--earning",
            type=parse_line_item,
            action="append",
            default=[],
            metavar="LABEL=AMOUNT",
            help="Additional earning (repeatable)",
        )
        calc.add_argument(
            "--deduction",
            type=parse_line_item,
            action="append",
            default=[],
            metavar="LABEL=AMOUNT",
            help="Additional deduction (repeatable)",
        )

        # export-employees command
        export_employees = subparsers.add_parser(
            "export-employees",
            help="Export employees as CSV",
        )
        export_employees.add_argument(
            "--output",
            type=str,
            help="Output file path, '-' for stdout (default: employees-<today>.csv)",
        )

        # export-payslips command
        export_payslips = subparsers.add_parser(
            "export-payslips",
            help="Export payslips as CSV",
        )
        export_payslips.add_argument(
            "--run-id",
            type=str,
            help="Only payslips of this payroll run",
        )
        export_payslips.add_argument(
            "--output",
            type=str,
            help="Output file path, '-' for stdout (default: payslips-<today>.csv)",
        )

        # summary command
        subparsers.add_parser(
            "summary",
            help="Print the dashboard summary",
        )

        # serve command
        serve = subparsers.add_parser(
            "serve",
            help="Run the HTTP API",
        )
        serve.add_argument("--host", type=str, default=None, help="Bind address")
        serve.add_argument("--port", type=int, default=None, help="Bind port")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "seed": self._cmd_seed,
            "calc": self._cmd_calc,
            "export-employees": self._cmd_export_employees,
            "export-payslips": self._cmd_export_payslips,
            "summary": self._cmd_summary,
            "serve": self._cmd_serve,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_seed(self, args: argparse.Namespace) -> int:
        """Reset stored data to seed data."""
        seed = args.seed if args.seed is not None else self.settings.seed
        self.store.reset_to_seed(seed)
        state = self.store.get_state()
        print(f"Reset state to seed {seed}")
        print(f"  Employees:    {len(state.employees)}")
        print(f"  Payroll runs: {len(state.payroll_runs)}")
        print(f"  Payslips:     {len(state.payslips)}")
        return 0

    def _cmd_calc(self, args: argparse.Namespace) -> int:
        """Print the pay breakdown for ad-hoc inputs."""
        engine = PayrollEngine.from_settings(self.settings)
        gross = engine.calc_gross(args.base_salary, args.earning)
        totals = engine.calc_totals(args.base_salary, args.earning, args.deduction)

        print(f"Gross pay:        {format_currency(totals.gross_pay):>15}")
        print(f"Tax:              {format_currency(engine.calc_tax(gross)):>15}")
        print(f"Pension:          {format_currency(engine.calc_pension(args.base_salary)):>15}")
        for deduction in args.deduction:
            print(f"  {deduction.type:<16}{format_currency(deduction.amount):>15}")
        print(f"Total deductions: {format_currency(totals.total_deductions):>15}")
        print(f"Net pay:          {format_currency(totals.net_pay):>15}")
        if totals.is_negative_net:
            print("WARNING: net pay is negative", file=sys.stderr)
        return 0

    def _cmd_export_employees(self, args: argparse.Namespace) -> int:
        """Write employees CSV."""
        content = export_employees_csv(self.store.get_state().employees)
        return self._write_output(content, args.output or export_filename("employees"))

    def _cmd_export_payslips(self, args: argparse.Namespace) -> int:
        """Write payslips CSV."""
        state = self.store.get_state()
        if args.run_id:
            if state.find_payroll_run(args.run_id) is None:
                print(f"ERROR: payroll run {args.run_id} not found", file=sys.stderr)
                return 1
            payslips = state.payslips_for_run(args.run_id)
        else:
            payslips = state.payslips

        content = export_payslips_csv(payslips, state.employees)
        return self._write_output(content, args.output or export_filename("payslips"))

    def _write_output(self, content: str, output: str) -> int:
        if output == "-":
            print(content)
            return 0

        Path(output).write_text(content + "\n", encoding="utf-8")
        print(f"Wrote {output}")
        return 0

    def _cmd_summary(self, args: argparse.Namespace) -> int:
        """Print dashboard figures and recent activity."""
        summary = build_dashboard(self.store.get_state())
        last_run = summary.last_processed_run

        print("Payroll Summary")
        print("=" * 40)
        print(f"Active employees:   {summary.active_employees}")
        print(f"Inactive employees: {summary.inactive_employees}")
        print(f"Draft runs:         {summary.draft_runs}")
        if last_run:
            print(
                f"Last run total:     {format_currency(summary.last_run_total)}"
                f" (paid {format_date(last_run.pay_date)})"
            )
        else:
            print("Last run total:     No processed runs")
        print(
            "Next pay date:      "
            + (format_date(summary.next_pay_date) if summary.next_pay_date else "Not scheduled")
        )

        print("\nRecent activity:")
        if not summary.recent_activity:
            print("  No recent activity to display.")
        for item in summary.recent_activity:
            print(f"  {item.date}  {item.title:<24} {item.description} [{item.status}]")
        return 0

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the API server with uvicorn."""
        import uvicorn

        uvicorn.run(
            "payroll_admin.api.app:app",
            host=args.host or self.settings.HOST,
            port=args.port or self.settings.PORT,
            reload=self.settings.DEBUG,
            log_level=self.settings.log_level.lower(),
        )
        return 0


def main() -> int:
    """CLI entry point."""
    configure_logging()
    cli = PayrollAdminCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
