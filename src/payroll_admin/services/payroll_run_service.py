"""Payroll run service - draft building and run processing."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from payroll_admin.calculators.engine import PayrollEngine
from payroll_admin.calculators.line_builder import LineItemBuilder, Numeric
from payroll_admin.calculators.types import Deduction, Earning, PayTotals
from payroll_admin.models.payroll import PayrollRun, PayrollRunStatus, Payslip
from payroll_admin.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    validate_run_dates,
)
from payroll_admin.services.store import Store

logger = logging.getLogger(__name__)


class DraftValidationError(Exception):
    """Raised when a draft cannot be processed yet."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Draft is not ready to process: " + "; ".join(errors))


class PayrollRunNotFoundError(Exception):
    """Raised when a payroll run id is unknown."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        super().__init__(f"Payroll run {run_id} not found")


class LineItemKind(str, Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"


@dataclass
class Adjustments:
    """Per-employee earnings and deductions entered while drafting."""

    earnings: list[Earning] = field(default_factory=list)
    deductions: list[Deduction] = field(default_factory=list)


@dataclass
class DraftRun:
    """A payroll run being assembled before processing."""

    period_start: str = ""
    period_end: str = ""
    pay_date: str = ""
    notes: str = ""
    selected_employee_ids: list[str] = field(default_factory=list)
    adjustments: dict[str, Adjustments] = field(default_factory=dict)

    def has_valid_dates(self) -> bool:
        return not validate_run_dates(self.period_start, self.period_end, self.pay_date)

    def has_valid_selection(self) -> bool:
        return len(self.selected_employee_ids) > 0

    def validation_errors(self) -> list[str]:
        errors = validate_run_dates(self.period_start, self.period_end, self.pay_date)
        if not self.has_valid_selection():
            errors.append("Select at least one employee")
        return errors

    def toggle_employee(self, employee_id: str) -> None:
        if employee_id in self.selected_employee_ids:
            self.selected_employee_ids.remove(employee_id)
        else:
            self.selected_employee_ids.append(employee_id)

    def adjustments_for(self, employee_id: str) -> Adjustments:
        return self.adjustments.get(employee_id) or Adjustments()

    def set_adjustments(
        self,
        employee_id: str,
        earnings: Sequence[Earning],
        deductions: Sequence[Deduction],
    ) -> None:
        self.adjustments[employee_id] = Adjustments(list(earnings), list(deductions))

    def bulk_add_line_item(self, kind: LineItemKind | str, label: str, amount: Numeric) -> None:
        """Append the same line item to every selected employee."""
        kind = LineItemKind(kind)
        line = LineItemBuilder.create_line(label, amount)
        for employee_id in self.selected_employee_ids:
            current = self.adjustments_for(employee_id)
            if kind == LineItemKind.EARNING:
                updated = Adjustments(current.earnings + [line], list(current.deductions))
            else:
                updated = Adjustments(list(current.earnings), current.deductions + [line])
            self.adjustments[employee_id] = updated

    def earnings_map(self) -> dict[str, list[Earning]]:
        return {k: list(v.earnings) for k, v in self.adjustments.items()}

    def deductions_map(self) -> dict[str, list[Deduction]]:
        return {k: list(v.deductions) for k, v in self.adjustments.items()}


@dataclass
class EmployeePreview:
    employee_id: str
    totals: PayTotals


@dataclass
class DraftPreview:
    employees: list[EmployeePreview]
    grand_net: Decimal

    @property
    def negative_net_employee_ids(self) -> list[str]:
        return [p.employee_id for p in self.employees if p.totals.is_negative_net]


@dataclass
class ProcessResult:
    run: PayrollRun
    payslips: list[Payslip]

    @property
    def total_net(self) -> Decimal:
        return sum((p.net_pay for p in self.payslips), Decimal("0"))


class PayrollRunService:
    """Service for drafting and processing payroll runs.

    Operations:
    - preview: totals per selected employee plus the grand net
    - process: create a Processed run from a draft and store its payslips
    - process_existing_run: move a stored Draft run to Processed
    """

    def __init__(self, store: Store, engine: PayrollEngine | None = None):
        self.store = store
        self.engine = engine or PayrollEngine()

    def preview(self, draft: DraftRun) -> DraftPreview:
        state = self.store.get_state()
        items: list[EmployeePreview] = []
        for employee_id in draft.selected_employee_ids:
            employee = state.find_employee(employee_id)
            if employee is None:
                logger.warning("Skipping unknown employee %s in preview", employee_id)
                continue
            adj = draft.adjustments_for(employee_id)
            totals = self.engine.calc_totals(employee.base_salary, adj.earnings, adj.deductions)
            items.append(EmployeePreview(employee_id=employee_id, totals=totals))

        grand_net = sum((p.totals.net_pay for p in items), Decimal("0"))
        return DraftPreview(employees=items, grand_net=grand_net)

    def process(self, draft: DraftRun) -> ProcessResult:
        """Create a Processed run from the draft and store its payslips.

        Raises DraftValidationError when dates are out of order or nothing is
        selected.
        """
        errors = draft.validation_errors()
        if errors:
            raise DraftValidationError(errors)

        with self.store.locked():
            # Payslips are computed before the first write so a failure stores nothing.
            run_id = self.store.new_run_id()
            employee_ids = list(draft.selected_employee_ids)
            payslips = self._generate(
                run_id, employee_ids, draft.earnings_map(), draft.deductions_map()
            )

            with self.store.emitter.batch():
                run = self.store.add_payroll_run(
                    run_id=run_id,
                    period_start=draft.period_start,
                    period_end=draft.period_end,
                    pay_date=draft.pay_date,
                    status=PayrollRunStatus.PROCESSED,
                    notes=draft.notes,
                    employee_ids=employee_ids,
                )
                self.store.add_payslips(payslips)

        logger.info("Processed payroll run %s with %d payslip(s)", run.id, len(payslips))
        return ProcessResult(run=run, payslips=payslips)

    def process_existing_run(
        self,
        run_id: str,
        earnings_by_employee_id: Mapping[str, Sequence[Earning]] | None = None,
        deductions_by_employee_id: Mapping[str, Sequence[Deduction]] | None = None,
    ) -> ProcessResult:
        """Transition a Draft run to Processed and store its payslips."""
        with self.store.locked():
            run = self.store.get_state().find_payroll_run(run_id)
            if run is None:
                raise PayrollRunNotFoundError(run_id)

            errors = PayrollRunStateMachine.validate_run_for_transition(
                run, PayrollRunStatus.PROCESSED
            )
            if errors:
                raise InvalidTransitionError(
                    run.status.value, PayrollRunStatus.PROCESSED.value, "; ".join(errors)
                )

            payslips = self._generate(
                run.id, run.employee_ids, earnings_by_employee_id, deductions_by_employee_id
            )

            with self.store.emitter.batch():
                self.store.add_payslips(payslips)
                updated = self.store.update_payroll_run(run_id, status=PayrollRunStatus.PROCESSED)
            if updated is None:
                raise PayrollRunNotFoundError(run_id)

        logger.info("Processed draft run %s with %d payslip(s)", run_id, len(payslips))
        return ProcessResult(run=updated, payslips=payslips)

    def _generate(
        self,
        run_id: str,
        employee_ids: Sequence[str],
        earnings_by_employee_id: Mapping[str, Sequence[Earning]] | None,
        deductions_by_employee_id: Mapping[str, Sequence[Deduction]] | None,
    ) -> list[Payslip]:
        # Store order, not selection order; ids with no employee are skipped.
        selected = set(employee_ids)
        employees = [e for e in self.store.get_state().employees if e.id in selected]
        missing = selected - {e.id for e in employees}
        if missing:
            logger.warning(
                "Run %s references %d unknown employee(s): %s",
                run_id,
                len(missing),
                ", ".join(sorted(missing)),
            )
        return self.engine.generate_payslips_for_run(
            run_id, employees, earnings_by_employee_id, deductions_by_employee_id
        )
