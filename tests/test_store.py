"""Tests for the record store."""

import re
from decimal import Decimal

from payroll_admin.calculators.types import LineItem
from payroll_admin.database import StateRepository
from payroll_admin.events import (
    EmployeeAdded,
    EmployeeDeleted,
    EmployeeUpdated,
    PayrollRunAdded,
    PayrollRunDeleted,
    PayrollRunUpdated,
    PayslipsAdded,
    PayslipUpdated,
    PersistenceToggled,
    StateReset,
)
from payroll_admin.models import EmployeeStatus, PayrollRunStatus, Payslip
from payroll_admin.seed import create_seed
from payroll_admin.services.store import Store, generate_id

NEW_EMPLOYEE = dict(
    first_name="Grace",
    last_name="Hopper",
    email="grace@example.com",
    phone="+1-555-0199",
    department="Engineering",
    role="Senior Developer",
    hire_date="2023-04-01",
    base_salary=Decimal("95000"),
)


def make_payslip(run_id: str, employee_id: str, net: str = "100") -> Payslip:
    return Payslip(
        id=f"payslip-{run_id}-{employee_id}",
        payroll_run_id=run_id,
        employee_id=employee_id,
        earnings=[],
        deductions=[],
        gross_pay=Decimal(net),
        total_deductions=Decimal("0"),
        net_pay=Decimal(net),
    )


class TestGenerateId:
    def test_format(self):
        assert re.fullmatch(r"emp-\d{13}-[0-9a-z]{9}", generate_id("emp"))

    def test_unique(self):
        assert generate_id("run") != generate_id("run")


class TestInitialisation:
    """Test loading state from the repository."""

    def test_empty_repository_uses_seed(self, store: Store):
        state = store.get_state()

        assert len(state.employees) == 12
        assert state.employees[0].full_name == "Zoe Wilson"
        assert state.use_local_storage is True

    def test_no_repository(self):
        store = Store()
        assert len(store.get_state().payslips) == 20

    def test_custom_seed_without_saved_state(self, repository: StateRepository):
        store = Store(repository=repository, seed=42)
        assert store.get_state().employees[0].full_name == "Chris Taylor"

    def test_saved_state_restored(self, repository: StateRepository):
        first = Store(repository=repository, state_key="k")
        first.add_employee(**NEW_EMPLOYEE)

        second = Store(repository=repository, state_key="k")

        assert len(second.get_state().employees) == 13
        assert second.get_state().employees[-1].full_name == "Grace Hopper"

    def test_saved_keys_merged_over_seed(self, repository: StateRepository):
        """Keys missing from the saved document come from the seed."""
        repository.save("k", {"employees": [], "useLocalStorage": True})

        state = Store(repository=repository, state_key="k").get_state()

        assert state.employees == []
        assert len(state.payroll_runs) == 3
        assert len(state.departments) == 4

    def test_corrupt_state_falls_back_to_seed(self, repository: StateRepository, caplog):
        repository.save("k", {"employees": [{"firstName": "no id"}]})

        store = Store(repository=repository, state_key="k")

        assert len(store.get_state().employees) == 12
        assert "Failed to parse saved state" in caplog.text

    def test_malformed_records_fall_back_to_seed(self, repository: StateRepository, caplog):
        repository.save("k", {"employees": ["x"]})

        store = Store(repository=repository, state_key="k")

        assert len(store.get_state().employees) == 12
        assert "Failed to parse saved state" in caplog.text

    def test_missing_keys_come_from_configured_seed(self, repository: StateRepository):
        repository.save("k", {"payrollRuns": []})

        state = Store(repository=repository, state_key="k", seed=42).get_state()

        assert state.payroll_runs == []
        assert state.employees[0].full_name == "Chris Taylor"

    def test_state_copy_is_independent(self, store: Store):
        state = store.get_state()
        state.employees.clear()

        assert len(store.get_state().employees) == 12


class TestEmployees:
    def test_add_assigns_id_and_notifies(self, store: Store, events):
        employee = store.add_employee(**NEW_EMPLOYEE)

        assert employee.id == "emp-test-1"
        assert employee.status == EmployeeStatus.ACTIVE
        assert store.get_state().find_employee("emp-test-1") == employee
        assert [type(e) for e in events] == [EmployeeAdded]
        assert events[0].employee_id == "emp-test-1"

    def test_negative_salary_accepted(self, store: Store):
        employee = store.add_employee(**{**NEW_EMPLOYEE, "base_salary": Decimal("-1")})
        assert employee.base_salary == Decimal("-1")

    def test_update(self, store: Store, events):
        updated = store.update_employee("emp-1", role="Tech Lead", status="Inactive")

        assert updated.role == "Tech Lead"
        assert updated.status == EmployeeStatus.INACTIVE
        assert updated.first_name == "Zoe"
        assert store.get_state().find_employee("emp-1").role == "Tech Lead"
        assert isinstance(events[0], EmployeeUpdated)
        assert events[0].changed_fields == ("role", "status")

    def test_update_unknown_returns_none_silently(self, store: Store, events):
        assert store.update_employee("emp-missing", role="x") is None
        assert events == []

    def test_delete_keeps_runs_and_payslips(self, store: Store, events):
        assert store.delete_employee("emp-1") is True

        state = store.get_state()
        assert state.find_employee("emp-1") is None
        assert "emp-1" in state.find_payroll_run("run-1").employee_ids
        assert state.payslips[0].employee_id == "emp-1"
        assert isinstance(events[0], EmployeeDeleted)

    def test_delete_unknown(self, store: Store, events):
        assert store.delete_employee("emp-missing") is False
        assert events == []


class TestPayrollRuns:
    def test_add_and_update(self, store: Store, events):
        run = store.add_payroll_run(
            period_start="2025-02-01",
            period_end="2025-02-28",
            pay_date="2025-03-05",
            employee_ids=["emp-1"],
        )
        assert run.id == "run-test-1"
        assert run.status == PayrollRunStatus.DRAFT

        updated = store.update_payroll_run(run.id, notes="February")

        assert updated.notes == "February"
        assert [type(e) for e in events] == [PayrollRunAdded, PayrollRunUpdated]

    def test_delete_cascades_payslips(self, store: Store, events):
        assert len(store.get_state().payslips_for_run("run-1")) == 10

        assert store.delete_payroll_run("run-1") is True

        state = store.get_state()
        assert state.find_payroll_run("run-1") is None
        assert state.payslips_for_run("run-1") == []
        assert len(state.payslips) == 10
        assert len(events) == 1
        assert isinstance(events[0], PayrollRunDeleted)
        assert events[0].removed_payslip_count == 10

    def test_delete_unknown_run_does_not_notify(self, store: Store, events):
        assert store.delete_payroll_run("run-missing") is False
        assert events == []


class TestPayslips:
    def test_add_appends(self, store: Store, events):
        store.add_payslips([make_payslip("run-3", "emp-1")])

        state = store.get_state()
        assert len(state.payslips) == 21
        assert state.payslips[-1].id == "payslip-run-3-emp-1"
        assert isinstance(events[0], PayslipsAdded)
        assert events[0].replaced_count == 0

    def test_add_replaces_same_id(self, store: Store, events):
        store.add_payslips([make_payslip("run-1", "emp-1", net="1")])

        state = store.get_state()
        matching = [p for p in state.payslips if p.id == "payslip-run-1-emp-1"]
        assert len(state.payslips) == 20
        assert len(matching) == 1
        assert matching[0].net_pay == Decimal("1")
        assert events[0].replaced_count == 1

    def test_update_payslip(self, store: Store, events):
        updated = store.update_payslip(
            "payslip-run-1-emp-1", deductions=[LineItem("Tax", Decimal("1"))]
        )

        assert updated.deductions == [LineItem("Tax", Decimal("1"))]
        assert isinstance(events[0], PayslipUpdated)

    def test_update_unknown_payslip(self, store: Store, events):
        assert store.update_payslip("payslip-nope", net_pay=Decimal("0")) is None
        assert events == []


class TestSubscriptions:
    def test_one_notification_per_mutation(self, store: Store):
        calls = []
        store.subscribe(calls.append)

        store.add_employee(**NEW_EMPLOYEE)
        store.update_employee("emp-1", phone="x")
        store.delete_employee("emp-2")

        assert len(calls) == 3

    def test_unsubscribe(self, store: Store):
        calls = []
        unsubscribe = store.subscribe(calls.append)

        unsubscribe()
        store.add_employee(**NEW_EMPLOYEE)

        assert calls == []

    def test_failing_listener_does_not_block_others(self, store: Store, caplog):
        calls = []

        def broken(event):
            raise RuntimeError("listener failed")

        store.subscribe(broken)
        store.subscribe(calls.append)

        employee = store.add_employee(**NEW_EMPLOYEE)

        assert len(calls) == 1
        assert store.get_state().find_employee(employee.id) is not None
        assert "listener failed" in caplog.text

    def test_listener_sees_mutated_state(self, store: Store):
        seen = []
        store.subscribe(lambda event: seen.append(len(store.get_state().employees)))

        store.add_employee(**NEW_EMPLOYEE)

        assert seen == [13]


class TestPersistence:
    def test_mutation_persists(self, store: Store, repository: StateRepository):
        store.add_employee(**NEW_EMPLOYEE)

        saved = repository.load("test-state")
        assert len(saved["employees"]) == 13
        assert saved["employees"][-1]["baseSalary"] == 95000

    def test_toggle_off_deletes_saved_document(self, store: Store, repository, events):
        store.add_employee(**NEW_EMPLOYEE)

        enabled = store.toggle_local_storage()

        assert enabled is False
        assert repository.load("test-state") is None
        assert isinstance(events[-1], PersistenceToggled)
        assert events[-1].enabled is False

    def test_disabled_mutations_not_persisted(self, store: Store, repository):
        store.toggle_local_storage()
        store.add_employee(**NEW_EMPLOYEE)

        assert repository.load("test-state") is None

    def test_toggle_on_saves_immediately(self, store: Store, repository):
        store.toggle_local_storage()
        store.add_employee(**NEW_EMPLOYEE)

        assert store.toggle_local_storage() is True

        saved = repository.load("test-state")
        assert saved["useLocalStorage"] is True
        assert len(saved["employees"]) == 13


class TestReset:
    def test_reset_restores_seed(self, store: Store, events):
        store.delete_payroll_run("run-1")
        store.add_employee(**NEW_EMPLOYEE)

        store.reset_to_seed()

        assert store.get_state().to_dict() == create_seed().to_dict()
        assert isinstance(events[-1], StateReset)
        assert events[-1].seed == 12345

    def test_reset_with_other_seed(self, store: Store, repository):
        store.reset_to_seed(42)

        assert store.get_state().employees[0].full_name == "Chris Taylor"
        assert repository.load("test-state")["employees"][0]["firstName"] == "Chris"
