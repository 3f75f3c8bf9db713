"""Record store: CRUD over the application state with change notification."""

from __future__ import annotations

import logging
import random
import string
import threading
import time
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager
from dataclasses import replace
from decimal import InvalidOperation
from typing import TYPE_CHECKING, Any

from payroll_admin.database import StateRepository
from payroll_admin.events import (
    EmployeeAdded,
    EmployeeDeleted,
    EmployeeUpdated,
    EventEmitter,
    PayrollRunAdded,
    PayrollRunDeleted,
    PayrollRunUpdated,
    PayslipsAdded,
    PayslipUpdated,
    PersistenceToggled,
    StateReset,
    StoreEvent,
)
from payroll_admin.models.app_state import AppState
from payroll_admin.models.employee import Employee
from payroll_admin.models.payroll import PayrollRun, Payslip
from payroll_admin.seed import DEFAULT_SEED, create_seed

if TYPE_CHECKING:
    from payroll_admin.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "payroll-app-state"

_ID_ALPHABET = string.digits + string.ascii_lowercase

Listener = Callable[[StoreEvent], None]


def generate_id(prefix: str) -> str:
    """Return '{prefix}-{epoch millis}-{9 base-36 chars}'."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


class Store:
    """In-memory application state with optional persistence.

    Every successful mutation persists the whole state (when persistence is
    enabled) and then emits exactly one event. Operations on unknown ids
    return None/False and emit nothing.

    All reads and writes hold one re-entrant lock, so a store may be shared
    by the worker threads of the API server. Listeners run under the lock
    and may read the store, but should not block.
    """

    def __init__(
        self,
        repository: StateRepository | None = None,
        state_key: str = DEFAULT_STATE_KEY,
        seed: int = DEFAULT_SEED,
        emitter: EventEmitter | None = None,
        id_factory: Callable[[str], str] = generate_id,
    ):
        self._repository = repository
        self._state_key = state_key
        self._seed = seed
        self._emitter = emitter or EventEmitter()
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._state = self._load_state()

    @classmethod
    def from_settings(cls, settings: Settings) -> Store:
        """Store backed by the configured state database."""
        return cls(
            repository=StateRepository.from_url(settings.database_url),
            state_key=settings.state_key,
            seed=settings.seed,
        )

    @property
    def repository(self) -> StateRepository | None:
        return self._repository

    @property
    def state_key(self) -> str:
        return self._state_key

    @property
    def emitter(self) -> EventEmitter:
        return self._emitter

    def locked(self) -> AbstractContextManager[bool]:
        """Hold the store lock across several operations."""
        return self._lock

    # === Lifecycle ===

    def _load_state(self) -> AppState:
        """Load persisted state merged over the seed, or a fresh seed."""
        if self._repository is not None:
            saved = self._repository.load(self._state_key)
            if saved:
                try:
                    merged = {**create_seed(self._seed).to_dict(), **saved}
                    return AppState.from_dict(merged)
                except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation):
                    logger.exception(
                        "Failed to parse saved state %s; using seed data",
                        self._state_key,
                    )
        return create_seed(self._seed)

    def _save_state(self) -> None:
        if self._state.use_local_storage and self._repository is not None:
            self._repository.save(self._state_key, self._state.to_dict())

    def _notify(self, event: StoreEvent) -> None:
        self._emitter.emit(event)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every mutation. Returns an unsubscribe callable."""
        self._emitter.on_all(listener)

        def unsubscribe() -> None:
            self._emitter.off(listener)

        return unsubscribe

    def get_state(self) -> AppState:
        """Shallow copy of the current state."""
        with self._lock:
            return self._state.copy()

    # === Employee operations ===

    def add_employee(self, **data: Any) -> Employee:
        with self._lock:
            employee = Employee(id=self._id_factory("emp"), **data)
            self._state.employees.append(employee)
            self._save_state()
            logger.info("Added employee %s", employee.id)
            self._notify(EmployeeAdded(employee_id=employee.id))
            return employee

    def update_employee(self, employee_id: str, **updates: Any) -> Employee | None:
        with self._lock:
            index = _index_of(self._state.employees, employee_id)
            if index is None:
                return None

            updated = replace(self._state.employees[index], **updates)
            self._state.employees[index] = updated
            self._save_state()
            self._notify(EmployeeUpdated(employee_id=updated.id, changed_fields=tuple(updates)))
            return updated

    def delete_employee(self, employee_id: str) -> bool:
        """Remove an employee. Runs and payslips referencing it are kept."""
        with self._lock:
            before = len(self._state.employees)
            self._state.employees = [e for e in self._state.employees if e.id != employee_id]
            if len(self._state.employees) == before:
                return False

            self._save_state()
            logger.info("Deleted employee %s", employee_id)
            self._notify(EmployeeDeleted(employee_id=employee_id))
            return True

    # === Payroll run operations ===

    def new_run_id(self) -> str:
        """Allocate a payroll run id without storing anything."""
        return self._id_factory("run")

    def add_payroll_run(self, run_id: str | None = None, **data: Any) -> PayrollRun:
        with self._lock:
            run = PayrollRun(id=run_id or self.new_run_id(), **data)
            self._state.payroll_runs.append(run)
            self._save_state()
            logger.info("Added payroll run %s (%s)", run.id, run.status.value)
            self._notify(PayrollRunAdded(payroll_run_id=run.id))
            return run

    def update_payroll_run(self, run_id: str, **updates: Any) -> PayrollRun | None:
        with self._lock:
            index = _index_of(self._state.payroll_runs, run_id)
            if index is None:
                return None

            updated = replace(self._state.payroll_runs[index], **updates)
            self._state.payroll_runs[index] = updated
            self._save_state()
            self._notify(PayrollRunUpdated(payroll_run_id=updated.id, changed_fields=tuple(updates)))
            return updated

    def delete_payroll_run(self, run_id: str) -> bool:
        """Remove a run and every payslip generated for it."""
        with self._lock:
            before = len(self._state.payroll_runs)
            self._state.payroll_runs = [r for r in self._state.payroll_runs if r.id != run_id]
            kept = [p for p in self._state.payslips if p.payroll_run_id != run_id]
            removed_payslips = len(self._state.payslips) - len(kept)
            self._state.payslips = kept

            if len(self._state.payroll_runs) == before:
                return False

            self._save_state()
            logger.info("Deleted payroll run %s and %d payslip(s)", run_id, removed_payslips)
            self._notify(
                PayrollRunDeleted(payroll_run_id=run_id, removed_payslip_count=removed_payslips)
            )
            return True

    # === Payslip operations ===

    def add_payslips(self, payslips: Iterable[Payslip]) -> None:
        """Store payslips, replacing any existing ones with the same id."""
        with self._lock:
            new = list(payslips)
            new_ids = {p.id for p in new}
            kept = [p for p in self._state.payslips if p.id not in new_ids]
            replaced = len(self._state.payslips) - len(kept)
            self._state.payslips = kept + new
            self._save_state()
            logger.info("Stored %d payslip(s), replaced %d", len(new), replaced)
            self._notify(PayslipsAdded(payslip_ids=tuple(p.id for p in new), replaced_count=replaced))

    def update_payslip(self, payslip_id: str, **updates: Any) -> Payslip | None:
        with self._lock:
            index = _index_of(self._state.payslips, payslip_id)
            if index is None:
                return None

            updated = replace(self._state.payslips[index], **updates)
            self._state.payslips[index] = updated
            self._save_state()
            self._notify(PayslipUpdated(payslip_id=updated.id, changed_fields=tuple(updates)))
            return updated

    # === Settings ===

    def toggle_local_storage(self) -> bool:
        """Flip persistence. Enabling saves now; disabling drops the saved copy."""
        with self._lock:
            self._state.use_local_storage = not self._state.use_local_storage
            if self._state.use_local_storage:
                self._save_state()
            elif self._repository is not None:
                self._repository.delete(self._state_key)
            enabled = self._state.use_local_storage
            logger.info("Persistence %s", "enabled" if enabled else "disabled")
            self._notify(PersistenceToggled(enabled=enabled))
            return enabled

    def reset_to_seed(self, seed: int | None = None) -> None:
        """Replace the whole state with deterministic seed data."""
        with self._lock:
            seed = self._seed if seed is None else seed
            self._state = create_seed(seed)
            self._save_state()
            logger.info("Reset state to seed %d", seed)
            self._notify(StateReset(seed=seed))


def _index_of(records: list[Any], record_id: str) -> int | None:
    return next((i for i, r in enumerate(records) if r.id == record_id), None)

