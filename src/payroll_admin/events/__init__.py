"""Store events and the emitter that delivers them."""

from payroll_admin.events.emitter import EventBatch, EventEmitter, EventHandler
from payroll_admin.events.types import (
    EmployeeAdded,
    EmployeeDeleted,
    EmployeeUpdated,
    EventCategory,
    EventMetadata,
    PayrollRunAdded,
    PayrollRunDeleted,
    PayrollRunUpdated,
    PayslipsAdded,
    PayslipUpdated,
    PersistenceToggled,
    StateReset,
    StoreEvent,
)

__all__ = [
    "EventBatch",
    "EventEmitter",
    "EventHandler",
    "EmployeeAdded",
    "EmployeeDeleted",
    "EmployeeUpdated",
    "EventCategory",
    "EventMetadata",
    "PayrollRunAdded",
    "PayrollRunDeleted",
    "PayrollRunUpdated",
    "PayslipsAdded",
    "PayslipUpdated",
    "PersistenceToggled",
    "StateReset",
    "StoreEvent",
]
