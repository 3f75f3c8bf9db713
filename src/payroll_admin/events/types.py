"""Store event types.

Every store mutation produces exactly one event. Events are frozen
dataclasses carrying the ids that changed, so handlers can re-read the
store for the current records.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class EventCategory(str, Enum):
    """Event categories for routing and filtering."""

    EMPLOYEE = "employee"
    PAYROLL_RUN = "payroll_run"
    PAYSLIP = "payslip"
    SETTINGS = "settings"


@dataclass(frozen=True)
class EventMetadata:
    """Metadata attached to every store event."""

    event_id: UUID
    timestamp: datetime
    source_service: str = "store"

    @classmethod
    def create(cls, source_service: str = "store") -> EventMetadata:
        return cls(
            event_id=uuid4(),
            timestamp=datetime.now(timezone.utc),
            source_service=source_service,
        )


@dataclass(frozen=True)
class StoreEvent:
    """Base class for all store events."""

    metadata: EventMetadata = field(default_factory=EventMetadata.create, kw_only=True)

    @property
    def event_type(self) -> str:
        """Event type name for routing."""
        return self.__class__.__name__

    @property
    def category(self) -> EventCategory:
        raise NotImplementedError("Subclasses must define category")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["metadata"] = {
            "event_id": str(self.metadata.event_id),
            "timestamp": self.metadata.timestamp.isoformat(),
            "source_service": self.metadata.source_service,
        }
        data["event_type"] = self.event_type
        data["category"] = self.category.value
        return data


# =============================================================================
# Employee events
# =============================================================================


@dataclass(frozen=True)
class EmployeeAdded(StoreEvent):
    employee_id: str

    @property
    def category(self) -> EventCategory:
        return EventCategory.EMPLOYEE


@dataclass(frozen=True)
class EmployeeUpdated(StoreEvent):
    employee_id: str
    changed_fields: tuple[str, ...] = ()

    @property
    def category(self) -> EventCategory:
        return EventCategory.EMPLOYEE


@dataclass(frozen=True)
class EmployeeDeleted(StoreEvent):
    employee_id: str

    @property
    def category(self) -> EventCategory:
        return EventCategory.EMPLOYEE


# =============================================================================
# Payroll run events
# =============================================================================


@dataclass(frozen=True)
class PayrollRunAdded(StoreEvent):
    payroll_run_id: str

    @property
    def category(self) -> EventCategory:
        return EventCategory.PAYROLL_RUN


@dataclass(frozen=True)
class PayrollRunUpdated(StoreEvent):
    payroll_run_id: str
    changed_fields: tuple[str, ...] = ()

    @property
    def category(self) -> EventCategory:
        return EventCategory.PAYROLL_RUN


@dataclass(frozen=True)
class PayrollRunDeleted(StoreEvent):
    """A run was removed along with its payslips."""

    payroll_run_id: str
    removed_payslip_count: int = 0

    @property
    def category(self) -> EventCategory:
        return EventCategory.PAYROLL_RUN


# =============================================================================
# Payslip events
# =============================================================================


@dataclass(frozen=True)
class PayslipsAdded(StoreEvent):
    payslip_ids: tuple[str, ...]
    replaced_count: int = 0

    @property
    def category(self) -> EventCategory:
        return EventCategory.PAYSLIP


@dataclass(frozen=True)
class PayslipUpdated(StoreEvent):
    payslip_id: str
    changed_fields: tuple[str, ...] = ()

    @property
    def category(self) -> EventCategory:
        return EventCategory.PAYSLIP


# =============================================================================
# Settings events
# =============================================================================


@dataclass(frozen=True)
class PersistenceToggled(StoreEvent):
    enabled: bool

    @property
    def category(self) -> EventCategory:
        return EventCategory.SETTINGS


@dataclass(frozen=True)
class StateReset(StoreEvent):
    seed: int

    @property
    def category(self) -> EventCategory:
        return EventCategory.SETTINGS
