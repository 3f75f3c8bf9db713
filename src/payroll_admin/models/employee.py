"""Employee record."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_admin.calculators.line_builder import to_decimal


class EmployeeStatus(str, Enum):
    """Employee status values."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


@dataclass
class Employee:
    """An employee on the books.

    Department and role are free-text labels. base_salary is annual and is
    not validated; negative values are kept as entered.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    department: str
    role: str
    hire_date: str  # YYYY-MM-DD
    base_salary: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    bank_name: str | None = None
    bank_account_no: str | None = None

    def __post_init__(self) -> None:
        self.base_salary = to_decimal(self.base_salary)
        self.status = EmployeeStatus(self.status)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
            "role": self.role,
            "hireDate": self.hire_date,
            "baseSalary": self.base_salary,
            "status": self.status.value,
        }
        if self.bank_name is not None:
            data["bankName"] = self.bank_name
        if self.bank_account_no is not None:
            data["bankAccountNo"] = self.bank_account_no
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Employee:
        return cls(
            id=data["id"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            department=data.get("department", ""),
            role=data.get("role", ""),
            hire_date=data.get("hireDate", ""),
            base_salary=data.get("baseSalary", 0),
            status=data.get("status", EmployeeStatus.ACTIVE.value),
            bank_name=data.get("bankName"),
            bank_account_no=data.get("bankAccountNo"),
        )
