"""Reference lists used to populate employee and adjustment choices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ReferenceItem:
    """An {id, name} pair."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReferenceItem:
        return cls(id=data["id"], name=data["name"])


Department = ReferenceItem
Role = ReferenceItem
EarningType = ReferenceItem
DeductionType = ReferenceItem
