"""Persisted application state document."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.models.base import Base, TimestampMixin


class StoredState(Base, TimestampMixin):
    """One JSON document per key, like a browser local-storage slot."""

    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
