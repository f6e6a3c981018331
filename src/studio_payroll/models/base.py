"""Declarative base and shared column types for the payroll tables."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Textual YYYY-MM key; sorts the same way the calendar does
MonthKey = Annotated[str, mapped_column(String(7), nullable=False)]


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Money is stored as NUMERIC(12, 2) and timestamps keep their timezone.
    """

    type_annotation_map = {
        Decimal: Numeric(12, 2),
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Row bookkeeping columns, independent of any payroll timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        onupdate=func.now(),
        nullable=True,
    )
