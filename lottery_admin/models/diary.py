"""Diary ORM model.

Diaries are pre-generated from the numbering layout and never created by
users.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from lottery_admin.models.base import Base, TimestampMixin


class Diary(TimestampMixin, Base):
    """A physical book of consecutive tickets."""

    __tablename__ = "diaries"
    __table_args__ = (
        CheckConstraint("ticket_start_range <= ticket_end_range", name="ck_diaries_range_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    diary_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)
    ticket_start_range: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    ticket_end_range: Mapped[int] = mapped_column(Integer, nullable=False)
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    expected_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
