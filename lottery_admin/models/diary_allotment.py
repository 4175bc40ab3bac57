"""Diary allotment ORM model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_admin.models.base import Base, TimestampMixin
from lottery_admin.models.diary import Diary
from lottery_admin.models.issuer import Issuer


class AllotmentStatus(str, Enum):
    ALLOTTED = "allotted"
    FULLY_SOLD = "fully_sold"
    PAID = "paid"
    RETURNED = "returned"


# Statuses under which a diary's tickets may still be recorded as sold.
SELLABLE_STATUSES = (AllotmentStatus.ALLOTTED.value, AllotmentStatus.FULLY_SOLD.value, AllotmentStatus.PAID.value)


class DiaryAllotment(TimestampMixin, Base):
    """Assignment of one diary to one issuer."""

    __tablename__ = "diary_allotments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('allotted', 'fully_sold', 'paid', 'returned')",
            name="ck_diary_allotments_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    diary_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("diaries.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    issuer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    allotment_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AllotmentStatus.ALLOTTED.value)
    amount_collected: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    diary: Mapped[Diary] = relationship(lazy="joined")
    issuer: Mapped[Issuer] = relationship(lazy="joined")
