"""Ticket sale ORM model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_admin.models.base import Base, TimestampMixin
from lottery_admin.models.diary import Diary
from lottery_admin.models.issuer import Issuer


class TicketSale(TimestampMixin, Base):
    """One sold ticket and its purchaser."""

    __tablename__ = "ticket_sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lottery_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)
    purchaser_name: Mapped[str] = mapped_column(String(255), nullable=False)
    purchaser_contact: Mapped[str] = mapped_column(String(20), nullable=False)
    purchaser_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    issuer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("issuers.id", ondelete="SET NULL"), nullable=True, index=True
    )
    diary_id: Mapped[int] = mapped_column(Integer, ForeignKey("diaries.id"), nullable=False, index=True)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    diary: Mapped[Diary] = relationship(lazy="joined")
    issuer: Mapped[Issuer | None] = relationship(lazy="joined")
