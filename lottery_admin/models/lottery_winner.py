"""Lottery winner ORM model.

The CHECK constraints mirror the write-path guard in
:mod:`lottery_admin.winner_guard`, which is installed on this model when the
package is imported.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery_admin.models.base import Base, TimestampMixin, utcnow
from lottery_admin.models.ticket_sale import TicketSale


class LotteryWinner(TimestampMixin, Base):
    """A prize awarded to one ticket."""

    __tablename__ = "lottery_winners"
    __table_args__ = (
        CheckConstraint("length(trim(winner_name)) > 0", name="ck_lottery_winners_winner_name_not_empty"),
        CheckConstraint("length(trim(winner_contact)) > 0", name="ck_lottery_winners_winner_contact_not_empty"),
        CheckConstraint("length(trim(prize_category)) > 0", name="ck_lottery_winners_prize_category_not_empty"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lottery_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True, active_history=True)
    ticket_sale_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ticket_sales.id", ondelete="SET NULL"), nullable=True
    )
    prize_category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    prize_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    winner_contact: Mapped[str] = mapped_column(String(20), nullable=False)
    winner_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    diary_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    ticket: Mapped[TicketSale | None] = relationship(lazy="joined")
