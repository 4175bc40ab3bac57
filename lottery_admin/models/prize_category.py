"""Prize category ORM model.

``awarded_count`` is maintained by conditional UPDATEs when winners are
registered or removed; the CHECK keeps it within ``total_quantity`` even
under concurrent registrations.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lottery_admin.models.base import Base, TimestampMixin


class PrizeCategory(TimestampMixin, Base):
    """A prize line with a fixed number of awards."""

    __tablename__ = "prize_categories"
    __table_args__ = (
        CheckConstraint(
            "awarded_count >= 0 AND awarded_count <= total_quantity",
            name="ck_prize_categories_awarded_within_quantity",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    awarded_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def remaining_quantity(self) -> int:
        return self.total_quantity - self.awarded_count
