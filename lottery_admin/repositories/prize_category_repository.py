"""Repository layer for prize categories and their award counters."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from lottery_admin.models.prize_category import PrizeCategory


class PrizeCategoryRepository:
    @staticmethod
    def _expire_counter(session: Session, category_name: str) -> None:
        for obj in list(session.identity_map.values()):
            if isinstance(obj, PrizeCategory) and obj.category_name == category_name:
                session.expire(obj, ["awarded_count"])

    def list_categories(self, session: Session) -> Sequence[PrizeCategory]:
        stmt = select(PrizeCategory).order_by(PrizeCategory.display_order.asc(), PrizeCategory.id.asc())
        return list(session.scalars(stmt).all())

    def get_by_name(self, session: Session, category_name: str) -> PrizeCategory | None:
        stmt = select(PrizeCategory).where(PrizeCategory.category_name == category_name)
        return session.scalars(stmt).one_or_none()

    def existing_names(self, session: Session) -> set[str]:
        return set(session.scalars(select(PrizeCategory.category_name)).all())

    def create(self, session: Session, *, category_name: str, total_quantity: int, display_order: int) -> PrizeCategory:
        category = PrizeCategory(
            category_name=category_name,
            total_quantity=total_quantity,
            awarded_count=0,
            display_order=display_order,
        )
        session.add(category)
        session.flush()
        return category

    def claim_slot(self, session: Session, category_name: str) -> bool:
        """Take one prize from the category.

        The increment is conditional, so two concurrent claims for the last
        prize cannot both succeed. Returns False when nothing is left.
        """

        stmt = (
            update(PrizeCategory)
            .where(
                PrizeCategory.category_name == category_name,
                PrizeCategory.awarded_count < PrizeCategory.total_quantity,
            )
            .values(awarded_count=PrizeCategory.awarded_count + 1)
            .execution_options(synchronize_session=False)
        )
        claimed = session.execute(stmt).rowcount == 1
        self._expire_counter(session, category_name)
        return claimed

    def release_slot(self, session: Session, category_name: str) -> bool:
        stmt = (
            update(PrizeCategory)
            .where(PrizeCategory.category_name == category_name, PrizeCategory.awarded_count > 0)
            .values(awarded_count=PrizeCategory.awarded_count - 1)
            .execution_options(synchronize_session=False)
        )
        released = session.execute(stmt).rowcount == 1
        self._expire_counter(session, category_name)
        return released
