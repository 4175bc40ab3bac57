"""Repository layer for ticket sales."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_admin.models.ticket_sale import TicketSale


class TicketSaleRepository:
    """CRUD operations for TicketSale."""

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count(TicketSale.id))) or 0)

    def list_sales(self, session: Session, *, offset: int = 0, limit: int | None = None) -> Sequence[TicketSale]:
        stmt = select(TicketSale).order_by(TicketSale.created_at.desc(), TicketSale.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).unique().all())

    def get_by_id(self, session: Session, sale_id: int) -> TicketSale | None:
        return session.get(TicketSale, sale_id)

    def get_by_lottery_number(self, session: Session, lottery_number: int) -> TicketSale | None:
        stmt = select(TicketSale).where(TicketSale.lottery_number == lottery_number)
        return session.scalars(stmt).unique().one_or_none()

    def sold_numbers(self, session: Session) -> set[int]:
        return {int(n) for n in session.scalars(select(TicketSale.lottery_number)).all()}

    def search(
        self,
        session: Session,
        *,
        lottery_number: int | None = None,
        purchaser_name: str | None = None,
        purchaser_contact: str | None = None,
        issuer_ids: list[int] | None = None,
        diary_ids: list[int] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Sequence[TicketSale]:
        stmt = select(TicketSale)
        if lottery_number is not None:
            stmt = stmt.where(TicketSale.lottery_number == lottery_number)
        if purchaser_name:
            stmt = stmt.where(TicketSale.purchaser_name.ilike(f"%{purchaser_name}%"))
        if purchaser_contact:
            stmt = stmt.where(TicketSale.purchaser_contact.ilike(f"%{purchaser_contact}%"))
        if issuer_ids is not None:
            stmt = stmt.where(TicketSale.issuer_id.in_(issuer_ids))
        if diary_ids is not None:
            stmt = stmt.where(TicketSale.diary_id.in_(diary_ids))
        if date_from:
            stmt = stmt.where(TicketSale.purchase_date >= date_from)
        if date_to:
            stmt = stmt.where(TicketSale.purchase_date <= date_to)
        stmt = stmt.order_by(TicketSale.created_at.desc(), TicketSale.id.desc())
        return list(session.scalars(stmt).unique().all())

    def create(self, session: Session, **values: object) -> TicketSale:
        sale = TicketSale(**values)
        session.add(sale)
        session.flush()
        return sale

    def delete(self, session: Session, sale: TicketSale) -> None:
        session.delete(sale)
        session.flush()
