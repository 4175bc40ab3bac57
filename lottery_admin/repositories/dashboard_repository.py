"""Aggregate queries behind the dashboard."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from lottery_admin.models.diary import Diary
from lottery_admin.models.diary_allotment import AllotmentStatus, DiaryAllotment
from lottery_admin.models.issuer import Issuer
from lottery_admin.models.ticket_sale import TicketSale


def _money(value: object) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class DashboardRepository:
    def sales_totals(self, session: Session) -> tuple[int, Decimal]:
        count, revenue = session.execute(
            select(func.count(TicketSale.id), func.coalesce(func.sum(TicketSale.amount_paid), 0))
        ).one()
        return int(count), _money(revenue)

    def allotment_counts(self, session: Session) -> dict[str, int]:
        rows = session.execute(
            select(DiaryAllotment.status, func.count(DiaryAllotment.id)).group_by(DiaryAllotment.status)
        ).all()
        return {str(status): int(count) for status, count in rows}

    def amount_collected(self, session: Session) -> Decimal:
        return _money(session.scalar(select(func.coalesce(func.sum(DiaryAllotment.amount_collected), 0))))

    def expected_from_active_allotments(self, session: Session) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(Diary.expected_amount), 0))
            .select_from(DiaryAllotment)
            .join(Diary, Diary.id == DiaryAllotment.diary_id)
            .where(DiaryAllotment.status != AllotmentStatus.RETURNED.value)
        )
        return _money(session.scalar(stmt))

    def issuer_rows(self, session: Session) -> list[dict[str, object]]:
        allotted = (
            select(
                DiaryAllotment.issuer_id.label("issuer_id"),
                func.count(DiaryAllotment.id).label("diaries_allotted"),
                func.sum(case((DiaryAllotment.status == AllotmentStatus.PAID.value, 1), else_=0)).label("diaries_paid"),
                func.coalesce(func.sum(DiaryAllotment.amount_collected), 0).label("total_collected"),
                func.coalesce(func.sum(Diary.expected_amount), 0).label("expected_amount"),
            )
            .join(Diary, Diary.id == DiaryAllotment.diary_id)
            .group_by(DiaryAllotment.issuer_id)
            .subquery()
        )
        sold = (
            select(TicketSale.issuer_id.label("issuer_id"), func.count(TicketSale.id).label("tickets_sold"))
            .group_by(TicketSale.issuer_id)
            .subquery()
        )
        stmt = (
            select(
                Issuer.id,
                Issuer.issuer_name,
                Issuer.contact_number,
                func.coalesce(allotted.c.diaries_allotted, 0),
                func.coalesce(allotted.c.diaries_paid, 0),
                func.coalesce(sold.c.tickets_sold, 0),
                func.coalesce(allotted.c.total_collected, 0),
                func.coalesce(allotted.c.expected_amount, 0),
            )
            .outerjoin(allotted, allotted.c.issuer_id == Issuer.id)
            .outerjoin(sold, sold.c.issuer_id == Issuer.id)
        )
        out: list[dict[str, object]] = []
        for row in session.execute(stmt).all():
            out.append(
                {
                    "id": int(row[0]),
                    "issuer_name": row[1],
                    "contact_number": row[2],
                    "diaries_allotted": int(row[3]),
                    "diaries_paid": int(row[4]),
                    "tickets_sold": int(row[5]),
                    "total_collected": _money(row[6]),
                    "expected_amount": _money(row[7]),
                }
            )
        return out
