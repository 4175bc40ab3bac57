"""Dashboard statistics."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from lottery_admin.models.diary_allotment import AllotmentStatus
from lottery_admin.repositories.dashboard_repository import DashboardRepository
from lottery_admin.repositories.diary_repository import DiaryRepository


@dataclass(frozen=True)
class DashboardStats:
    total_tickets_sold: int
    total_revenue: Decimal
    diaries_allotted: int
    diaries_fully_sold: int
    diaries_paid: int
    diaries_returned: int
    diaries_remaining: int
    total_amount_collected: Decimal
    expected_amount_from_allotted: Decimal


class DashboardService:
    def __init__(self, repository: DashboardRepository | None = None, diaries: DiaryRepository | None = None) -> None:
        self._repo = repository or DashboardRepository()
        self._diaries = diaries or DiaryRepository()

    def stats(self, session: Session) -> DashboardStats:
        sold, revenue = self._repo.sales_totals(session)
        by_status = self._repo.allotment_counts(session)
        allotted_total = sum(by_status.values())

        return DashboardStats(
            total_tickets_sold=sold,
            total_revenue=revenue,
            diaries_allotted=by_status.get(AllotmentStatus.ALLOTTED.value, 0),
            diaries_fully_sold=by_status.get(AllotmentStatus.FULLY_SOLD.value, 0),
            diaries_paid=by_status.get(AllotmentStatus.PAID.value, 0),
            diaries_returned=by_status.get(AllotmentStatus.RETURNED.value, 0),
            diaries_remaining=max(self._diaries.count(session) - allotted_total, 0),
            total_amount_collected=self._repo.amount_collected(session),
            expected_amount_from_allotted=self._repo.expected_from_active_allotments(session),
        )

    def issuer_performance(self, session: Session) -> list[dict[str, object]]:
        """Per-issuer collection figures, best collectors first."""

        rows = self._repo.issuer_rows(session)
        for row in rows:
            expected = row["expected_amount"]
            collected = row["total_collected"]
            if expected:
                pct = (Decimal(collected) / Decimal(expected) * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            else:
                pct = Decimal("0.00")
            row["collection_percentage"] = pct
        rows.sort(key=lambda r: r["total_collected"], reverse=True)  # type: ignore[arg-type, return-value]
        return rows
