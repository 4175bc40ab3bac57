"""Business logic for ticket sales, auto-fill and search."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from lottery_admin.errors import ConflictError, DiaryNotAllotted, NotFoundError, TicketNotInDiary
from lottery_admin.models.diary import Diary
from lottery_admin.models.diary_allotment import SELLABLE_STATUSES, AllotmentStatus, DiaryAllotment
from lottery_admin.models.issuer import Issuer
from lottery_admin.models.ticket_sale import TicketSale
from lottery_admin.numbering import (
    MAX_TICKET_NUMBER,
    MIN_TICKET_NUMBER,
    diary_for_ticket,
    ensure_ticket_number,
    format_ticket_number,
    is_ticket_in_diary,
    ticket_range_for_diary,
)
from lottery_admin.repositories.diary_repository import AllotmentRepository, DiaryRepository, IssuerRepository
from lottery_admin.repositories.ticket_sale_repository import TicketSaleRepository
from lottery_admin.repositories.winner_repository import WinnerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutofillResult:
    lottery_number: int
    diary: Diary | None
    diary_number: int
    ticket_start_range: int
    ticket_end_range: int
    issuer: Issuer | None
    allotted: bool
    amount_paid: int


@dataclass(frozen=True)
class MissingDiaryGroup:
    diary_number: int
    missing_numbers: list[int]

    @property
    def missing_count(self) -> int:
        return len(self.missing_numbers)


@dataclass(frozen=True)
class MissingTicketsResult:
    total_missing: int
    grouped_by_diary: list[MissingDiaryGroup]


@dataclass
class SearchFilters:
    lottery_number: int | None = None
    purchaser_name: str | None = None
    purchaser_contact: str | None = None
    issuer_name: str | None = None
    diary_number: int | None = None
    first_ticket_number: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    status: str | None = None


@dataclass
class SearchResult:
    tickets: list[TicketSale] = field(default_factory=list)
    allotments: list[DiaryAllotment] = field(default_factory=list)
    message: str | None = None


class TicketSaleService:
    """Ticket sale use-cases."""

    def __init__(
        self,
        sales: TicketSaleRepository | None = None,
        diaries: DiaryRepository | None = None,
        issuers: IssuerRepository | None = None,
        allotments: AllotmentRepository | None = None,
        winners: WinnerRepository | None = None,
    ) -> None:
        self._sales = sales or TicketSaleRepository()
        self._diaries = diaries or DiaryRepository()
        self._issuers = issuers or IssuerRepository()
        self._allotments = allotments or AllotmentRepository()
        self._winners = winners or WinnerRepository()

    def autofill(self, session: Session, lottery_number: int, ticket_price: int) -> AutofillResult:
        """Resolve the diary (and its issuer, if allotted) for a typed ticket number."""

        ensure_ticket_number(lottery_number)
        diary_number = diary_for_ticket(lottery_number)
        rng = ticket_range_for_diary(diary_number)
        diary = self._diaries.get_by_number(session, diary_number)

        issuer: Issuer | None = None
        if diary is not None:
            allotment = self._allotments.get_for_diary(session, diary.id)
            if allotment is not None and allotment.status == AllotmentStatus.ALLOTTED.value:
                issuer = allotment.issuer

        return AutofillResult(
            lottery_number=lottery_number,
            diary=diary,
            diary_number=diary_number,
            ticket_start_range=rng.start,
            ticket_end_range=rng.end,
            issuer=issuer,
            allotted=issuer is not None,
            amount_paid=ticket_price,
        )

    def list_sales(self, session: Session, *, offset: int = 0, limit: int | None = None) -> Sequence[TicketSale]:
        return self._sales.list_sales(session, offset=offset, limit=limit)

    def count_sales(self, session: Session) -> int:
        return self._sales.count(session)

    def get_sale(self, session: Session, sale_id: int) -> TicketSale:
        sale = self._sales.get_by_id(session, sale_id)
        if sale is None:
            raise NotFoundError(message=f"Ticket sale {sale_id} not found")
        return sale

    def get_by_lottery_number(self, session: Session, lottery_number: int) -> TicketSale:
        ensure_ticket_number(lottery_number)
        sale = self._sales.get_by_lottery_number(session, lottery_number)
        if sale is None:
            raise NotFoundError(message=f"No ticket found for lottery number {format_ticket_number(lottery_number)}")
        return sale

    def _resolve_diary(self, session: Session, lottery_number: int, diary_number: int | None) -> tuple[Diary, DiaryAllotment]:
        ensure_ticket_number(lottery_number)
        if diary_number is None:
            diary_number = diary_for_ticket(lottery_number)
        elif not is_ticket_in_diary(lottery_number, diary_number):
            raise TicketNotInDiary(lottery_number, diary_number)

        diary = self._diaries.get_by_number(session, diary_number)
        if diary is None:
            raise NotFoundError(message=f"Diary {diary_number} not found")

        allotment = self._allotments.get_for_diary(session, diary.id)
        if allotment is None or allotment.status not in SELLABLE_STATUSES:
            raise DiaryNotAllotted(diary_number)
        return diary, allotment

    def _resolve_issuer_id(self, session: Session, issuer_id: int | None, allotment: DiaryAllotment | None) -> int | None:
        if issuer_id is None:
            return allotment.issuer_id if allotment is not None else None
        if self._issuers.get_by_id(session, issuer_id) is None:
            raise NotFoundError(message=f"Issuer {issuer_id} not found")
        return issuer_id

    def create_sale(self, session: Session, data: dict[str, Any], ticket_price: int) -> TicketSale:
        lottery_number = int(data["lottery_number"])
        diary, allotment = self._resolve_diary(session, lottery_number, data.get("diary_number"))

        if self._sales.get_by_lottery_number(session, lottery_number) is not None:
            raise ConflictError(message="Lottery number already exists", details={"lottery_number": lottery_number})

        sale = self._sales.create(
            session,
            lottery_number=lottery_number,
            purchaser_name=data["purchaser_name"],
            purchaser_contact=data["purchaser_contact"],
            purchaser_address=data.get("purchaser_address"),
            issuer_id=self._resolve_issuer_id(session, data.get("issuer_id"), allotment),
            diary=diary,
            purchase_date=data.get("purchase_date") or date.today(),
            amount_paid=Decimal(data.get("amount_paid") if data.get("amount_paid") is not None else ticket_price),
        )
        logger.info("Recorded sale of ticket %s in diary %d", format_ticket_number(lottery_number), diary.diary_number)
        return sale

    def update_sale(self, session: Session, sale_id: int, data: dict[str, Any]) -> TicketSale:
        sale = self.get_sale(session, sale_id)

        lottery_number = int(data.get("lottery_number", sale.lottery_number))
        if lottery_number != sale.lottery_number:
            if self._winners.get_by_lottery_number(session, sale.lottery_number) is not None:
                raise ConflictError(
                    message="Ticket has a registered winner; its lottery number cannot change",
                    details={"lottery_number": sale.lottery_number},
                )
            if self._sales.get_by_lottery_number(session, lottery_number) is not None:
                raise ConflictError(message="Lottery number already exists", details={"lottery_number": lottery_number})

        allotment: DiaryAllotment | None = None
        if lottery_number != sale.lottery_number or data.get("diary_number") is not None:
            diary, allotment = self._resolve_diary(session, lottery_number, data.get("diary_number"))
            sale.lottery_number = lottery_number
            sale.diary = diary
        if data.get("issuer_id") is not None:
            sale.issuer_id = self._resolve_issuer_id(session, data["issuer_id"], allotment)
        elif allotment is not None:
            sale.issuer_id = allotment.issuer_id
        for name in ("purchaser_name", "purchaser_contact", "purchaser_address", "purchase_date"):
            if name in data:
                setattr(sale, name, data[name])
        if data.get("amount_paid") is not None:
            sale.amount_paid = Decimal(data["amount_paid"])

        session.flush()
        session.refresh(sale)
        return sale

    def delete_sale(self, session: Session, sale_id: int) -> None:
        self._sales.delete(session, self.get_sale(session, sale_id))

    def missing_tickets(self, session: Session) -> MissingTicketsResult:
        """Every ticket number with no recorded sale, grouped by diary."""

        sold = self._sales.sold_numbers(session)
        groups: dict[int, list[int]] = {}
        total = 0
        for number in range(MIN_TICKET_NUMBER, MAX_TICKET_NUMBER + 1):
            if number in sold:
                continue
            groups.setdefault(diary_for_ticket(number), []).append(number)
            total += 1

        return MissingTicketsResult(
            total_missing=total,
            grouped_by_diary=[MissingDiaryGroup(diary_number=d, missing_numbers=nums) for d, nums in sorted(groups.items())],
        )

    def search(self, session: Session, filters: SearchFilters) -> SearchResult:
        """Advanced search across ticket sales and diary allotments."""

        issuer_ids: list[int] | None = None
        diary_ids: list[int] | None = None

        if filters.issuer_name:
            issuer_ids = self._issuers.ids_by_name(session, filters.issuer_name)
            if not issuer_ids:
                return SearchResult(message=f'No issuer found with name containing "{filters.issuer_name}"')

        if filters.diary_number is not None:
            diary = self._diaries.get_by_number(session, filters.diary_number)
            if diary is None:
                return SearchResult(message=f"No diary found with number {filters.diary_number}")
            diary_ids = [diary.id]

        if filters.first_ticket_number is not None:
            first_ids = [d.id for d in self._diaries.list_by_start(session, filters.first_ticket_number)]
            if not first_ids:
                return SearchResult(
                    message=f"No diaries found with lottery number {filters.first_ticket_number:05d} as first ticket"
                )
            diary_ids = first_ids if diary_ids is None else [i for i in diary_ids if i in first_ids]

        tickets = self._sales.search(
            session,
            lottery_number=filters.lottery_number,
            purchaser_name=filters.purchaser_name,
            purchaser_contact=filters.purchaser_contact,
            issuer_ids=issuer_ids,
            diary_ids=diary_ids,
            date_from=filters.date_from,
            date_to=filters.date_to,
        )
        allotments = self._allotments.search(
            session,
            issuer_ids=issuer_ids,
            diary_ids=diary_ids,
            date_from=filters.date_from,
            date_to=filters.date_to,
            status=filters.status,
        )
        return SearchResult(
            tickets=list(tickets),
            allotments=list(allotments),
            message=f"Found {len(tickets)} tickets and {len(allotments)} allotments",
        )
