"""Business logic for diaries, issuers and diary allotments."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from lottery_admin.errors import ConflictError, NotFoundError, ValidationError
from lottery_admin.models.diary import Diary
from lottery_admin.models.diary_allotment import AllotmentStatus, DiaryAllotment
from lottery_admin.models.issuer import Issuer
from lottery_admin.numbering import ensure_diary_number, iter_diary_layouts
from lottery_admin.repositories.diary_repository import AllotmentRepository, DiaryRepository, IssuerRepository

logger = logging.getLogger(__name__)


class DiaryService:
    """Diary, issuer and allotment use-cases."""

    def __init__(
        self,
        diaries: DiaryRepository | None = None,
        issuers: IssuerRepository | None = None,
        allotments: AllotmentRepository | None = None,
    ) -> None:
        self._diaries = diaries or DiaryRepository()
        self._issuers = issuers or IssuerRepository()
        self._allotments = allotments or AllotmentRepository()

    # Diaries

    def seed_diaries(self, session: Session, ticket_price: int) -> int:
        """Create any missing diary rows from the fixed numbering layout.

        Returns:
            Number of diaries inserted.
        """

        existing = self._diaries.existing_numbers(session)
        price = Decimal(ticket_price)
        missing = [
            Diary(
                diary_number=layout.diary_number,
                ticket_start_range=layout.ticket_start_range,
                ticket_end_range=layout.ticket_end_range,
                total_tickets=layout.total_tickets,
                expected_amount=price * layout.total_tickets,
            )
            for layout in iter_diary_layouts()
            if layout.diary_number not in existing
        ]
        if not missing:
            return 0
        inserted = self._diaries.add_all(session, missing)
        logger.info("Seeded %d diaries", inserted)
        return inserted

    def list_diaries(self, session: Session, *, offset: int = 0, limit: int | None = None) -> Sequence[Diary]:
        return self._diaries.list_diaries(session, offset=offset, limit=limit)

    def count_diaries(self, session: Session) -> int:
        return self._diaries.count(session)

    def get_diary(self, session: Session, diary_number: int) -> Diary:
        ensure_diary_number(diary_number)
        diary = self._diaries.get_by_number(session, diary_number)
        if diary is None:
            raise NotFoundError(message=f"Diary {diary_number} not found")
        return diary

    # Issuers

    def list_issuers(self, session: Session) -> Sequence[Issuer]:
        return self._issuers.list_issuers(session)

    def get_issuer(self, session: Session, issuer_id: int) -> Issuer:
        issuer = self._issuers.get_by_id(session, issuer_id)
        if issuer is None:
            raise NotFoundError(message=f"Issuer {issuer_id} not found")
        return issuer

    def create_issuer(self, session: Session, *, issuer_name: str, contact_number: str, address: str | None = None) -> Issuer:
        return self._issuers.create(session, issuer_name=issuer_name, contact_number=contact_number, address=address)

    def update_issuer(self, session: Session, issuer_id: int, changes: dict) -> Issuer:
        issuer = self.get_issuer(session, issuer_id)
        for field in ("issuer_name", "contact_number", "address"):
            if field in changes:
                setattr(issuer, field, changes[field])
        session.flush()
        return issuer

    def delete_issuer(self, session: Session, issuer_id: int) -> None:
        self._issuers.delete(session, self.get_issuer(session, issuer_id))

    # Allotments

    def list_allotments(self, session: Session, *, status: str | None = None) -> Sequence[DiaryAllotment]:
        return self._allotments.list_allotments(session, status=status)

    def get_allotment(self, session: Session, allotment_id: int) -> DiaryAllotment:
        allotment = self._allotments.get_by_id(session, allotment_id)
        if allotment is None:
            raise NotFoundError(message=f"Allotment {allotment_id} not found")
        return allotment

    def allot_diary(
        self,
        session: Session,
        *,
        diary_number: int,
        issuer_id: int,
        allotment_date: date | None = None,
        notes: str | None = None,
    ) -> DiaryAllotment:
        diary = self.get_diary(session, diary_number)
        issuer = self.get_issuer(session, issuer_id)
        if self._allotments.get_for_diary(session, diary.id) is not None:
            raise ConflictError(message="This diary is already allotted to an issuer", details={"diary_number": diary_number})

        allotment = self._allotments.create(
            session,
            diary_id=diary.id,
            issuer_id=issuer.id,
            allotment_date=allotment_date or date.today(),
            status=AllotmentStatus.ALLOTTED.value,
            amount_collected=Decimal("0"),
            notes=notes,
        )
        logger.info("Allotted diary %d to issuer %d", diary_number, issuer.id)
        return allotment

    def update_status(self, session: Session, allotment_id: int, status: str) -> DiaryAllotment:
        """Move an allotment to ``status``.

        A paid diary is credited with its full expected amount; every other
        status resets the collected amount to zero.
        """

        try:
            new_status = AllotmentStatus(status)
        except ValueError as exc:
            raise ValidationError(message=f"Unknown allotment status: {status}") from exc

        allotment = self.get_allotment(session, allotment_id)
        allotment.status = new_status.value
        if new_status is AllotmentStatus.PAID:
            allotment.amount_collected = Decimal(allotment.diary.expected_amount)
        else:
            allotment.amount_collected = Decimal("0")
        session.flush()
        logger.info("Allotment %d status -> %s", allotment_id, new_status.value)
        return allotment

    def delete_allotment(self, session: Session, allotment_id: int) -> None:
        self._allotments.delete(session, self.get_allotment(session, allotment_id))
