"""Repository layer for diaries, issuers and allotments."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery_admin.models.diary import Diary
from lottery_admin.models.diary_allotment import DiaryAllotment
from lottery_admin.models.issuer import Issuer


class DiaryRepository:
    """Read access to the pre-generated diaries."""

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count(Diary.id))) or 0)

    def list_diaries(self, session: Session, *, offset: int = 0, limit: int | None = None) -> Sequence[Diary]:
        stmt = select(Diary).order_by(Diary.diary_number.asc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).all())

    def get_by_id(self, session: Session, diary_id: int) -> Diary | None:
        return session.get(Diary, diary_id)

    def get_by_number(self, session: Session, diary_number: int) -> Diary | None:
        stmt = select(Diary).where(Diary.diary_number == diary_number)
        return session.scalars(stmt).one_or_none()

    def list_by_start(self, session: Session, ticket_start_range: int) -> Sequence[Diary]:
        stmt = select(Diary).where(Diary.ticket_start_range == ticket_start_range)
        return list(session.scalars(stmt).all())

    def existing_numbers(self, session: Session) -> set[int]:
        return set(session.scalars(select(Diary.diary_number)).all())

    def add_all(self, session: Session, diaries: Iterable[Diary]) -> int:
        items = list(diaries)
        session.add_all(items)
        session.flush()
        return len(items)


class IssuerRepository:
    """CRUD operations for Issuer."""

    def list_issuers(self, session: Session) -> Sequence[Issuer]:
        stmt = select(Issuer).order_by(Issuer.issuer_name.asc())
        return list(session.scalars(stmt).all())

    def get_by_id(self, session: Session, issuer_id: int) -> Issuer | None:
        return session.get(Issuer, issuer_id)

    def ids_by_name(self, session: Session, name_fragment: str) -> list[int]:
        stmt = select(Issuer.id).where(Issuer.issuer_name.ilike(f"%{name_fragment}%"))
        return list(session.scalars(stmt).all())

    def create(self, session: Session, *, issuer_name: str, contact_number: str, address: str | None) -> Issuer:
        issuer = Issuer(issuer_name=issuer_name, contact_number=contact_number, address=address)
        session.add(issuer)
        session.flush()  # assign PK
        return issuer

    def delete(self, session: Session, issuer: Issuer) -> None:
        session.delete(issuer)
        session.flush()


class AllotmentRepository:
    """CRUD operations for DiaryAllotment."""

    def list_allotments(self, session: Session, *, status: str | None = None) -> Sequence[DiaryAllotment]:
        stmt = select(DiaryAllotment).order_by(DiaryAllotment.created_at.desc(), DiaryAllotment.id.desc())
        if status:
            stmt = stmt.where(DiaryAllotment.status == status)
        return list(session.scalars(stmt).unique().all())

    def get_by_id(self, session: Session, allotment_id: int) -> DiaryAllotment | None:
        return session.get(DiaryAllotment, allotment_id)

    def get_for_diary(self, session: Session, diary_id: int) -> DiaryAllotment | None:
        stmt = select(DiaryAllotment).where(DiaryAllotment.diary_id == diary_id)
        return session.scalars(stmt).unique().one_or_none()

    def search(
        self,
        session: Session,
        *,
        issuer_ids: list[int] | None = None,
        diary_ids: list[int] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        status: str | None = None,
    ) -> Sequence[DiaryAllotment]:
        stmt = select(DiaryAllotment)
        if issuer_ids is not None:
            stmt = stmt.where(DiaryAllotment.issuer_id.in_(issuer_ids))
        if diary_ids is not None:
            stmt = stmt.where(DiaryAllotment.diary_id.in_(diary_ids))
        if date_from:
            stmt = stmt.where(DiaryAllotment.allotment_date >= date_from)
        if date_to:
            stmt = stmt.where(DiaryAllotment.allotment_date <= date_to)
        if status:
            stmt = stmt.where(DiaryAllotment.status == status)
        stmt = stmt.order_by(DiaryAllotment.created_at.desc(), DiaryAllotment.id.desc())
        return list(session.scalars(stmt).unique().all())

    def create(self, session: Session, **values: object) -> DiaryAllotment:
        allotment = DiaryAllotment(**values)
        session.add(allotment)
        session.flush()
        return allotment

    def delete(self, session: Session, allotment: DiaryAllotment) -> None:
        session.delete(allotment)
        session.flush()
