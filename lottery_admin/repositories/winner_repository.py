"""Repository layer for lottery winners."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lottery_admin.errors import DuplicateWinnerViolation
from lottery_admin.models.lottery_winner import LotteryWinner


def _is_lottery_number_conflict(exc: IntegrityError) -> bool:
    text = str(exc.orig) if exc.orig is not None else str(exc)
    text = text.lower()
    return "lottery_number" in text and ("unique" in text or "duplicate" in text)


class WinnerRepository:
    """CRUD operations for LotteryWinner.

    Every insert and update is flushed immediately so that the write-path
    guard and the store's constraints are evaluated inside the caller's
    transaction.
    """

    def list_winners(
        self,
        session: Session,
        *,
        search: str | None = None,
        prize_category: str | None = None,
    ) -> Sequence[LotteryWinner]:
        stmt = select(LotteryWinner)
        if prize_category:
            stmt = stmt.where(LotteryWinner.prize_category == prize_category)
        if search:
            pattern = f"%{search}%"
            conditions = [
                LotteryWinner.winner_name.ilike(pattern),
                LotteryWinner.winner_contact.ilike(pattern),
                LotteryWinner.prize_category.ilike(pattern),
            ]
            digits = search.strip().lstrip("0")
            if digits.isascii() and digits.isdigit():
                conditions.append(cast(LotteryWinner.lottery_number, String).contains(digits))
            stmt = stmt.where(or_(*conditions))
        stmt = stmt.order_by(LotteryWinner.registered_at.desc(), LotteryWinner.id.desc())
        return list(session.scalars(stmt).unique().all())

    def get_by_id(self, session: Session, winner_id: int) -> LotteryWinner | None:
        return session.get(LotteryWinner, winner_id)

    def get_by_lottery_number(self, session: Session, lottery_number: int) -> LotteryWinner | None:
        stmt = select(LotteryWinner).where(LotteryWinner.lottery_number == lottery_number)
        return session.scalars(stmt).unique().one_or_none()

    def won_numbers(self, session: Session) -> set[int]:
        return {int(n) for n in session.scalars(select(LotteryWinner.lottery_number)).all()}

    def latest(self, session: Session) -> LotteryWinner | None:
        stmt = select(LotteryWinner).order_by(LotteryWinner.registered_at.desc(), LotteryWinner.id.desc()).limit(1)
        return session.scalars(stmt).unique().first()

    def count_by_category(self, session: Session) -> dict[str, int]:
        stmt = select(LotteryWinner.prize_category, func.count(LotteryWinner.id)).group_by(
            LotteryWinner.prize_category
        )
        return {str(name): int(count) for name, count in session.execute(stmt).all()}

    def create(self, session: Session, **values: object) -> LotteryWinner:
        winner = LotteryWinner(**values)
        session.add(winner)
        try:
            session.flush()
        except IntegrityError as exc:
            if _is_lottery_number_conflict(exc):
                raise DuplicateWinnerViolation(int(values["lottery_number"])) from exc  # type: ignore[arg-type]
            raise
        return winner

    def save(self, session: Session, winner: LotteryWinner) -> LotteryWinner:
        session.flush()
        return winner

    def delete(self, session: Session, winner: LotteryWinner) -> None:
        session.delete(winner)
        session.flush()
