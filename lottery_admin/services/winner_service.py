"""Business logic for prize winners.

Registration copies the purchaser details of an existing ticket sale into a
winner row. The prize ceiling of each category is enforced by a conditional
counter update in the same transaction as the insert; the write-path guard
runs when the row is flushed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from lottery_admin.errors import (
    DuplicateWinnerViolation,
    MissingRequiredField,
    NotFoundError,
    QuantityExceeded,
    ValidationError,
)
from lottery_admin.models.lottery_winner import LotteryWinner
from lottery_admin.models.prize_category import PrizeCategory
from lottery_admin.numbering import diary_for_ticket, ensure_ticket_number, format_ticket_number
from lottery_admin.repositories.prize_category_repository import PrizeCategoryRepository
from lottery_admin.repositories.ticket_sale_repository import TicketSaleRepository
from lottery_admin.repositories.winner_repository import WinnerRepository

logger = logging.getLogger(__name__)

# (category name, total quantity), in display order.
PRIZE_CATEGORIES: tuple[tuple[str, int], ...] = (
    ("THAR CAR", 1),
    ("SWIFT CAR", 1),
    ("E-Rickshaw", 1),
    ("Bullet Bike", 1),
    ("HF delux Bike", 5),
    ("Electric Bike", 3),
    ("AC 1Ton", 1),
    ("Laptop", 3),
    ("32 Inch LED TV", 5),
    ("Fridge", 5),
    ("Washing Machine", 5),
    ("Sewing Machine", 5),
    ("Sports Cycle", 5),
    ("5G Mobile", 11),
    ("Cooler", 11),
    ("Child EV Bike", 10),
    ("Home Theater", 5),
    ("Electric Water Heater", 5),
    ("Battery Spray Pump", 27),
    ("Mixer", 10),
    ("Induction stove", 10),
    ("Ceiling Fan", 10),
    ("Smart Watch", 11),
    ("Gas Stove", 27),
    ("Helmet", 54),
    ("Silver Coin", 54),
    ("Wall Clock", 108),
    ("Photo Frame", 108),
)

UPDATABLE_FIELDS = ("prize_category", "winner_name", "winner_contact", "winner_address", "notes")


@dataclass(frozen=True)
class CategoryStats:
    category_name: str
    total_quantity: int
    winners_count: int

    @property
    def remaining_quantity(self) -> int:
        return self.total_quantity - self.winners_count


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class WinnerService:
    """Winner use-cases."""

    def __init__(
        self,
        winners: WinnerRepository | None = None,
        categories: PrizeCategoryRepository | None = None,
        sales: TicketSaleRepository | None = None,
    ) -> None:
        self._winners = winners or WinnerRepository()
        self._categories = categories or PrizeCategoryRepository()
        self._sales = sales or TicketSaleRepository()

    def seed_categories(self, session: Session) -> int:
        existing = self._categories.existing_names(session)
        inserted = 0
        for order, (name, quantity) in enumerate(PRIZE_CATEGORIES):
            if name in existing:
                continue
            self._categories.create(session, category_name=name, total_quantity=quantity, display_order=order)
            inserted += 1
        if inserted:
            logger.info("Seeded %d prize categories", inserted)
        return inserted

    def list_categories(self, session: Session) -> Sequence[PrizeCategory]:
        return self._categories.list_categories(session)

    def _get_category(self, session: Session, name: str) -> PrizeCategory:
        category = self._categories.get_by_name(session, name)
        if category is None:
            raise ValidationError(message=f"Unknown prize category: {name}", details={"prize_category": name})
        return category

    def _claim(self, session: Session, category: PrizeCategory) -> None:
        if not self._categories.claim_slot(session, category.category_name):
            raise QuantityExceeded(category.category_name)

    def list_winners(
        self,
        session: Session,
        *,
        search: str | None = None,
        prize_category: str | None = None,
    ) -> Sequence[LotteryWinner]:
        return self._winners.list_winners(session, search=search, prize_category=prize_category)

    def get_winner(self, session: Session, winner_id: int) -> LotteryWinner:
        winner = self._winners.get_by_id(session, winner_id)
        if winner is None:
            raise NotFoundError(message=f"Winner {winner_id} not found")
        return winner

    def latest(self, session: Session) -> LotteryWinner | None:
        return self._winners.latest(session)

    def won_numbers(self, session: Session) -> set[int]:
        return self._winners.won_numbers(session)

    def register(
        self,
        session: Session,
        *,
        lottery_number: int,
        prize_category: str,
        notes: str | None = None,
    ) -> LotteryWinner:
        """Register the purchaser of ``lottery_number`` as a winner of ``prize_category``.

        Raises:
            NotFoundError: no sale is recorded for the ticket.
            MissingRequiredField: the sale has no purchaser name or contact.
            DuplicateWinnerViolation: the ticket has already won.
            QuantityExceeded: the category has no prizes left.
        """

        ensure_ticket_number(lottery_number)
        label = format_ticket_number(lottery_number)

        sale = self._sales.get_by_lottery_number(session, lottery_number)
        if sale is None:
            raise NotFoundError(message=f"No ticket found for lottery number {label}")
        if _blank(sale.purchaser_name):
            raise MissingRequiredField("winner_name")
        if _blank(sale.purchaser_contact):
            raise MissingRequiredField("winner_contact")

        category = self._get_category(session, prize_category.strip())

        if self._winners.get_by_lottery_number(session, lottery_number) is not None:
            raise DuplicateWinnerViolation(lottery_number)

        self._claim(session, category)
        winner = self._winners.create(
            session,
            lottery_number=lottery_number,
            ticket_sale_id=sale.id,
            prize_category=category.category_name,
            prize_quantity=category.total_quantity,
            winner_name=sale.purchaser_name,
            winner_contact=sale.purchaser_contact,
            winner_address=sale.purchaser_address or None,
            diary_number=diary_for_ticket(lottery_number),
            notes=notes,
        )
        logger.info("Registered winner %s for %s (%s)", label, category.category_name, winner.winner_name)
        return winner

    def update(self, session: Session, winner_id: int, changes: dict[str, Any]) -> LotteryWinner:
        """Apply an edit to a winner.

        ``lottery_number`` may be present in ``changes``; it is handed to the
        write-path guard, which rejects any change to it.
        """

        winner = self.get_winner(session, winner_id)

        new_category = changes.get("prize_category")
        if "prize_category" in changes and not _blank(new_category) and new_category.strip() != winner.prize_category:
            category = self._get_category(session, new_category.strip())
            self._categories.release_slot(session, winner.prize_category)
            self._claim(session, category)
            winner.prize_quantity = category.total_quantity

        for name in UPDATABLE_FIELDS:
            if name in changes:
                setattr(winner, name, changes[name])
        if "lottery_number" in changes:
            winner.lottery_number = changes["lottery_number"]

        self._winners.save(session, winner)
        logger.info("Updated winner %d (%s)", winner.id, format_ticket_number(winner.lottery_number))
        return winner

    def delete(self, session: Session, winner_id: int) -> None:
        winner = self.get_winner(session, winner_id)
        self._categories.release_slot(session, winner.prize_category)
        self._winners.delete(session, winner)
        logger.info("Deleted winner %d (%s)", winner_id, format_ticket_number(winner.lottery_number))

    def category_stats(self, session: Session) -> list[CategoryStats]:
        counts = self._winners.count_by_category(session)
        return [
            CategoryStats(
                category_name=c.category_name,
                total_quantity=c.total_quantity,
                winners_count=counts.get(c.category_name, 0),
            )
            for c in self._categories.list_categories(session)
        ]
