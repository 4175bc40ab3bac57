"""Ticket number <-> diary mapping.

Tickets 1..39999 are bound into diaries of 22 consecutive numbers. Diaries
1..1818 cover 1..39996; diary 1819 holds the three trailing tickets
39997..39999.

All functions are pure. Out-of-range input raises a typed validation error
instead of extrapolating the formula.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from lottery_admin.errors import DiaryNumberOutOfRange, TicketNumberOutOfRange, ValidationError

MIN_TICKET_NUMBER = 1
MAX_TICKET_NUMBER = 39999
TICKETS_PER_DIARY = 22
LAST_DIARY_NUMBER = 1819
LAST_DIARY_TICKETS = 3
TICKET_NUMBER_WIDTH = 5

# Last ticket of the last full-size diary (1818 * 22).
_LAST_REGULAR_TICKET = (LAST_DIARY_NUMBER - 1) * TICKETS_PER_DIARY


@dataclass(frozen=True)
class TicketRange:
    """Inclusive range of ticket numbers held by one diary."""

    start: int
    end: int

    def __contains__(self, ticket_number: object) -> bool:
        if not isinstance(ticket_number, int):
            return False
        return self.start <= ticket_number <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class DiaryLayout:
    diary_number: int
    ticket_start_range: int
    ticket_end_range: int
    total_tickets: int


def ensure_ticket_number(ticket_number: int) -> int:
    """Return ``ticket_number`` unchanged, or raise if it is outside 1..39999."""

    if not MIN_TICKET_NUMBER <= ticket_number <= MAX_TICKET_NUMBER:
        raise TicketNumberOutOfRange(ticket_number)
    return ticket_number


def ensure_diary_number(diary_number: int) -> int:
    """Return ``diary_number`` unchanged, or raise if it is outside 1..1819."""

    if not 1 <= diary_number <= LAST_DIARY_NUMBER:
        raise DiaryNumberOutOfRange(diary_number)
    return diary_number


def diary_for_ticket(ticket_number: int) -> int:
    """Return the diary that holds ``ticket_number``."""

    ensure_ticket_number(ticket_number)
    if ticket_number <= _LAST_REGULAR_TICKET:
        return math.ceil(ticket_number / TICKETS_PER_DIARY)
    return LAST_DIARY_NUMBER


def ticket_range_for_diary(diary_number: int) -> TicketRange:
    """Return the inclusive ticket range of ``diary_number``."""

    ensure_diary_number(diary_number)
    if diary_number == LAST_DIARY_NUMBER:
        return TicketRange(start=_LAST_REGULAR_TICKET + 1, end=MAX_TICKET_NUMBER)
    return TicketRange(
        start=(diary_number - 1) * TICKETS_PER_DIARY + 1,
        end=diary_number * TICKETS_PER_DIARY,
    )


def is_ticket_in_diary(ticket_number: int, diary_number: int) -> bool:
    """Check that an operator-entered (ticket, diary) pair is consistent."""

    return ticket_number in ticket_range_for_diary(diary_number)


def format_ticket_number(ticket_number: int) -> str:
    """Zero-pad a ticket number for display, e.g. ``105 -> "00105"``."""

    ensure_ticket_number(ticket_number)
    return str(ticket_number).zfill(TICKET_NUMBER_WIDTH)


def parse_ticket_number(value: str) -> int:
    """Parse a (possibly zero-padded) ticket number string.

    Range is not checked here; callers use :func:`ensure_ticket_number`.

    Raises:
        ValidationError: if ``value`` is not a decimal number.
    """

    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(message="Please enter a valid lottery number", details={"lottery_number": value})
    return int(text)


def formatted_range_for_diary(diary_number: int) -> tuple[str, str]:
    """First and last ticket of a diary, zero-padded."""

    rng = ticket_range_for_diary(diary_number)
    return format_ticket_number(rng.start), format_ticket_number(rng.end)


def iter_diary_layouts() -> Iterator[DiaryLayout]:
    """Yield the fixed layout of every diary, 1..1819."""

    for diary_number in range(1, LAST_DIARY_NUMBER + 1):
        rng = ticket_range_for_diary(diary_number)
        yield DiaryLayout(
            diary_number=diary_number,
            ticket_start_range=rng.start,
            ticket_end_range=rng.end,
            total_tickets=len(rng),
        )
