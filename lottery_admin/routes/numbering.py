"""Numbering routes: pure conversions, no database access."""

from __future__ import annotations

from flask import Blueprint

from lottery_admin.numbering import (
    diary_for_ticket,
    ensure_ticket_number,
    format_ticket_number,
    formatted_range_for_diary,
    is_ticket_in_diary,
    parse_ticket_number,
    ticket_range_for_diary,
)
from lottery_admin.utils.responses import ok

numbering_bp = Blueprint("numbering", __name__)


@numbering_bp.get("/numbering/tickets/<string:ticket>")
def ticket_lookup(ticket: str):
    """Diary and range for a ticket typed as ``105`` or ``00105``."""

    number = ensure_ticket_number(parse_ticket_number(ticket))
    diary_number = diary_for_ticket(number)
    rng = ticket_range_for_diary(diary_number)
    start, end = formatted_range_for_diary(diary_number)
    return ok(
        {
            "lottery_number": number,
            "lottery_number_display": format_ticket_number(number),
            "diary_number": diary_number,
            "ticket_start_range": rng.start,
            "ticket_end_range": rng.end,
            "ticket_start_display": start,
            "ticket_end_display": end,
        }
    )


@numbering_bp.get("/numbering/diaries/<int:diary_number>")
def diary_range(diary_number: int):
    rng = ticket_range_for_diary(diary_number)
    start, end = formatted_range_for_diary(diary_number)
    return ok(
        {
            "diary_number": diary_number,
            "ticket_start_range": rng.start,
            "ticket_end_range": rng.end,
            "ticket_start_display": start,
            "ticket_end_display": end,
            "total_tickets": len(rng),
        }
    )


@numbering_bp.get("/numbering/diaries/<int:diary_number>/contains/<string:ticket>")
def diary_contains(diary_number: int, ticket: str):
    number = parse_ticket_number(ticket)
    return ok({"diary_number": diary_number, "lottery_number": number, "valid": is_ticket_in_diary(number, diary_number)})
