"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class TicketNumberOutOfRange(ValidationError):
    """Ticket number outside 1..39999."""

    def __init__(self, ticket_number: int) -> None:
        super().__init__(
            message="Lottery number must be between 00001 and 39999",
            details={"lottery_number": ticket_number},
        )
        self.ticket_number = ticket_number


class DiaryNumberOutOfRange(ValidationError):
    """Diary number outside 1..1819."""

    def __init__(self, diary_number: int) -> None:
        super().__init__(
            message="Diary number must be between 1 and 1819",
            details={"diary_number": diary_number},
        )
        self.diary_number = diary_number


class TicketNotInDiary(ValidationError):
    """A (ticket, diary) pair that does not belong together."""

    def __init__(self, ticket_number: int, diary_number: int) -> None:
        super().__init__(
            message=f"Lottery number {ticket_number:05d} is not valid for diary {diary_number}",
            details={"lottery_number": ticket_number, "diary_number": diary_number},
        )


class MissingRequiredField(AppError):
    """A mandatory winner field is null, empty or whitespace-only."""

    def __init__(self, field: str, original: Any | None = None) -> None:
        details: dict[str, Any] = {"field": field}
        if original is not None:
            details["original"] = original
        super().__init__(
            code="missing_required_field",
            message=f"{field} is required and cannot be empty",
            status_code=422,
            details=details,
        )
        self.field = field


class ImmutableFieldViolation(AppError):
    """An update tried to change a field that is fixed after creation."""

    def __init__(self, field: str, original: Any, attempted: Any) -> None:
        super().__init__(
            code="immutable_field_violation",
            message=f"{field} cannot be changed. Original value: {original}, Attempted value: {attempted}",
            status_code=422,
            details={"field": field, "original": original, "attempted": attempted},
        )
        self.field = field
        self.original = original
        self.attempted = attempted


class DuplicateWinnerViolation(AppError):
    """The ticket already has a winner row."""

    def __init__(self, lottery_number: int) -> None:
        super().__init__(
            code="duplicate_winner",
            message=f"Lottery number {lottery_number:05d} has already won a prize!",
            status_code=409,
            details={"lottery_number": lottery_number, "refresh": True},
        )
        self.lottery_number = lottery_number


class QuantityExceeded(AppError):
    """No prizes left in the category."""

    def __init__(self, prize_category: str) -> None:
        super().__init__(
            code="quantity_exceeded",
            message=f"No {prize_category} prizes remaining!",
            status_code=409,
            details={"prize_category": prize_category, "refresh": True},
        )
        self.prize_category = prize_category


class DiaryNotAllotted(AppError):
    """Ticket sale references a diary with no active allotment."""

    def __init__(self, diary_number: int) -> None:
        super().__init__(
            code="diary_not_allotted",
            message=f"Diary {diary_number} is not allotted to any issuer",
            status_code=409,
            details={"diary_number": diary_number},
        )


class UnguardedWrite(AppError):
    """A bulk INSERT/UPDATE statement aimed at a guarded table."""

    def __init__(self, table: str) -> None:
        super().__init__(
            code="unguarded_write",
            message=f"Rows in {table} can only be written through the ORM unit of work",
            status_code=422,
            details={"table": table},
        )
        self.table = table
