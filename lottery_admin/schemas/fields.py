"""Custom marshmallow fields."""

from __future__ import annotations

from marshmallow import ValidationError, fields

from lottery_admin.errors import AppError
from lottery_admin.numbering import ensure_ticket_number, format_ticket_number, parse_ticket_number


class TicketNumber(fields.Field):
    """Ticket number accepted as ``105``, ``"105"`` or ``"00105"``; dumped as an int."""

    default_error_messages = {"invalid": "Please enter a valid lottery number"}

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, bool):
            raise self.make_error("invalid")
        try:
            number = value if isinstance(value, int) else parse_ticket_number(str(value))
            return ensure_ticket_number(number)
        except AppError as exc:
            raise ValidationError(exc.message) from exc

    def _serialize(self, value, attr, obj, **kwargs):  # type: ignore[no-untyped-def]
        return None if value is None else int(value)


class FormattedTicketNumber(fields.Field):
    """Read-only five-digit rendering of a ticket number.

    Always dump-only, so it may share ``attribute`` with the loadable field.
    """

    def __init__(self, **kwargs) -> None:  # type: ignore[no-untyped-def]
        kwargs["dump_only"] = True
        super().__init__(**kwargs)

    def _serialize(self, value, attr, obj, **kwargs):  # type: ignore[no-untyped-def]
        return None if value is None else format_ticket_number(int(value))


class TrimmedString(fields.String):
    """String stripped of surrounding whitespace; blank means missing."""

    default_error_messages = {"blank": "Field cannot be blank."}

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        text = super()._deserialize(value, attr, data, **kwargs).strip()
        if not text:
            if self.allow_none:
                return None
            raise self.make_error("blank")
        return text
