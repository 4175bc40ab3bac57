"""Marshmallow schemas for winners and prize categories."""

from __future__ import annotations

from marshmallow import Schema, fields

from lottery_admin.schemas.fields import FormattedTicketNumber, TicketNumber, TrimmedString


class WinnerSchema(Schema):
    """Serialize LotteryWinner."""

    id = fields.Int()
    lottery_number = fields.Int()
    lottery_number_display = FormattedTicketNumber(attribute="lottery_number")
    ticket_sale_id = fields.Int(allow_none=True)
    prize_category = fields.Str()
    prize_quantity = fields.Int()
    winner_name = fields.Str()
    winner_contact = fields.Str()
    winner_address = fields.Str(allow_none=True)
    diary_number = fields.Int(allow_none=True)
    registered_at = fields.DateTime()
    notes = fields.Str(allow_none=True)
    updated_at = fields.DateTime()


class PublicWinnerSchema(Schema):
    """Fields shown on the public winners board."""

    id = fields.Int()
    lottery_number = FormattedTicketNumber()
    prize_category = fields.Str()
    winner_name = fields.Str()
    winner_contact = fields.Str()
    winner_address = fields.Str(allow_none=True)
    registered_at = fields.DateTime()


class WinnerRegisterSchema(Schema):
    lottery_number = TicketNumber(required=True)
    prize_category = TrimmedString(required=True)
    notes = TrimmedString(required=False, allow_none=True, load_default=None)


class WinnerUpdateSchema(Schema):
    """Edit payload.

    Values are passed through untrimmed; blank required fields and a changed
    ``lottery_number`` are rejected by the write-path guard.
    """

    prize_category = fields.Str(allow_none=True)
    winner_name = fields.Str(allow_none=True)
    winner_contact = fields.Str(allow_none=True)
    winner_address = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    lottery_number = TicketNumber()


class PrizeCategorySchema(Schema):
    id = fields.Int()
    category_name = fields.Str()
    total_quantity = fields.Int()
    awarded_count = fields.Int()
    remaining_quantity = fields.Int()


class CategoryStatsSchema(Schema):
    category_name = fields.Str()
    total_quantity = fields.Int()
    winners_count = fields.Int()
    remaining_quantity = fields.Int()
