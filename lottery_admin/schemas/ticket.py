"""Marshmallow schemas for ticket sales, auto-fill and search."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from lottery_admin.models.diary_allotment import AllotmentStatus
from lottery_admin.numbering import LAST_DIARY_NUMBER
from lottery_admin.schemas.diary import AllotmentSchema, DiarySchema, IssuerSchema
from lottery_admin.schemas.fields import FormattedTicketNumber, TicketNumber, TrimmedString

_diary_number = validate.Range(min=1, max=LAST_DIARY_NUMBER)


class TicketSaleSchema(Schema):
    """Serialize TicketSale."""

    id = fields.Int()
    lottery_number = fields.Int()
    lottery_number_display = FormattedTicketNumber(attribute="lottery_number")
    purchaser_name = fields.Str()
    purchaser_contact = fields.Str()
    purchaser_address = fields.Str(allow_none=True)
    issuer_id = fields.Int(allow_none=True)
    issuer_name = fields.Function(lambda s: s.issuer.issuer_name if s.issuer else None)
    diary_id = fields.Int()
    diary_number = fields.Function(lambda s: s.diary.diary_number if s.diary else None)
    purchase_date = fields.Date()
    amount_paid = fields.Decimal(as_string=True)
    created_at = fields.DateTime()


class TicketSaleCreateSchema(Schema):
    """Validate create TicketSale payload."""

    lottery_number = TicketNumber(required=True)
    purchaser_name = TrimmedString(required=True, validate=validate.Length(max=255))
    purchaser_contact = TrimmedString(required=True, validate=validate.Length(max=20))
    purchaser_address = TrimmedString(required=False, allow_none=True, load_default=None)
    issuer_id = fields.Int(required=False, allow_none=True, load_default=None)
    diary_number = fields.Int(required=False, allow_none=True, load_default=None, validate=_diary_number)
    purchase_date = fields.Date(required=False, allow_none=True, load_default=None)
    amount_paid = fields.Decimal(required=False, allow_none=True, load_default=None, validate=validate.Range(min=0))


class TicketSaleUpdateSchema(Schema):
    """Validate partial update of a TicketSale."""

    lottery_number = TicketNumber()
    purchaser_name = TrimmedString(validate=validate.Length(max=255))
    purchaser_contact = TrimmedString(validate=validate.Length(max=20))
    purchaser_address = TrimmedString(allow_none=True)
    issuer_id = fields.Int(allow_none=True)
    diary_number = fields.Int(allow_none=True, validate=_diary_number)
    purchase_date = fields.Date()
    amount_paid = fields.Decimal(allow_none=True, validate=validate.Range(min=0))


class AutofillSchema(Schema):
    lottery_number = fields.Int()
    lottery_number_display = FormattedTicketNumber(attribute="lottery_number")
    diary_number = fields.Int()
    ticket_start_range = fields.Int()
    ticket_end_range = fields.Int()
    ticket_start_display = FormattedTicketNumber(attribute="ticket_start_range")
    ticket_end_display = FormattedTicketNumber(attribute="ticket_end_range")
    diary = fields.Nested(DiarySchema, allow_none=True)
    issuer = fields.Nested(IssuerSchema, allow_none=True)
    allotted = fields.Bool()
    amount_paid = fields.Int()


class MissingDiaryGroupSchema(Schema):
    diary_number = fields.Int()
    missing_count = fields.Int()
    missing_numbers = fields.List(fields.Int())


class MissingTicketsSchema(Schema):
    total_missing = fields.Int()
    grouped_by_diary = fields.List(fields.Nested(MissingDiaryGroupSchema))


class SearchQuerySchema(Schema):
    """Advanced search filters (query string)."""

    lottery_number = TicketNumber(load_default=None)
    purchaser_name = TrimmedString(allow_none=True, load_default=None)
    purchaser_contact = TrimmedString(allow_none=True, load_default=None)
    issuer_name = TrimmedString(allow_none=True, load_default=None)
    diary_number = fields.Int(load_default=None, validate=_diary_number)
    first_ticket_number = TicketNumber(load_default=None)
    date_from = fields.Date(load_default=None)
    date_to = fields.Date(load_default=None)
    status = fields.Str(
        load_default=None,
        validate=validate.OneOf([s.value for s in AllotmentStatus]),
    )


class SearchResultSchema(Schema):
    tickets = fields.List(fields.Nested(TicketSaleSchema))
    allotments = fields.List(fields.Nested(AllotmentSchema))
    message = fields.Str(allow_none=True)
