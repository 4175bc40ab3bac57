"""Marshmallow schemas for diaries, issuers and allotments."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from lottery_admin.models.diary_allotment import AllotmentStatus
from lottery_admin.numbering import LAST_DIARY_NUMBER
from lottery_admin.schemas.fields import FormattedTicketNumber, TrimmedString


class DiarySchema(Schema):
    """Serialize Diary."""

    id = fields.Int()
    diary_number = fields.Int()
    ticket_start_range = fields.Int()
    ticket_end_range = fields.Int()
    ticket_start_display = FormattedTicketNumber(attribute="ticket_start_range")
    ticket_end_display = FormattedTicketNumber(attribute="ticket_end_range")
    total_tickets = fields.Int()
    expected_amount = fields.Decimal(as_string=True)


class IssuerSchema(Schema):
    """Serialize Issuer."""

    id = fields.Int()
    issuer_name = fields.Str()
    contact_number = fields.Str()
    address = fields.Str(allow_none=True)


class IssuerCreateSchema(Schema):
    issuer_name = TrimmedString(required=True, validate=validate.Length(max=255))
    contact_number = TrimmedString(required=True, validate=validate.Length(max=20))
    address = TrimmedString(required=False, allow_none=True, load_default=None)


class IssuerUpdateSchema(Schema):
    issuer_name = TrimmedString(validate=validate.Length(max=255))
    contact_number = TrimmedString(validate=validate.Length(max=20))
    address = TrimmedString(allow_none=True)


class AllotmentSchema(Schema):
    """Serialize DiaryAllotment with its diary and issuer."""

    id = fields.Int()
    diary_id = fields.Int()
    issuer_id = fields.Int()
    diary = fields.Nested(DiarySchema)
    issuer = fields.Nested(IssuerSchema)
    allotment_date = fields.Date()
    status = fields.Str()
    amount_collected = fields.Decimal(as_string=True)
    notes = fields.Str(allow_none=True)


class AllotmentCreateSchema(Schema):
    diary_number = fields.Int(required=True, validate=validate.Range(min=1, max=LAST_DIARY_NUMBER))
    issuer_id = fields.Int(required=True)
    allotment_date = fields.Date(required=False, allow_none=True, load_default=None)
    notes = TrimmedString(required=False, allow_none=True, load_default=None)


class AllotmentStatusSchema(Schema):
    status = fields.Str(required=True, validate=validate.OneOf([s.value for s in AllotmentStatus]))
