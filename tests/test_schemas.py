from decimal import Decimal
from types import SimpleNamespace

import pytest
from marshmallow import ValidationError

from lottery_admin.schemas.diary import AllotmentSchema, DiarySchema
from lottery_admin.schemas.ticket import AutofillSchema, SearchResultSchema, TicketSaleCreateSchema, TicketSaleSchema
from lottery_admin.schemas.winner import PublicWinnerSchema, WinnerSchema


@pytest.mark.parametrize(
    "schema_cls",
    [DiarySchema, AllotmentSchema, TicketSaleSchema, AutofillSchema, SearchResultSchema, WinnerSchema, PublicWinnerSchema],
)
def test_schemas_with_padded_numbers_build(schema_cls):
    schema = schema_cls()
    for name, field in schema.fields.items():
        if name.endswith("_display"):
            assert field.dump_only


def test_diary_dump_pads_range():
    diary = SimpleNamespace(
        id=1,
        diary_number=1819,
        ticket_start_range=39997,
        ticket_end_range=39999,
        total_tickets=3,
        expected_amount=Decimal("1500"),
    )
    data = DiarySchema().dump(diary)
    assert data["ticket_start_range"] == 39997
    assert (data["ticket_start_display"], data["ticket_end_display"]) == ("39997", "39999")


def test_sale_payload_accepts_padded_number():
    data = TicketSaleCreateSchema().load(
        {"lottery_number": "00105", "purchaser_name": "  John Doe ", "purchaser_contact": "9000000001"}
    )
    assert data["lottery_number"] == 105
    assert data["purchaser_name"] == "John Doe"


def test_sale_payload_rejects_out_of_range_number():
    with pytest.raises(ValidationError) as info:
        TicketSaleCreateSchema().load({"lottery_number": 40000, "purchaser_name": "A", "purchaser_contact": "1"})
    assert "lottery_number" in info.value.messages
