"""Ticket sale, auto-fill and search routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from lottery_admin.db import get_session
from lottery_admin.numbering import ensure_ticket_number, parse_ticket_number
from lottery_admin.schemas.ticket import (
    AutofillSchema,
    MissingTicketsSchema,
    SearchQuerySchema,
    SearchResultSchema,
    TicketSaleCreateSchema,
    TicketSaleSchema,
    TicketSaleUpdateSchema,
)
from lottery_admin.services.ticket_sale_service import SearchFilters, TicketSaleService
from lottery_admin.utils.responses import ok

tickets_bp = Blueprint("tickets", __name__)

_sale_schema = TicketSaleSchema()
_sales_schema = TicketSaleSchema(many=True)
_create_schema = TicketSaleCreateSchema()
_update_schema = TicketSaleUpdateSchema()
_autofill_schema = AutofillSchema()
_missing_schema = MissingTicketsSchema()
_search_query_schema = SearchQuerySchema()
_search_result_schema = SearchResultSchema()
_service = TicketSaleService()


def _ticket_price() -> int:
    return int(current_app.config["TICKET_PRICE"])


@tickets_bp.get("/tickets")
def list_sales():
    offset = request.args.get("offset", default=0, type=int)
    limit = request.args.get("limit", default=100, type=int)
    session = get_session()
    sales = _service.list_sales(session, offset=offset, limit=limit)
    return ok(_sales_schema.dump(sales), meta={"total": _service.count_sales(session)})


@tickets_bp.get("/tickets/<string:ticket>")
def quick_search(ticket: str):
    """Look a sale up by its (possibly zero-padded) lottery number."""

    number = ensure_ticket_number(parse_ticket_number(ticket))
    sale = _service.get_by_lottery_number(get_session(), number)
    return ok(_sale_schema.dump(sale))


@tickets_bp.get("/tickets/autofill/<string:ticket>")
def autofill(ticket: str):
    number = ensure_ticket_number(parse_ticket_number(ticket))
    result = _service.autofill(get_session(), number, _ticket_price())
    return ok(_autofill_schema.dump(result))


@tickets_bp.get("/tickets/missing")
def missing_tickets():
    return ok(_missing_schema.dump(_service.missing_tickets(get_session())))


@tickets_bp.post("/tickets")
def create_sale():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)
    sale = _service.create_sale(get_session(), data, _ticket_price())
    return ok(_sale_schema.dump(sale), status_code=201)


@tickets_bp.patch("/tickets/<int:sale_id>")
def update_sale(sale_id: int):
    payload = request.get_json(silent=True) or {}
    data = _update_schema.load(payload)
    sale = _service.update_sale(get_session(), sale_id, data)
    return ok(_sale_schema.dump(sale))


@tickets_bp.delete("/tickets/<int:sale_id>")
def delete_sale(sale_id: int):
    _service.delete_sale(get_session(), sale_id)
    return ok({"deleted": sale_id})


@tickets_bp.get("/search")
def search():
    args = {k: v for k, v in request.args.items() if v != ""}
    filters = SearchFilters(**_search_query_schema.load(args))
    result = _service.search(get_session(), filters)
    return ok(_search_result_schema.dump(result))
