"""Winner routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_admin.db import get_session
from lottery_admin.schemas.winner import (
    CategoryStatsSchema,
    PrizeCategorySchema,
    PublicWinnerSchema,
    WinnerRegisterSchema,
    WinnerSchema,
    WinnerUpdateSchema,
)
from lottery_admin.services.winner_service import WinnerService
from lottery_admin.utils.responses import ok

winners_bp = Blueprint("winners", __name__)

_winner_schema = WinnerSchema()
_winners_schema = WinnerSchema(many=True)
_public_schema = PublicWinnerSchema()
_public_many_schema = PublicWinnerSchema(many=True)
_register_schema = WinnerRegisterSchema()
_update_schema = WinnerUpdateSchema()
_categories_schema = PrizeCategorySchema(many=True)
_stats_schema = CategoryStatsSchema(many=True)
_service = WinnerService()


@winners_bp.get("/winners")
def list_winners():
    session = get_session()
    winners = _service.list_winners(
        session,
        search=request.args.get("search") or None,
        prize_category=request.args.get("category") or None,
    )
    return ok(_winners_schema.dump(winners), meta={"total": len(winners)})


@winners_bp.get("/winners/latest")
def latest_winner():
    winner = _service.latest(get_session())
    return ok(_winner_schema.dump(winner) if winner is not None else None)


@winners_bp.get("/winners/stats")
def category_stats():
    return ok(_stats_schema.dump(_service.category_stats(get_session())))


@winners_bp.get("/winners/numbers")
def won_numbers():
    """Ticket numbers that have already won, for greying out the register buttons."""

    return ok(sorted(_service.won_numbers(get_session())))


@winners_bp.get("/prize-categories")
def list_categories():
    return ok(_categories_schema.dump(_service.list_categories(get_session())))


@winners_bp.get("/winners/<int:winner_id>")
def get_winner(winner_id: int):
    return ok(_winner_schema.dump(_service.get_winner(get_session(), winner_id)))


@winners_bp.post("/winners")
def register_winner():
    payload = request.get_json(silent=True) or {}
    data = _register_schema.load(payload)
    winner = _service.register(get_session(), **data)
    return ok(_winner_schema.dump(winner), status_code=201)


@winners_bp.patch("/winners/<int:winner_id>")
def update_winner(winner_id: int):
    payload = request.get_json(silent=True) or {}
    data = _update_schema.load(payload)
    winner = _service.update(get_session(), winner_id, data)
    return ok(_winner_schema.dump(winner))


@winners_bp.delete("/winners/<int:winner_id>")
def delete_winner(winner_id: int):
    _service.delete(get_session(), winner_id)
    return ok({"deleted": winner_id})


@winners_bp.get("/public/winners")
def public_board():
    """Public display: latest winner plus every category with its winners."""

    session = get_session()
    winners = _service.list_winners(session)
    by_category: dict[str, list] = {}
    for winner in winners:
        by_category.setdefault(winner.prize_category, []).append(winner)

    latest = winners[0] if winners else None
    categories = [
        {
            "category_name": stat.category_name,
            "total_quantity": stat.total_quantity,
            "winners_count": stat.winners_count,
            "remaining_quantity": stat.remaining_quantity,
            "winners": _public_many_schema.dump(by_category.get(stat.category_name, [])),
        }
        for stat in _service.category_stats(session)
    ]
    return ok(
        {
            "latest": _public_schema.dump(latest) if latest is not None else None,
            "total_winners": len(winners),
            "categories": categories,
        }
    )
