"""Dashboard routes."""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint

from lottery_admin.db import get_session
from lottery_admin.services.dashboard_service import DashboardService
from lottery_admin.utils.responses import ok

dashboard_bp = Blueprint("dashboard", __name__)
_service = DashboardService()


def _jsonable(row: dict) -> dict:
    return {k: (str(v) if hasattr(v, "quantize") else v) for k, v in row.items()}


@dashboard_bp.get("/dashboard")
def dashboard():
    session = get_session()
    stats = _jsonable(asdict(_service.stats(session)))
    performance = [_jsonable(row) for row in _service.issuer_performance(session)]
    return ok({"stats": stats, "issuer_performance": performance})
