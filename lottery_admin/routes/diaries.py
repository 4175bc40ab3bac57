"""Diary, issuer and allotment routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_admin.db import get_session
from lottery_admin.schemas.diary import (
    AllotmentCreateSchema,
    AllotmentSchema,
    AllotmentStatusSchema,
    DiarySchema,
    IssuerCreateSchema,
    IssuerSchema,
    IssuerUpdateSchema,
)
from lottery_admin.services.diary_service import DiaryService
from lottery_admin.utils.responses import ok

diaries_bp = Blueprint("diaries", __name__)

_diary_schema = DiarySchema()
_diaries_schema = DiarySchema(many=True)
_issuer_schema = IssuerSchema()
_issuers_schema = IssuerSchema(many=True)
_issuer_create_schema = IssuerCreateSchema()
_issuer_update_schema = IssuerUpdateSchema()
_allotment_schema = AllotmentSchema()
_allotments_schema = AllotmentSchema(many=True)
_allotment_create_schema = AllotmentCreateSchema()
_status_schema = AllotmentStatusSchema()
_service = DiaryService()


@diaries_bp.get("/diaries")
def list_diaries():
    offset = request.args.get("offset", default=0, type=int)
    limit = request.args.get("limit", default=100, type=int)
    session = get_session()
    diaries = _service.list_diaries(session, offset=offset, limit=limit)
    return ok(_diaries_schema.dump(diaries), meta={"total": _service.count_diaries(session)})


@diaries_bp.get("/diaries/<int:diary_number>")
def get_diary(diary_number: int):
    diary = _service.get_diary(get_session(), diary_number)
    return ok(_diary_schema.dump(diary))


@diaries_bp.get("/issuers")
def list_issuers():
    return ok(_issuers_schema.dump(_service.list_issuers(get_session())))


@diaries_bp.post("/issuers")
def create_issuer():
    payload = request.get_json(silent=True) or {}
    data = _issuer_create_schema.load(payload)
    issuer = _service.create_issuer(get_session(), **data)
    return ok(_issuer_schema.dump(issuer), status_code=201)


@diaries_bp.patch("/issuers/<int:issuer_id>")
def update_issuer(issuer_id: int):
    payload = request.get_json(silent=True) or {}
    data = _issuer_update_schema.load(payload)
    issuer = _service.update_issuer(get_session(), issuer_id, data)
    return ok(_issuer_schema.dump(issuer))


@diaries_bp.delete("/issuers/<int:issuer_id>")
def delete_issuer(issuer_id: int):
    _service.delete_issuer(get_session(), issuer_id)
    return ok({"deleted": issuer_id})


@diaries_bp.get("/allotments")
def list_allotments():
    status = request.args.get("status") or None
    if status is not None:
        _status_schema.load({"status": status})
    return ok(_allotments_schema.dump(_service.list_allotments(get_session(), status=status)))


@diaries_bp.post("/allotments")
def create_allotment():
    payload = request.get_json(silent=True) or {}
    data = _allotment_create_schema.load(payload)
    allotment = _service.allot_diary(get_session(), **data)
    return ok(_allotment_schema.dump(allotment), status_code=201)


@diaries_bp.patch("/allotments/<int:allotment_id>/status")
def update_allotment_status(allotment_id: int):
    payload = request.get_json(silent=True) or {}
    data = _status_schema.load(payload)
    allotment = _service.update_status(get_session(), allotment_id, data["status"])
    return ok(_allotment_schema.dump(allotment))


@diaries_bp.delete("/allotments/<int:allotment_id>")
def delete_allotment(allotment_id: int):
    _service.delete_allotment(get_session(), allotment_id)
    return ok({"deleted": allotment_id})
