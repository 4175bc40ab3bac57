"""Write-path validation for lottery winner rows.

The two validators run on every insert and update of a winner before the row
reaches the database. They reject records that would lose the winner's name,
contact or prize, forbid re-pointing a winner at another ticket, and trim
the free-text fields.

:func:`install_winner_guard` hooks both validators into SQLAlchemy's flush so
that no ORM write path can skip them, and refuses bulk INSERT/UPDATE
statements on the table, which would bypass the flush. A rejection raised
during flush aborts the flush; the session must then be rolled back, which
discards the whole unit of work.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import event, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.orm import ORMExecuteState, Session, attributes

from lottery_admin.errors import ImmutableFieldViolation, MissingRequiredField, UnguardedWrite

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("winner_name", "winner_contact", "prize_category")
OPTIONAL_TEXT_FIELDS = ("winner_address", "notes")
IMMUTABLE_FIELDS = ("lottery_number",)


def _is_blank(value: Any) -> bool:
    return value is None or len(str(value).strip()) == 0


def _check_required(new: Mapping[str, Any], old: Mapping[str, Any] | None = None) -> None:
    for field in REQUIRED_FIELDS:
        if _is_blank(new.get(field)):
            original = old.get(field) if old is not None else None
            raise MissingRequiredField(field, original=original)


def _normalized(new: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(new)
    for field in REQUIRED_FIELDS:
        out[field] = str(out[field]).strip()
    for field in OPTIONAL_TEXT_FIELDS:
        if out.get(field) is not None:
            out[field] = str(out[field]).strip()
    return out


def validate_on_insert(new: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and normalize a winner record about to be inserted.

    Returns:
        A copy of ``new`` with text fields trimmed.

    Raises:
        MissingRequiredField: a required field is null or blank.
    """

    _check_required(new)
    return _normalized(new)


def validate_on_update(old: Mapping[str, Any], new: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and normalize the proposed values of an updated winner.

    ``old`` holds the stored values, ``new`` the full proposed row.

    Raises:
        MissingRequiredField: a required field is null or blank.
        ImmutableFieldViolation: ``lottery_number`` differs from the stored value.
    """

    _check_required(new, old)
    for field in IMMUTABLE_FIELDS:
        if new.get(field) != old.get(field):
            raise ImmutableFieldViolation(field, original=old.get(field), attempted=new.get(field))
    return _normalized(new)


_GUARDED_FIELDS = IMMUTABLE_FIELDS + REQUIRED_FIELDS + OPTIONAL_TEXT_FIELDS

# Tables whose rows may only be written by a flush.
_GUARDED_TABLES: set[str] = set()


def _current_values(target: object) -> dict[str, Any]:
    return {field: getattr(target, field) for field in _GUARDED_FIELDS}


def _stored_values(target: object, connection: Connection) -> dict[str, Any]:
    values: dict[str, Any] = {}
    unknown: list[str] = []
    for field in _GUARDED_FIELDS:
        history = attributes.get_history(target, field)
        if history.deleted:
            values[field] = history.deleted[0]
        elif history.unchanged:
            values[field] = history.unchanged[0]
        else:
            # Assigned while unloaded: the stored value is only in the row.
            unknown.append(field)

    if unknown:
        table = inspect(target).mapper.local_table
        stmt = select(*(table.c[field] for field in unknown)).where(table.c.id == target.id)
        values.update(connection.execute(stmt).mappings().one())
    return values


def _apply(target: object, values: Mapping[str, Any]) -> None:
    for field in REQUIRED_FIELDS + OPTIONAL_TEXT_FIELDS:
        if getattr(target, field) != values[field]:
            setattr(target, field, values[field])


def _before_insert(mapper, connection, target) -> None:  # type: ignore[no-untyped-def]
    try:
        values = validate_on_insert(_current_values(target))
    except MissingRequiredField as exc:
        logger.warning("Rejected winner insert for %s: %s", target.lottery_number, exc.message)
        raise
    _apply(target, values)


def _before_update(mapper, connection, target) -> None:  # type: ignore[no-untyped-def]
    try:
        values = validate_on_update(_stored_values(target, connection), _current_values(target))
    except (MissingRequiredField, ImmutableFieldViolation) as exc:
        logger.warning("Rejected winner update for id=%s: %s", target.id, exc.message)
        raise
    _apply(target, values)


def _reject_bulk_writes(orm_execute_state: ORMExecuteState) -> None:
    """Refuse INSERT/UPDATE statements on guarded tables passed to ``Session.execute``."""

    if not (orm_execute_state.is_insert or orm_execute_state.is_update):
        return
    table = getattr(orm_execute_state.statement, "table", None)
    name = getattr(table, "name", None)
    if name in _GUARDED_TABLES:
        logger.warning("Rejected bulk %s on %s", "insert" if orm_execute_state.is_insert else "update", name)
        raise UnguardedWrite(name)


def install_winner_guard(model: type) -> None:
    """Run the validators on every ORM insert/update of ``model``.

    Bulk INSERT/UPDATE statements on the model's table issued through a
    :class:`~sqlalchemy.orm.Session` skip mapper events, so they are refused.
    """

    _GUARDED_TABLES.add(model.__tablename__)  # type: ignore[attr-defined]
    if event.contains(model, "before_insert", _before_insert):
        return
    event.listen(model, "before_insert", _before_insert, propagate=True)
    event.listen(model, "before_update", _before_update, propagate=True)
    event.listen(Session, "do_orm_execute", _reject_bulk_writes)
