from decimal import Decimal

import pytest

from lottery_admin.errors import ConflictError, DiaryNumberOutOfRange, NotFoundError, ValidationError
from lottery_admin.services.dashboard_service import DashboardService
from lottery_admin.services.diary_service import DiaryService

service = DiaryService()


def test_seeded_diaries(session):
    assert service.count_diaries(session) == 1819
    first = service.get_diary(session, 1)
    last = service.get_diary(session, 1819)
    assert (first.ticket_start_range, first.ticket_end_range, first.expected_amount) == (1, 22, Decimal("11000"))
    assert (last.ticket_start_range, last.ticket_end_range, last.total_tickets) == (39997, 39999, 3)
    assert last.expected_amount == Decimal("1500")


def test_seeding_is_idempotent(session):
    assert service.seed_diaries(session, 500) == 0


def test_get_diary_out_of_range(session):
    with pytest.raises(DiaryNumberOutOfRange):
        service.get_diary(session, 1820)


def test_allotment_lifecycle(session, allotted_diary):
    paid = service.update_status(session, allotted_diary.id, "paid")
    assert paid.amount_collected == Decimal("11000")

    returned = service.update_status(session, allotted_diary.id, "returned")
    assert returned.amount_collected == Decimal("0")

    with pytest.raises(ValidationError):
        service.update_status(session, allotted_diary.id, "lost")


def test_diary_cannot_be_allotted_twice(session, allotted_diary):
    other = service.create_issuer(session, issuer_name="Other", contact_number="1")
    with pytest.raises(ConflictError):
        service.allot_diary(session, diary_number=5, issuer_id=other.id)


def test_allot_to_unknown_issuer(session):
    with pytest.raises(NotFoundError):
        service.allot_diary(session, diary_number=7, issuer_id=999)


def test_dashboard(session, sell):
    sell(100)
    sell(101)
    issuer = service.create_issuer(session, issuer_name="Second", contact_number="2")
    second = service.allot_diary(session, diary_number=6, issuer_id=issuer.id)
    service.update_status(session, second.id, "paid")
    session.commit()

    dashboard = DashboardService()
    stats = dashboard.stats(session)
    assert stats.total_tickets_sold == 2
    assert stats.total_revenue == Decimal("1000")
    assert stats.diaries_allotted == 1
    assert stats.diaries_paid == 1
    assert stats.diaries_remaining == 1817
    assert stats.total_amount_collected == Decimal("11000")
    assert stats.expected_amount_from_allotted == Decimal("22000")

    rows = dashboard.issuer_performance(session)
    assert rows[0]["issuer_name"] == "Second"
    assert rows[0]["collection_percentage"] == Decimal("100.00")
    ramesh = next(r for r in rows if r["issuer_name"] == "Ramesh Agency")
    assert ramesh["tickets_sold"] == 2
    assert ramesh["collection_percentage"] == Decimal("0.00")
