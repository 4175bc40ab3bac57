from __future__ import annotations

import pytest

from lottery_admin import create_app
from lottery_admin.config import TestingConfig
from lottery_admin.db import create_app_engine, create_schema, create_session_factory
from lottery_admin.services.diary_service import DiaryService
from lottery_admin.services.ticket_sale_service import TicketSaleService
from lottery_admin.services.winner_service import WinnerService

TICKET_PRICE = 500


@pytest.fixture
def engine():
    engine = create_app_engine("sqlite+pysqlite:///:memory:")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = create_session_factory(engine)()
    DiaryService().seed_diaries(session, TICKET_PRICE)
    WinnerService().seed_categories(session)
    session.commit()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def allotted_diary(session):
    """Diary 5 (tickets 89..110) allotted to one issuer."""

    service = DiaryService()
    issuer = service.create_issuer(session, issuer_name="Ramesh Agency", contact_number="9876543210")
    allotment = service.allot_diary(session, diary_number=5, issuer_id=issuer.id)
    session.commit()
    return allotment


@pytest.fixture
def sell(session, allotted_diary):
    def _sell(lottery_number: int, name: str = "John Doe", contact: str = "9000000001", address: str | None = None):
        sale = TicketSaleService().create_sale(
            session,
            {
                "lottery_number": lottery_number,
                "purchaser_name": name,
                "purchaser_contact": contact,
                "purchaser_address": address,
            },
            TICKET_PRICE,
        )
        session.commit()
        return sale

    return _sell


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
