import pytest
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from lottery_admin.db import create_app_engine, create_schema, create_session_factory
from lottery_admin.errors import (
    DuplicateWinnerViolation,
    ImmutableFieldViolation,
    MissingRequiredField,
    NotFoundError,
    QuantityExceeded,
    UnguardedWrite,
    ValidationError,
)
from lottery_admin.models import LotteryWinner, PrizeCategory
from lottery_admin.repositories.prize_category_repository import PrizeCategoryRepository
from lottery_admin.repositories.winner_repository import WinnerRepository
from lottery_admin.services.diary_service import DiaryService
from lottery_admin.services.ticket_sale_service import TicketSaleService
from lottery_admin.services.winner_service import WinnerService

service = WinnerService()


def _awarded(session, name):
    return session.scalars(select(PrizeCategory.awarded_count).where(PrizeCategory.category_name == name)).one()


def test_register_copies_purchaser_and_trims(session, sell):
    sell(105, name="  John Doe  ", contact=" 9000000001 ", address="  Main Road  ")
    winner = service.register(session, lottery_number=105, prize_category=" Laptop ")
    session.commit()

    stored = session.get(LotteryWinner, winner.id)
    assert stored.winner_name == "John Doe"
    assert stored.winner_contact == "9000000001"
    assert stored.winner_address == "Main Road"
    assert stored.prize_category == "Laptop"
    assert stored.prize_quantity == 3
    assert stored.diary_number == 5
    assert _awarded(session, "Laptop") == 1


def test_register_unknown_ticket(session, allotted_diary):
    with pytest.raises(NotFoundError):
        service.register(session, lottery_number=106, prize_category="Laptop")


def test_register_unknown_category(session, sell):
    sell(105)
    with pytest.raises(ValidationError):
        service.register(session, lottery_number=105, prize_category="Yacht")


def test_register_rejects_blank_purchaser(session, sell):
    sell(105, contact="   ")
    with pytest.raises(MissingRequiredField) as info:
        service.register(session, lottery_number=105, prize_category="Laptop")
    assert info.value.field == "winner_contact"


def test_register_same_ticket_twice(session, sell):
    sell(105)
    service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    with pytest.raises(DuplicateWinnerViolation) as info:
        service.register(session, lottery_number=105, prize_category="Fridge")
    assert info.value.details["refresh"] is True
    session.rollback()
    assert _awarded(session, "Fridge") == 0


def test_store_rejects_duplicate_winner_without_precheck(session, sell):
    sell(105)
    service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    with pytest.raises(DuplicateWinnerViolation):
        WinnerRepository().create(
            session,
            lottery_number=105,
            prize_category="Fridge",
            prize_quantity=5,
            winner_name="Someone Else",
            winner_contact="9000000002",
        )
    session.rollback()
    assert len(service.list_winners(session)) == 1


def test_concurrent_registrations_for_same_ticket(tmp_path):
    engine = create_app_engine(f"sqlite:///{tmp_path / 'race.db'}")
    create_schema(engine)
    factory = create_session_factory(engine)

    with factory() as setup:
        DiaryService().seed_diaries(setup, 500)
        service.seed_categories(setup)
        diaries = DiaryService()
        issuer = diaries.create_issuer(setup, issuer_name="Agent", contact_number="1")
        diaries.allot_diary(setup, diary_number=5, issuer_id=issuer.id)
        TicketSaleService().create_sale(
            setup, {"lottery_number": 105, "purchaser_name": "A", "purchaser_contact": "1"}, 500
        )
        setup.commit()

    first, second = factory(), factory()
    outcomes = []
    for s, category in ((first, "Laptop"), (second, "Fridge")):
        try:
            service.register(s, lottery_number=105, prize_category=category)
            s.commit()
            outcomes.append("ok")
        except DuplicateWinnerViolation:
            s.rollback()
            outcomes.append("duplicate")
        finally:
            s.close()

    assert outcomes == ["ok", "duplicate"]
    with factory() as check:
        assert [w.prize_category for w in service.list_winners(check)] == ["Laptop"]
        assert _awarded(check, "Fridge") == 0
    engine.dispose()


def test_category_ceiling(session, allotted_diary, sell):
    sell(100)
    sell(101)
    service.register(session, lottery_number=100, prize_category="THAR CAR")
    session.commit()

    with pytest.raises(QuantityExceeded):
        service.register(session, lottery_number=101, prize_category="THAR CAR")
    session.rollback()
    assert _awarded(session, "THAR CAR") == 1


def test_claim_slot_is_conditional(session):
    repo = PrizeCategoryRepository()
    assert repo.claim_slot(session, "Electric Bike")
    assert repo.claim_slot(session, "Electric Bike")
    assert repo.claim_slot(session, "Electric Bike")
    assert not repo.claim_slot(session, "Electric Bike")
    assert _awarded(session, "Electric Bike") == 3


def test_counter_check_constraint(session):
    category = PrizeCategoryRepository().get_by_name(session, "THAR CAR")
    category.awarded_count = 2
    with pytest.raises(IntegrityError):
        session.flush()
    session.rollback()


def test_delete_frees_prize(session, sell):
    sell(100)
    sell(101)
    winner = service.register(session, lottery_number=100, prize_category="THAR CAR")
    session.commit()

    service.delete(session, winner.id)
    session.commit()
    assert _awarded(session, "THAR CAR") == 0

    service.register(session, lottery_number=101, prize_category="THAR CAR")
    session.commit()
    assert [w.lottery_number for w in service.list_winners(session)] == [101]


def test_update_moves_prize_between_categories(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    updated = service.update(session, winner.id, {"prize_category": "Fridge", "notes": "  swapped  "})
    session.commit()
    assert updated.prize_category == "Fridge"
    assert updated.prize_quantity == 5
    assert updated.notes == "swapped"
    assert _awarded(session, "Laptop") == 0
    assert _awarded(session, "Fridge") == 1


def test_update_cannot_change_lottery_number(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    with pytest.raises(ImmutableFieldViolation) as info:
        service.update(session, winner.id, {"lottery_number": 106})
    assert (info.value.original, info.value.attempted) == (105, 106)
    session.rollback()

    assert session.get(LotteryWinner, winner.id).lottery_number == 105


def test_update_cannot_clear_winner_name(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    with pytest.raises(MissingRequiredField) as info:
        service.update(session, winner.id, {"winner_name": "   "})
    assert info.value.details["original"] == "John Doe"
    session.rollback()
    assert session.get(LotteryWinner, winner.id).winner_name == "John Doe"


def test_guard_runs_on_direct_orm_writes(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    winner.winner_contact = None
    with pytest.raises(MissingRequiredField):
        session.flush()
    session.rollback()

    session.add(
        LotteryWinner(
            lottery_number=106,
            prize_category="Fridge",
            prize_quantity=5,
            winner_name="",
            winner_contact="1",
        )
    )
    with pytest.raises(MissingRequiredField):
        session.flush()
    session.rollback()


def test_lottery_number_change_is_caught_after_expire(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    session.expire(winner)
    winner.lottery_number = 106
    with pytest.raises(ImmutableFieldViolation) as info:
        session.flush()
    assert (info.value.original, info.value.attempted) == (105, 106)
    session.rollback()

    assert session.get(LotteryWinner, winner.id).lottery_number == 105


def test_stored_value_is_read_back_for_unloaded_fields(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    session.expire(winner, ["winner_name"])
    winner.winner_name = "   "
    with pytest.raises(MissingRequiredField) as info:
        session.flush()
    assert info.value.details == {"field": "winner_name", "original": "John Doe"}
    session.rollback()


def test_bulk_statements_cannot_bypass_the_guard(session, sell):
    sell(105)
    winner = service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    stmt = update(LotteryWinner).where(LotteryWinner.id == winner.id).values(lottery_number=106, winner_name="  X  ")
    with pytest.raises(UnguardedWrite):
        session.execute(stmt)
    session.rollback()

    with pytest.raises(UnguardedWrite):
        session.execute(
            insert(LotteryWinner),
            [{"lottery_number": 107, "prize_category": "Fridge", "prize_quantity": 5, "winner_name": " Y ", "winner_contact": "1"}],
        )
    session.rollback()

    stored = session.get(LotteryWinner, winner.id)
    assert (stored.lottery_number, stored.winner_name) == (105, "John Doe")
    assert service.won_numbers(session) == {105}


def test_other_tables_still_accept_bulk_updates(session):
    assert PrizeCategoryRepository().claim_slot(session, "Laptop")
    assert _awarded(session, "Laptop") == 1


def test_check_constraints_back_up_the_guard(session):
    stmt = insert(LotteryWinner.__table__).values(
        lottery_number=200,
        prize_category="Fridge",
        prize_quantity=5,
        winner_name="   ",
        winner_contact="1",
    )
    with pytest.raises(IntegrityError):
        session.connection().execute(stmt)
    session.rollback()


def test_category_stats(session, sell):
    sell(100)
    sell(101)
    service.register(session, lottery_number=100, prize_category="Helmet")
    service.register(session, lottery_number=101, prize_category="Helmet")
    session.commit()

    stats = {s.category_name: s for s in service.category_stats(session)}
    assert stats["Helmet"].winners_count == 2
    assert stats["Helmet"].remaining_quantity == 52
    assert stats["THAR CAR"].remaining_quantity == 1
    assert len(stats) == 28


def test_list_winners_search(session, sell):
    sell(100, name="Asha Devi")
    sell(105, name="John Doe")
    service.register(session, lottery_number=100, prize_category="Helmet")
    service.register(session, lottery_number=105, prize_category="Laptop")
    session.commit()

    assert [w.lottery_number for w in service.list_winners(session, search="asha")] == [100]
    assert [w.lottery_number for w in service.list_winners(session, search="00105")] == [105]
    assert [w.lottery_number for w in service.list_winners(session, prize_category="Laptop")] == [105]
    assert service.latest(session).lottery_number == 105
