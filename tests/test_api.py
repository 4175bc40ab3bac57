import pytest


@pytest.fixture
def sold_ticket(client):
    """Issuer with diary 5 allotted and ticket 105 sold."""

    issuer = client.post("/api/issuers", json={"issuer_name": "Ramesh Agency", "contact_number": "9876543210"})
    assert issuer.status_code == 201
    allotment = client.post("/api/allotments", json={"diary_number": 5, "issuer_id": issuer.get_json()["data"]["id"]})
    assert allotment.status_code == 201
    sale = client.post(
        "/api/tickets",
        json={"lottery_number": "00105", "purchaser_name": "  John Doe ", "purchaser_contact": "9000000001"},
    )
    assert sale.status_code == 201
    return sale.get_json()["data"]


def _register(client, lottery_number=105, category="Laptop"):
    return client.post("/api/winners", json={"lottery_number": lottery_number, "prize_category": category})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {"status": "ok"}, "error": None}


def test_numbering_lookup(client):
    body = client.get("/api/numbering/tickets/00105").get_json()["data"]
    assert body["diary_number"] == 5
    assert (body["ticket_start_display"], body["ticket_end_display"]) == ("00089", "00110")

    last = client.get("/api/numbering/diaries/1819").get_json()["data"]
    assert (last["ticket_start_range"], last["ticket_end_range"], last["total_tickets"]) == (39997, 39999, 3)


def test_numbering_out_of_range(client):
    resp = client.get("/api/numbering/tickets/40000")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"

    resp = client.get("/api/numbering/diaries/1820")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"
    resp = client.get("/api/numbering/tickets/abc")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"


def test_diary_contains(client):
    assert client.get("/api/numbering/diaries/5/contains/105").get_json()["data"]["valid"] is True
    assert client.get("/api/numbering/diaries/6/contains/105").get_json()["data"]["valid"] is False


def test_seeded_reference_data(client):
    diaries = client.get("/api/diaries?limit=5").get_json()
    assert diaries["meta"]["total"] == 1819
    categories = client.get("/api/prize-categories").get_json()["data"]
    assert categories[0]["category_name"] == "THAR CAR"
    assert categories[0]["remaining_quantity"] == 1


def test_sale_in_unallotted_diary(client):
    resp = client.post(
        "/api/tickets", json={"lottery_number": 1, "purchaser_name": "A", "purchaser_contact": "1"}
    )
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "diary_not_allotted"


def test_sale_is_trimmed_and_autofilled(client, sold_ticket):
    assert sold_ticket["purchaser_name"] == "John Doe"
    assert sold_ticket["diary_number"] == 5
    assert sold_ticket["issuer_name"] == "Ramesh Agency"
    assert float(sold_ticket["amount_paid"]) == 500

    autofill = client.get("/api/tickets/autofill/00106").get_json()["data"]
    assert autofill["allotted"] is True
    assert autofill["issuer"]["issuer_name"] == "Ramesh Agency"

    found = client.get("/api/tickets/105").get_json()["data"]
    assert found["lottery_number_display"] == "00105"


def test_register_winner_flow(client, sold_ticket):
    resp = _register(client)
    assert resp.status_code == 201
    winner = resp.get_json()["data"]
    assert winner["winner_name"] == "John Doe"
    assert winner["diary_number"] == 5
    assert winner["prize_quantity"] == 3

    stats = {s["category_name"]: s for s in client.get("/api/winners/stats").get_json()["data"]}
    assert stats["Laptop"]["winners_count"] == 1
    assert stats["Laptop"]["remaining_quantity"] == 2

    assert client.get("/api/winners/numbers").get_json()["data"] == [105]
    assert client.get("/api/winners/latest").get_json()["data"]["id"] == winner["id"]


def test_duplicate_registration(client, sold_ticket):
    assert _register(client).status_code == 201
    resp = _register(client, category="Fridge")
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "duplicate_winner"
    assert body["error"]["details"]["refresh"] is True

    stats = {s["category_name"]: s for s in client.get("/api/winners/stats").get_json()["data"]}
    assert stats["Fridge"]["winners_count"] == 0


def test_register_unsold_ticket(client, sold_ticket):
    resp = _register(client, lottery_number=106)
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"


def test_lottery_number_is_immutable(client, sold_ticket):
    winner_id = _register(client).get_json()["data"]["id"]

    resp = client.patch(f"/api/winners/{winner_id}", json={"lottery_number": 106})
    assert resp.status_code == 422
    error = resp.get_json()["error"]
    assert error["code"] == "immutable_field_violation"
    assert error["details"] == {"field": "lottery_number", "original": 105, "attempted": 106}

    assert client.get(f"/api/winners/{winner_id}").get_json()["data"]["lottery_number"] == 105


def test_blank_name_is_rejected(client, sold_ticket):
    winner_id = _register(client).get_json()["data"]["id"]

    resp = client.patch(f"/api/winners/{winner_id}", json={"winner_name": "   "})
    assert resp.status_code == 422
    error = resp.get_json()["error"]
    assert error["code"] == "missing_required_field"
    assert error["details"]["field"] == "winner_name"

    assert client.get(f"/api/winners/{winner_id}").get_json()["data"]["winner_name"] == "John Doe"


def test_edit_trims_and_moves_category(client, sold_ticket):
    winner_id = _register(client).get_json()["data"]["id"]

    resp = client.patch(
        f"/api/winners/{winner_id}",
        json={"winner_address": "  12 Main Road  ", "prize_category": "Fridge", "lottery_number": 105},
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["winner_address"] == "12 Main Road"
    assert data["prize_category"] == "Fridge"

    stats = {s["category_name"]: s for s in client.get("/api/winners/stats").get_json()["data"]}
    assert stats["Laptop"]["winners_count"] == 0
    assert stats["Fridge"]["winners_count"] == 1


def test_delete_winner_frees_ticket(client, sold_ticket):
    winner_id = _register(client).get_json()["data"]["id"]
    assert client.delete(f"/api/winners/{winner_id}").status_code == 200
    assert client.get("/api/winners/numbers").get_json()["data"] == []
    assert _register(client).status_code == 201


def test_category_ceiling(client, sold_ticket):
    client.post("/api/tickets", json={"lottery_number": 106, "purchaser_name": "B", "purchaser_contact": "2"})
    assert _register(client, category="THAR CAR").status_code == 201
    resp = _register(client, lottery_number=106, category="THAR CAR")
    assert resp.status_code == 409
    error = resp.get_json()["error"]
    assert error["code"] == "quantity_exceeded"
    assert error["details"]["refresh"] is True


def test_public_board(client, sold_ticket):
    _register(client)
    board = client.get("/api/public/winners").get_json()["data"]
    assert board["total_winners"] == 1
    assert board["latest"]["lottery_number"] == "00105"
    laptop = next(c for c in board["categories"] if c["category_name"] == "Laptop")
    assert [w["winner_name"] for w in laptop["winners"]] == ["John Doe"]


def test_dashboard(client, sold_ticket):
    data = client.get("/api/dashboard").get_json()["data"]
    assert data["stats"]["total_tickets_sold"] == 1
    assert data["stats"]["diaries_allotted"] == 1
    assert data["stats"]["diaries_remaining"] == 1818
    assert data["issuer_performance"][0]["tickets_sold"] == 1


def test_missing_tickets(client, sold_ticket):
    data = client.get("/api/tickets/missing").get_json()["data"]
    assert data["total_missing"] == 39998


def test_search(client, sold_ticket):
    data = client.get("/api/search?issuer_name=ramesh").get_json()["data"]
    assert [t["lottery_number"] for t in data["tickets"]] == [105]
    assert len(data["allotments"]) == 1


def test_duplicate_sale(client, sold_ticket):
    resp = client.post("/api/tickets", json={"lottery_number": 105, "purchaser_name": "B", "purchaser_contact": "2"})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "conflict"


def test_sale_with_wrong_diary(client, sold_ticket):
    resp = client.post(
        "/api/tickets",
        json={"lottery_number": 106, "diary_number": 6, "purchaser_name": "B", "purchaser_contact": "2"},
    )
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "validation_error"
    assert error["details"] == {"lottery_number": 106, "diary_number": 6}


def test_payload_validation(client):
    resp = client.post("/api/tickets", json={"lottery_number": 105})
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "validation_error"
    assert "purchaser_name" in error["details"]


def test_unknown_route(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"
