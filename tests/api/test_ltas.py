"""
API tests for LTA endpoints.
"""

from decimal import Decimal


def lta_payload(cities, **overrides):
    nyc, par = cities
    payload = {
        "origin_city_id": nyc.id,
        "destination_city_id": par.id,
        "payment_mode": "CASH",
        "total_weight": "5.00",
        "shipper_name": "Globex",
    }
    payload.update(overrides)
    return payload


def test_create_lta_returns_201(client, cities, books, make_tariff):
    nyc, par = cities
    make_tariff(nyc, par, "3.00")

    response = client.post("/lta", json=lta_payload(cities))

    assert response.status_code == 201
    data = response.json()
    assert data["lta"]["status"] == "DRAFT"
    assert Decimal(data["lta"]["calculated_cost"]) == Decimal("15.00")
    assert data["journal_entry_id"] is not None
    assert data["posting_warning"] is None


def test_create_lta_reports_posting_warning(client, cities):
    response = client.post("/lta", json=lta_payload(cities))

    assert response.status_code == 201
    data = response.json()
    assert data["journal_entry_id"] is None
    assert "No open fiscal year" in data["posting_warning"]


def test_to_invoice_without_client_returns_400(client, cities):
    response = client.post(
        "/lta", json=lta_payload(cities, payment_mode="TO_INVOICE")
    )
    assert response.status_code == 400
    assert "Client is required" in response.json()["detail"]


def test_non_positive_weight_returns_422(client, cities):
    response = client.post("/lta", json=lta_payload(cities, total_weight="0"))
    assert response.status_code == 422


def test_status_update_and_history(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]

    response = client.patch(
        f"/lta/{lta['id']}/status",
        json={"status": "CONFIRMED", "changed_by": "agent-1"},
    )
    assert response.status_code == 200
    assert lta["tracking_number"] in response.json()["qr_code"]

    history = client.get(f"/lta/tracking/{lta['tracking_number']}/history").json()
    assert [h["new_status"] for h in history] == ["DRAFT", "CONFIRMED"]
    assert history[1]["changed_by"] == "agent-1"


def test_backward_status_returns_400(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]
    client.patch(f"/lta/{lta['id']}/status", json={"status": "DELIVERED"})

    response = client.patch(f"/lta/{lta['id']}/status", json={"status": "DRAFT"})
    assert response.status_code == 400


def test_status_update_unknown_lta_returns_404(client):
    response = client.patch("/lta/999/status", json={"status": "CONFIRMED"})
    assert response.status_code == 404


def test_get_lta(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]

    assert client.get(f"/lta/{lta['id']}").json()["lta_number"] == lta["lta_number"]
    assert client.get("/lta/999").status_code == 404


def test_calculate_cost(client, cities):
    nyc, par = cities
    response = client.get(
        "/lta/calculate-cost",
        params={
            "origin_city_id": nyc.id,
            "destination_city_id": par.id,
            "weight": "10",
        },
    )
    assert response.status_code == 200
    assert Decimal(response.json()["calculated_cost"]) == Decimal("20.00")


def test_unknown_tracking_number_history_is_empty(client):
    response = client.get("/lta/tracking/TRK-NOPE/history")
    assert response.status_code == 200
    assert response.json() == []


def test_update_lta_keeps_cost(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]

    response = client.put(
        f"/lta/{lta['id']}",
        json={"total_weight": "40.00", "consignee_name": "Initech"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["consignee_name"] == "Initech"
    assert Decimal(data["total_weight"]) == Decimal("40.00")
    assert Decimal(data["calculated_cost"]) == Decimal(lta["calculated_cost"])


def test_update_lta_with_status_returns_422(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]
    response = client.put(f"/lta/{lta['id']}", json={"status": "DELIVERED"})
    assert response.status_code == 422


def test_update_lta_duplicate_number_returns_400(client, cities, books):
    first = client.post("/lta", json=lta_payload(cities)).json()["lta"]
    second = client.post("/lta", json=lta_payload(cities)).json()["lta"]

    response = client.put(
        f"/lta/{second['id']}", json={"lta_number": first["lta_number"]}
    )
    assert response.status_code == 400


def test_update_unknown_lta_returns_404(client):
    response = client.put("/lta/999", json={"shipper_name": "Globex"})
    assert response.status_code == 404


def test_delete_lta(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]

    response = client.delete(f"/lta/{lta['id']}")

    assert response.status_code == 204
    assert client.get(f"/lta/{lta['id']}").status_code == 404
    assert client.delete(f"/lta/{lta['id']}").status_code == 404


def test_delete_paid_lta_returns_400(client, cities, books):
    lta = client.post("/lta", json=lta_payload(cities)).json()["lta"]
    client.post("/lta-payments", json={"lta_id": lta["id"], "amount": "5.00"})

    response = client.delete(f"/lta/{lta['id']}")
    assert response.status_code == 400
    assert "recorded payments" in response.json()["detail"]
