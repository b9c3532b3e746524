"""
API tests for payment, master data and accounting endpoints.
"""

from decimal import Decimal


def create_lta(client, cities):
    nyc, par = cities
    response = client.post("/lta", json={
        "origin_city_id": nyc.id,
        "destination_city_id": par.id,
        "payment_mode": "CASH",
        "total_weight": "10.00",
    })
    return response.json()["lta"]


def test_record_payment_returns_201(client, cities, books):
    lta = create_lta(client, cities)

    response = client.post(
        "/lta-payments", json={"lta_id": lta["id"], "amount": "20.00"}
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["remaining_amount"]) == Decimal("0")
    assert data["reference"].startswith("PAY-")
    assert data["journal_entry_id"] is not None


def test_overpayment_returns_400(client, cities, books):
    lta = create_lta(client, cities)

    response = client.post(
        "/lta-payments", json={"lta_id": lta["id"], "amount": "25.00"}
    )
    assert response.status_code == 400
    assert "exceeds" in response.json()["detail"]


def test_missing_amount_returns_400(client, cities, books):
    lta = create_lta(client, cities)
    response = client.post("/lta-payments", json={"lta_id": lta["id"]})
    assert response.status_code == 400


def test_unknown_lta_returns_404(client):
    response = client.post("/lta-payments", json={"lta_id": 999, "amount": "1"})
    assert response.status_code == 404


def test_payment_summary(client, cities, books):
    lta = create_lta(client, cities)
    client.post("/lta-payments", json={"lta_id": lta["id"], "amount": "5.00"})

    data = client.get(f"/lta-payments/lta/{lta['id']}/summary").json()
    assert Decimal(data["total_paid"]) == Decimal("5.00")
    assert Decimal(data["remaining_amount"]) == Decimal("15.00")
    assert len(data["payments"]) == 1


def test_unpaid_lists_confirmed_ltas(client, cities, books):
    lta = create_lta(client, cities)
    assert client.get("/lta-payments/unpaid").json() == []

    client.patch(f"/lta/{lta['id']}/status", json={"status": "CONFIRMED"})
    unpaid = client.get("/lta-payments/unpaid").json()
    assert [row["id"] for row in unpaid] == [lta["id"]]


def test_create_city_and_duplicate(client):
    payload = {"name": "Kinshasa", "iata_code": "FIH", "country": "DR Congo"}
    assert client.post("/cities", json=payload).status_code == 201
    assert client.post("/cities", json=payload).status_code == 400


def test_account_balance_after_lta(client, cities, books):
    _, chart = books
    create_lta(client, cities)

    response = client.get(f"/accounting/accounts/{chart['411'].id}/balance")
    assert response.status_code == 200
    assert Decimal(response.json()["balance"]) == Decimal("20.00")


def test_entries_by_source(client, cities, books):
    lta = create_lta(client, cities)

    entries = client.get(f"/accounting/journal-entries/source/LTA/{lta['id']}").json()
    assert len(entries) == 1
    assert len(entries[0]["lines"]) == 2
