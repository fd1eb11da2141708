from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from dimerr.main import app
from dimerr.security import create_access_token, get_current_seller
from dimerr.utils.ledger import seller_today


def test_dashboard_summary(client, catalog, order_payload):
    client.post("/api/orders/", json=order_payload("cash"))
    credit = client.post("/api/orders/", json=order_payload("credit")).json()
    client.post(f"/api/credit/{credit['id']}/payments", json={"amount": 50})

    summary = client.get("/api/dashboard/").json()

    assert summary["order_count"] == 2
    assert Decimal(summary["total_srp"]) == Decimal("300")
    assert Decimal(summary["total_profit"]) == Decimal("90")
    assert summary["paid_orders"] == 1
    assert summary["pending_credit_orders"] == 1
    assert Decimal(summary["pending_credit_amount"]) == Decimal("100")
    assert [b["name"] for b in summary["brands"]] == ["Avon"]


def test_upcoming_dues_and_reminder(client, order_payload):
    today = seller_today()
    overdue = client.post(
        "/api/orders/", json=order_payload("credit", due_date=str(today - timedelta(days=3))),
    ).json()
    soon = client.post(
        "/api/orders/", json=order_payload("credit", due_date=str(today + timedelta(days=2))),
    ).json()
    due_today = client.post("/api/orders/", json=order_payload("credit", due_date=str(today))).json()

    upcoming = client.get("/api/notifications/").json()
    assert [i["order_id"] for i in upcoming["items"]] == [due_today["id"], soon["id"]]
    assert upcoming["items"][0]["due_status"]["label"] == "Due today"
    assert upcoming["items"][1]["due_status"]["label"] == "Due in 2 day(s)"

    everything = client.get("/api/notifications/", params={"include_overdue": True}).json()
    assert everything["items"][0]["order_id"] == overdue["id"]
    assert everything["total"] == 3

    reminder = client.get("/api/notifications/next").json()
    assert reminder["order_id"] == due_today["id"]
    assert reminder["title"] == "Credit due: Aling Nena"
    assert reminder["body"] == f"Balance ₱150.00 • Due on {today.isoformat()}"


def test_no_reminder_when_nothing_is_due(client, order_payload):
    client.post("/api/orders/", json=order_payload("cash"))
    resp = client.get("/api/notifications/next")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No upcoming credit due dates"


def test_bearer_token_is_required():
    app.dependency_overrides.pop(get_current_seller, None)
    raw = TestClient(app)

    assert raw.get("/api/orders/").status_code == 401
    assert raw.get("/api/orders/", headers={"Authorization": "Bearer not-a-token"}).status_code == 401

    expired = create_access_token("seller-1", expires_delta=timedelta(minutes=-5))
    assert raw.get("/api/orders/", headers={"Authorization": f"Bearer {expired}"}).status_code == 401
    assert raw.get("/health").json()["status"] == "ok"


def test_valid_token_identifies_seller(db):
    from dimerr.database import get_db

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides.pop(get_current_seller, None)
    try:
        token = create_access_token("seller-9", email="nine@example.com")
        resp = TestClient(app).post(
            "/api/customers/",
            json={"name": "Tita Baby"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 201

        missing_sub = create_access_token("", extra={"email": "x@example.com"})
        resp = TestClient(app).get("/api/customers/", headers={"Authorization": f"Bearer {missing_sub}"})
        assert resp.status_code == 401
    finally:
        app.dependency_overrides.clear()
