from decimal import Decimal

from dimerr.models import Payment
from tests.conftest import OTHER_SELLER


def test_cash_order_starts_paid_without_payment_row(client, db, order_payload):
    resp = client.post("/api/orders/", json=order_payload("cash"))
    assert resp.status_code == 201
    order = resp.json()

    assert Decimal(order["total_srp"]) == Decimal("150")
    assert Decimal(order["paid_amount"]) == Decimal("150")
    assert order["status"] == "paid"
    assert order["status_label"] == "paid"
    assert Decimal(order["remaining"]) == 0
    assert order["payments"] == []
    assert db.query(Payment).count() == 0


def test_cost_is_filled_from_brand_margin(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("cash")).json()

    item = order["items"][0]
    assert Decimal(item["cost_each"]) == Decimal("105")
    assert item["product_label"] == "Far Away — Cologne • 50ml"
    assert Decimal(order["profit"]) == Decimal("45")


def test_explicit_cost_is_kept(client, catalog, order_payload):
    items = [{"product_id": catalog["cologne"]["id"], "quantity": 2, "srp_each": "150", "cost_each": "100"}]
    order = client.post("/api/orders/", json=order_payload("cash", items=items)).json()
    assert Decimal(order["total_cost"]) == Decimal("200")
    assert Decimal(order["profit"]) == Decimal("100")


def test_credit_order_payment_flow(client, catalog, order_payload):
    items = [{"product_id": catalog["cologne"]["id"], "quantity": 1, "srp_each": "500"}]
    order = client.post(
        "/api/orders/",
        json=order_payload("credit", items=items, due_date="2024-05-31"),
    ).json()
    assert order["status"] == "pending"
    assert Decimal(order["paid_amount"]) == 0

    first = client.post(f"/api/credit/{order['id']}/payments", json={"amount": 200, "channel": "Cash"})
    assert first.status_code == 200
    body = first.json()
    assert Decimal(body["order"]["paid_amount"]) == Decimal("200")
    assert body["order"]["status"] == "pending"
    assert body["order"]["status_label"] == "partial"
    assert Decimal(body["order"]["remaining"]) == Decimal("300")
    assert body["warning"] is None

    second = client.post(f"/api/credit/{order['id']}/payments", json={"amount": "300", "channel": "GCash"}).json()
    assert Decimal(second["order"]["paid_amount"]) == Decimal("500")
    assert second["order"]["status"] == "paid"
    assert Decimal(second["order"]["remaining"]) == 0

    history = client.get(f"/api/orders/{order['id']}/payments").json()
    assert [(Decimal(p["amount"]), p["channel"]) for p in history] == [
        (Decimal("200"), "Cash"),
        (Decimal("300"), "GCash"),
    ]


def test_overpayment_goes_through_with_warning(client, catalog, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()

    resp = client.post(f"/api/credit/{order['id']}/payments", json={"amount": "200"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["order"]["status"] == "paid"
    assert Decimal(body["order"]["paid_amount"]) == Decimal("200")
    assert Decimal(body["order"]["remaining"]) == 0
    assert Decimal(body["overpayment"]) == Decimal("50")
    assert body["warning"]


def test_invalid_payment_is_rejected(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()

    for amount in ["abc", 0, -5, None]:
        resp = client.post(f"/api/credit/{order['id']}/payments", json={"amount": amount})
        assert resp.status_code == 400

    assert Decimal(client.get(f"/api/orders/{order['id']}").json()["paid_amount"]) == 0


def test_cash_orders_do_not_take_payments(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("cash")).json()
    resp = client.post(f"/api/credit/{order['id']}/payments", json={"amount": 10})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only credit orders take payments."


def test_retried_payment_is_applied_once(client, db, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()
    payload = {"amount": 50, "channel": "GCash", "operation_id": "op-123"}

    first = client.post(f"/api/credit/{order['id']}/payments", json=payload).json()
    retry = client.post(f"/api/credit/{order['id']}/payments", json=payload).json()

    assert first["replayed"] is False
    assert retry["replayed"] is True
    assert retry["payment"]["id"] == first["payment"]["id"]
    assert Decimal(retry["order"]["paid_amount"]) == Decimal("50")
    assert db.query(Payment).count() == 1


def test_operation_id_cannot_be_reused_on_another_order(client, order_payload):
    a = client.post("/api/orders/", json=order_payload("credit")).json()
    b = client.post("/api/orders/", json=order_payload("credit")).json()

    client.post(f"/api/credit/{a['id']}/payments", json={"amount": 10, "operation_id": "op-1"})
    resp = client.post(f"/api/credit/{b['id']}/payments", json={"amount": 10, "operation_id": "op-1"})

    assert resp.status_code == 409


def test_operation_ids_are_scoped_per_seller(client, as_seller, db, order_payload):
    mine = client.post("/api/orders/", json=order_payload("credit")).json()
    client.post(f"/api/credit/{mine['id']}/payments", json={"amount": 10, "operation_id": "op-1"})

    other = as_seller(OTHER_SELLER)
    customer = other.post("/api/customers/", json={"name": "Tita Baby"}).json()
    brand = other.post("/api/brands/", json={"name": "Natasha"}).json()
    product = other.post("/api/products/", json={"name": "Sling Bag", "brand_id": brand["id"]}).json()
    theirs = other.post("/api/orders/", json={
        "customer_id": customer["id"],
        "brand_id": brand["id"],
        "order_date": "2024-05-01",
        "payment_type": "credit",
        "items": [{"product_id": product["id"], "quantity": 1, "srp_each": "300"}],
    }).json()

    resp = other.post(f"/api/credit/{theirs['id']}/payments", json={"amount": 25, "operation_id": "op-1"})

    assert resp.status_code == 200
    assert resp.json()["replayed"] is False
    assert Decimal(resp.json()["order"]["paid_amount"]) == Decimal("25")
    assert db.query(Payment).count() == 2


def test_mark_paid_logs_remaining_balance(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()
    client.post(f"/api/credit/{order['id']}/payments", json={"amount": 40})

    resp = client.post(f"/api/credit/{order['id']}/mark-paid", json={"channel": "Bank"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["order"]["status"] == "paid"
    assert Decimal(body["order"]["paid_amount"]) == Decimal("150")
    assert Decimal(body["payment"]["amount"]) == Decimal("110")
    assert len(body["order"]["payments"]) == 2


def test_mark_paid_without_body_or_payment_row(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()

    body = client.post(f"/api/credit/{order['id']}/mark-paid").json()
    assert body["order"]["status"] == "paid"

    other = client.post("/api/orders/", json=order_payload("credit")).json()
    body = client.post(f"/api/credit/{other['id']}/mark-paid", json={"record_payment": False}).json()
    assert body["payment"] is None
    assert body["order"]["payments"] == []
    assert body["order"]["status"] == "paid"


def test_utang_is_accepted_as_credit(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("utang")).json()
    assert order["payment_type"] == "credit"
    assert order["status"] == "pending"


def test_empty_order_is_rejected(client, catalog, order_payload):
    resp = client.post("/api/orders/", json=order_payload("cash", items=[]))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please add at least one product with quantity."

    items = [{"product_id": catalog["cologne"]["id"], "quantity": 0, "srp_each": "150"}]
    assert client.post("/api/orders/", json=order_payload("cash", items=items)).status_code == 400

    resp = client.post("/api/orders/", json=order_payload("cash", customer_id=None))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select customer, brand and order date."

    assert client.get("/api/orders/").json() == []


def test_incomplete_lines_are_dropped(client, catalog, order_payload):
    items = [
        {"product_id": catalog["cologne"]["id"], "quantity": 1, "srp_each": "150"},
        {"product_id": "", "quantity": 3, "srp_each": "10"},
    ]
    order = client.post("/api/orders/", json=order_payload("cash", items=items)).json()
    assert len(order["items"]) == 1


def test_unknown_product_is_404(client, order_payload):
    items = [{"product_id": 999, "quantity": 1, "srp_each": "10"}]
    assert client.post("/api/orders/", json=order_payload("cash", items=items)).status_code == 404


def test_edit_replaces_items_and_recomputes(client, catalog, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()
    client.post(f"/api/credit/{order['id']}/payments", json={"amount": 100})

    items = [
        {"product_id": catalog["lipstick"]["id"], "quantity": 2, "srp_each": "40"},
        {"product_id": catalog["cologne"]["id"], "quantity": 1, "srp_each": "20"},
    ]
    resp = client.put(f"/api/orders/{order['id']}", json=order_payload("credit", items=items))
    assert resp.status_code == 200
    edited = resp.json()

    assert [i["product_id"] for i in edited["items"]] == [catalog["lipstick"]["id"], catalog["cologne"]["id"]]
    assert Decimal(edited["total_srp"]) == Decimal("100")
    assert Decimal(edited["paid_amount"]) == Decimal("100")
    assert edited["status"] == "paid"
    assert len(edited["payments"]) == 1


def test_switching_to_cash_settles_order(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit", due_date="2024-06-01")).json()

    edited = client.put(f"/api/orders/{order['id']}", json=order_payload("cash")).json()

    assert edited["payment_type"] == "cash"
    assert edited["due_date"] is None
    assert Decimal(edited["paid_amount"]) == Decimal("150")
    assert edited["status"] == "paid"


def test_delete_order_removes_payments(client, db, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()
    client.post(f"/api/credit/{order['id']}/payments", json={"amount": 10})

    assert client.delete(f"/api/orders/{order['id']}").status_code == 204
    assert client.get(f"/api/orders/{order['id']}").status_code == 404
    assert db.query(Payment).count() == 0


def test_preview_prices_without_saving(client, catalog, order_payload):
    items = [{"product_id": catalog["cologne"]["id"], "quantity": 2, "srp_each": "100"}]
    resp = client.post("/api/orders/preview", json=order_payload("cash", items=items))

    assert resp.status_code == 200
    preview = resp.json()
    assert Decimal(preview["items"][0]["cost_each"]) == Decimal("70")
    assert Decimal(preview["total_srp"]) == Decimal("200")
    assert Decimal(preview["profit"]) == Decimal("60")
    assert client.get("/api/orders/").json() == []


def test_list_filters(client, order_payload):
    client.post("/api/orders/", json=order_payload("cash"))
    client.post("/api/orders/", json=order_payload("credit"))

    assert len(client.get("/api/orders/").json()) == 2
    pending = client.get("/api/orders/", params={"status": "pending"}).json()
    assert [o["payment_type"] for o in pending] == ["credit"]
    assert len(client.get("/api/orders/", params={"payment_type": "cash"}).json()) == 1


def test_credit_and_payment_lists(client, order_payload):
    cash = client.post("/api/orders/", json=order_payload("cash")).json()
    later = client.post("/api/orders/", json=order_payload("credit", due_date="2024-06-30")).json()
    sooner = client.post("/api/orders/", json=order_payload("credit", due_date="2024-06-01")).json()

    credit = client.get("/api/credit/").json()
    assert [o["id"] for o in credit] == [sooner["id"], later["id"]]
    assert credit[0]["due_status"]["label"].startswith("Overdue by")

    client.post(f"/api/credit/{later['id']}/payments", json={"amount": 5})
    paid = client.get("/api/payments/").json()
    assert {o["id"] for o in paid} == {cash["id"], later["id"]}


def test_undated_credit_is_listed_last(client, order_payload):
    undated = client.post("/api/orders/", json=order_payload("credit")).json()
    dated = client.post("/api/orders/", json=order_payload("credit", due_date="2024-06-01")).json()

    credit = client.get("/api/credit/").json()

    assert [o["id"] for o in credit] == [dated["id"], undated["id"]]
    assert credit[1]["due_status"] is None


def test_other_sellers_cannot_see_order(client, as_seller, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit")).json()

    other = as_seller(OTHER_SELLER)
    assert other.get(f"/api/orders/{order['id']}").status_code == 404
    assert other.post(f"/api/credit/{order['id']}/payments", json={"amount": 10}).status_code == 404
    assert other.get("/api/orders/").json() == []


def test_invoice_html_and_pdf(client, order_payload):
    order = client.post("/api/orders/", json=order_payload("credit", due_date="2024-05-31")).json()

    html = client.get(f"/api/orders/{order['id']}/invoice")
    assert html.status_code == 200
    assert f"INV-{order['id']}" in html.text
    assert "Credit (Pending)" in html.text
    assert "Aling Nena" in html.text

    pdf = client.get(f"/api/orders/{order['id']}/invoice.pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")
