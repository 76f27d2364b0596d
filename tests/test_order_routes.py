import pytest

from app.version import API_PREFIX
from models.order import Order
from models.product import Product
from conftest import add_to_cart, auth, login_stub, make_product, reload


@pytest.fixture()
def placed(client, app, customer, vendor):
    token, _ = customer
    product = make_product(vendor[1], stock=5)
    add_to_cart(client, token, product.id, quantity=2)
    resp = client.post(f"{API_PREFIX}/checkout", json={}, headers=auth(token))
    assert resp.status_code == 201
    return resp.get_json()["orders"][0], product


def set_status(client, token, order_id, status):
    return client.put(f"{API_PREFIX}/orders/{order_id}/status", json={"status": status}, headers=auth(token))


def test_order_visible_to_parties_only(client, placed, customer, vendor, admin):
    order, _ = placed
    for token, _ in (customer, vendor, admin):
        resp = client.get(f"{API_PREFIX}/orders/{order['id']}", headers=auth(token))
        assert resp.status_code == 200
        assert resp.get_json()["order"]["id"] == order["id"]

    stranger, _ = login_stub(client, "stranger@example.com")
    assert client.get(f"{API_PREFIX}/orders/{order['id']}", headers=auth(stranger)).status_code == 403


def test_unknown_order(client, customer):
    token, _ = customer
    assert client.get(f"{API_PREFIX}/orders/nope", headers=auth(token)).status_code == 404


def test_listings(client, placed, customer, vendor, admin):
    order, _ = placed
    mine = client.get(f"{API_PREFIX}/orders/mine", headers=auth(customer[0])).get_json()["orders"]
    assert [o["id"] for o in mine] == [order["id"]]

    shop = client.get(f"{API_PREFIX}/orders/vendor", headers=auth(vendor[0])).get_json()["orders"]
    assert [o["id"] for o in shop] == [order["id"]]

    everything = client.get(f"{API_PREFIX}/orders", headers=auth(admin[0])).get_json()["orders"]
    assert len(everything) == 1
    assert client.get(f"{API_PREFIX}/orders", headers=auth(customer[0])).status_code == 403


def test_return_flow_restocks(client, placed, vendor, customer):
    order, product = placed
    assert reload(Product, product.id).available_quantity == 3

    resp = set_status(client, customer[0], order["id"], "Pending Return")
    assert resp.status_code == 200
    assert resp.get_json()["order"]["status"] == "Pending Return"

    resp = set_status(client, vendor[0], order["id"], "Returned")
    assert resp.status_code == 200
    assert reload(Product, product.id).available_quantity == 5


def test_illegal_transition_is_409(client, placed, vendor):
    order, product = placed
    assert set_status(client, vendor[0], order["id"], "Cancelled").status_code == 200
    resp = set_status(client, vendor[0], order["id"], "Active")
    assert resp.status_code == 409
    assert "Cancelled" in resp.get_json()["message"]
    assert reload(Order, order["id"]).status == "Cancelled"
    assert reload(Product, product.id).available_quantity == 5


def test_unknown_status_value(client, placed, vendor):
    order, _ = placed
    assert set_status(client, vendor[0], order["id"], "Shipped").status_code == 400


def test_stranger_cannot_change_status(client, placed):
    order, _ = placed
    other_vendor, _ = login_stub(client, "v9@example.com", "vendor")
    assert set_status(client, other_vendor, order["id"], "Returned").status_code == 403


def test_feedback_overwrites(client, placed, customer):
    order, _ = placed
    url = f"{API_PREFIX}/orders/{order['id']}/feedback"
    client.put(url, json={"rating": 2, "review": "meh", "tags": ["fit"]}, headers=auth(customer[0]))
    resp = client.put(url, json={"rating": 5, "review": "lovely"}, headers=auth(customer[0]))
    assert resp.status_code == 200
    feedback = resp.get_json()["order"]["feedback"]
    assert feedback["rating"] == 5
    assert feedback["review"] == "lovely"
    assert feedback["tags"] == []


def test_feedback_rating_out_of_range(client, placed, customer):
    order, _ = placed
    resp = client.put(
        f"{API_PREFIX}/orders/{order['id']}/feedback", json={"rating": 9}, headers=auth(customer[0])
    )
    assert resp.status_code == 422


def test_issue_by_another_customer_rejected(client, placed):
    order, _ = placed
    other, _ = login_stub(client, "c2@example.com")
    resp = client.post(
        f"{API_PREFIX}/orders/{order['id']}/issues",
        json={"type": "Damaged", "description": "stain"},
        headers=auth(other),
    )
    assert resp.status_code == 403
    assert reload(Order, order["id"]).issues == []


def test_issue_lifecycle(client, placed, customer, admin, vendor):
    order, _ = placed
    resp = client.post(
        f"{API_PREFIX}/orders/{order['id']}/issues",
        json={"type": "Wrong Size", "description": "too tight", "item_index": 0},
        headers=auth(customer[0]),
    )
    assert resp.status_code == 201
    issue = resp.get_json()["issue"]
    assert issue["status"] == "Open"

    url = f"{API_PREFIX}/orders/{order['id']}/issues/{issue['issue_id']}"
    body = {"status": "Resolved", "admin_response": "Exchange arranged"}
    assert client.put(url, json=body, headers=auth(vendor[0])).status_code == 403

    resp = client.put(url, json=body, headers=auth(admin[0]))
    assert resp.status_code == 200
    resolved = resp.get_json()["order"]["issues"][0]
    assert resolved["status"] == "Resolved"
    assert resolved["admin_response"] == "Exchange arranged"


def test_effective_status_reports_overdue(client, placed, customer):
    order, _ = placed
    # rental ended 2024-06-04, long past
    resp = client.get(f"{API_PREFIX}/orders/{order['id']}", headers=auth(customer[0]))
    body = resp.get_json()["order"]
    assert body["status"] == "Active"
    assert body["effective_status"] == "Overdue"
