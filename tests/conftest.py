import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from models.product import Product
from app.version import API_PREFIX

@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    os.environ.setdefault('OTEL_ENABLED', '0')
    from app import create_app
    from app.config import TestingConfig
    app = create_app(TestingConfig)
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app

@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()

@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


def login_stub(client, email, role="customer", **extra):
    resp = client.post("/__auth/login_stub", json={"email": email, "role": role, **extra})
    data = resp.get_json()["data"]
    return data["access"], data["user_id"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def customer(client):
    return login_stub(client, "customer@example.com", "customer")


@pytest.fixture()
def vendor(client):
    return login_stub(client, "v1@example.com", "vendor", shop_name="Elegance Rentals")


@pytest.fixture()
def admin(client):
    return login_stub(client, "admin@example.com", "admin")


def make_product(vendor_id, name="Midnight Blue Tuxedo", price=100.0, deposit=50.0, stock=5,
                 available=None, sizes=("S", "M", "L")):
    product = Product(
        sub_admin_id=vendor_id,
        name=name,
        category="Wedding Attire",
        description=f"{name} for rent",
        price_per_day=price,
        security_deposit=deposit,
        stock_quantity=stock,
        available_quantity=stock if available is None else available,
        sizes=list(sizes),
        images=["https://img.example.com/1.jpg"],
    )
    db.session.add(product)
    db.session.commit()
    return product


def add_to_cart(client, token, product_id, start="2024-06-01", end="2024-06-04", size="M", quantity=1):
    return client.post(
        f"{API_PREFIX}/cart/items",
        json={
            "product_id": product_id,
            "rental_start_date": start,
            "rental_end_date": end,
            "size": size,
            "quantity": quantity,
        },
        headers=auth(token),
    )


def reload(model, pk):
    db.session.expire_all()
    return db.session.get(model, pk)
