import pytest

from prometheus_client import REGISTRY
from app.services.errors import NotFoundError, ValidationError
from app.services.stock import adjust_availability, apply_delta, set_stock_quantity
from models import db
from models.product import Product
from conftest import login_stub, make_product, reload


@pytest.mark.parametrize("available,stock,delta,expected", [
    (5, 5, -7, 0),
    (3, 5, 10, 5),
    (3, 5, -1, 2),
    (0, 5, 0, 0),
])
def test_apply_delta_clamps(available, stock, delta, expected):
    assert apply_delta(available, stock, delta) == expected


def _floor_clamps():
    return REGISTRY.get_sample_value("styleswap_stock_clamp_total", {"bound": "floor"}) or 0


@pytest.fixture()
def vendor_id(client):
    return login_stub(client, "stock-vendor@example.com", "vendor")[1]


def test_decrement_floors_at_zero(app, vendor_id):
    product = make_product(vendor_id, stock=5)
    before = _floor_clamps()
    assert adjust_availability(product.id, -7) == 0
    db.session.commit()
    assert reload(Product, product.id).available_quantity == 0
    assert _floor_clamps() == before + 1


def test_increment_caps_at_stock(app, vendor_id):
    product = make_product(vendor_id, stock=5, available=3)
    assert adjust_availability(product.id, 10) == 5
    db.session.commit()
    assert reload(Product, product.id).available_quantity == 5


def test_plain_adjustment(app, vendor_id):
    product = make_product(vendor_id, stock=5)
    assert adjust_availability(product.id, -2) == 3
    assert adjust_availability(product.id, 1) == 4
    # identity map reflects the update without a reload
    assert product.available_quantity == 4


def test_unknown_product(app):
    with pytest.raises(NotFoundError):
        adjust_availability("nope", 1)


def test_non_integer_delta(app, vendor_id):
    product = make_product(vendor_id)
    with pytest.raises(ValidationError):
        adjust_availability(product.id, "lots")


def test_shrinking_stock_reclamps_available(app, vendor_id):
    product = make_product(vendor_id, stock=5)
    assert set_stock_quantity(product.id, 2) == 2
    db.session.commit()
    refreshed = reload(Product, product.id)
    assert refreshed.stock_quantity == 2
    assert refreshed.available_quantity == 2


def test_growing_stock_keeps_available(app, vendor_id):
    product = make_product(vendor_id, stock=5, available=1)
    assert set_stock_quantity(product.id, 10) == 1


def test_negative_stock_rejected(app, vendor_id):
    product = make_product(vendor_id)
    with pytest.raises(ValidationError):
        set_stock_quantity(product.id, -1)


@pytest.mark.parametrize("bad", ["lots", None, object()])
def test_non_integer_stock_rejected(app, vendor_id, bad):
    product = make_product(vendor_id, stock=5)
    with pytest.raises(ValidationError):
        set_stock_quantity(product.id, bad)
    assert reload(Product, product.id).stock_quantity == 5
