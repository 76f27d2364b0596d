from flask import Blueprint, current_app, g
from app.version import API_PREFIX
from app.utils import auth_required, role_required
from app.services.cart_store import CartStore

customer_bp = Blueprint("customer", __name__, url_prefix=API_PREFIX)


@customer_bp.before_request
@auth_required
@role_required("customer")
def _enforce_customer_role():
    """Ensure the requester is an authenticated customer."""
    return None


def get_cart() -> CartStore:
    """Cart of the requesting customer, bound to the app's configured storage."""
    return CartStore(current_app.extensions["cart_storage"]).login(g.user_id)


from . import cart  # noqa: E402
from . import orders  # noqa: E402
