from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.schemas.order import StatusUpdateRequest
from app.utils import auth_required, current_user, transactional, validate_schema
from app.services import lifecycle
from app.tasks.notifications import dispatch_order_event

order_bp = Blueprint("order", __name__, url_prefix=f"{API_PREFIX}/orders")


@order_bp.before_request
@auth_required
def _enforce_login():
    return None


@order_bp.route("/<order_id>", methods=["GET"])
def order_detail(order_id):
    order = lifecycle.get_order_for(current_user(), order_id)
    return jsonify({"status": "success", "order": lifecycle.serialize(order)}), 200


@order_bp.route("/<order_id>/status", methods=["PUT"])
@validate_schema(StatusUpdateRequest)
def update_status(order_id):
    """
    Move an order along its rental lifecycle.
    ---
    tags:
      - Orders
    responses:
      200:
        description: Status updated
      403:
        description: Not a party to the order
      409:
        description: Transition not allowed from the current status
    """
    data: StatusUpdateRequest = request.validated_data
    with transactional("Failed to update order status"):
        order = lifecycle.update_status(current_user(), order_id, data.status)
    dispatch_order_event(f"status:{order.status}", [order])
    return jsonify({"status": "success", "message": f"Order marked {order.status}", "order": lifecycle.serialize(order)}), 200
