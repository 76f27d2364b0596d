from flask import request, jsonify, current_app, g
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.schemas.order import CheckoutRequest, FeedbackRequest, RaiseIssueRequest
from app.utils import current_user, transactional, validate_schema
from app.services import lifecycle
from app.services.checkout import place_checkout
from app.tasks.notifications import dispatch_order_event
from . import customer_bp, get_cart


@customer_bp.route("/checkout", methods=["POST"])
@limiter.limit(lambda: current_app.config["ORDER_LIMIT_PER_IP"], key_func=get_remote_address, error_message="Too many orders from this IP")
@validate_schema(CheckoutRequest)
def checkout():
    """
    Place one order per vendor from the customer's cart.
    ---
    tags:
      - Customer
    parameters:
      - in: header
        name: Idempotency-Key
        type: string
        required: false
    responses:
      201:
        description: Orders placed
      400:
        description: Cart empty or invalid
      409:
        description: Checkout failed and was rolled back
    """
    data: CheckoutRequest = request.validated_data
    key = request.headers.get("Idempotency-Key") or data.idempotency_key
    cart = get_cart()
    with transactional("Checkout failed"):
        result = place_checkout(
            current_user(),
            cart,
            payment_method=data.payment_method,
            coupon_code=data.coupon_code,
            idempotency_key=key,
        )
    if not result.replayed:
        # orders are committed at this point
        with transactional("Failed to clear cart after checkout"):
            cart.clear()
        dispatch_order_event("order_placed", result.orders)
    return jsonify({
        "status": "success",
        "message": f"{len(result.orders)} order(s) placed successfully",
        "checkout_id": result.checkout_id,
        "discount_total": result.discount_total,
        "replayed": result.replayed,
        "orders": [lifecycle.serialize(o) for o in result.orders],
    }), 200 if result.replayed else 201


@customer_bp.route("/orders/mine", methods=["GET"])
def my_orders():
    orders = lifecycle.list_customer_orders(g.user_id)
    return jsonify({"status": "success", "orders": [lifecycle.serialize(o) for o in orders]}), 200


@customer_bp.route("/orders/<order_id>/feedback", methods=["PUT"])
@validate_schema(FeedbackRequest)
def submit_feedback(order_id):
    data: FeedbackRequest = request.validated_data
    with transactional("Failed to save feedback"):
        order = lifecycle.submit_feedback(
            current_user(),
            order_id,
            data.rating,
            data.review,
            data.tags,
            item_index=data.item_index,
            item_name=data.item_name,
        )
    return jsonify({"status": "success", "message": "Feedback submitted", "order": lifecycle.serialize(order)}), 200


@customer_bp.route("/orders/<order_id>/issues", methods=["POST"])
@validate_schema(RaiseIssueRequest)
def raise_issue(order_id):
    data: RaiseIssueRequest = request.validated_data
    with transactional("Failed to raise issue"):
        order = lifecycle.raise_issue(
            current_user(),
            order_id,
            data.type,
            data.description,
            item_index=data.item_index,
            item_name=data.item_name,
        )
    dispatch_order_event("issue_raised", [order])
    return jsonify({
        "status": "success",
        "message": "Issue reported",
        "issue": order.issues[-1],
        "order": lifecycle.serialize(order),
    }), 201
