from flask import request, jsonify
from models import db
from models.product import Product
from app.schemas.cart import AddCartItemRequest, UpdateCartItemRequest
from app.utils import error, transactional, validate_schema
from app.services.errors import NotFoundError, ValidationError
from . import customer_bp, get_cart


def _line_response(line, message, status=200):
    return jsonify({"status": "success", "message": message, "item": line.model_dump()}), status


@customer_bp.route("/cart", methods=["GET"])
def view_cart():
    cart = get_cart()
    return jsonify({"status": "success", "cart": cart.summary()}), 200


@customer_bp.route("/cart/groups", methods=["GET"])
def view_cart_groups():
    groups = get_cart().group_by_vendor()
    result = [
        {
            "vendor_id": vendor_id,
            "shop_name": group["shop_name"],
            "items": [item.model_dump() for item in group["items"]],
            "total_amount": sum(i.subtotal + i.deposit_total for i in group["items"]),
        }
        for vendor_id, group in groups.items()
    ]
    return jsonify({"status": "success", "groups": result}), 200


@customer_bp.route("/cart/items", methods=["POST"])
@validate_schema(AddCartItemRequest)
def add_to_cart():
    data: AddCartItemRequest = request.validated_data
    product = db.session.get(Product, data.product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if data.quantity > product.available_quantity:
        raise ValidationError(f"Only {product.available_quantity} unit(s) available")
    if product.sizes and data.size not in product.sizes:
        raise ValidationError("Selected size is not offered for this product")

    with transactional("Failed to add to cart"):
        line = get_cart().add_item(
            product, data.rental_start_date, data.rental_end_date, data.size, data.quantity
        )
    return _line_response(line, "Item added to cart", status=201)


@customer_bp.route("/cart/items/<line_id>", methods=["PATCH"])
@validate_schema(UpdateCartItemRequest)
def update_cart_item(line_id):
    data: UpdateCartItemRequest = request.validated_data
    cart = get_cart()
    line = cart.get(line_id)
    if line is None:
        raise NotFoundError("Item not found in cart")

    if data.quantity is not None:
        if data.quantity < 1:
            return error("Quantity must be at least 1", status=400)
        product = db.session.get(Product, line.product_id)
        if product is not None and data.quantity > product.available_quantity:
            return error(f"Only {product.available_quantity} unit(s) available", status=400)

    with transactional("Failed to update cart item"):
        if data.quantity is not None:
            cart.update_quantity(line_id, data.quantity)
        if data.rental_start_date is not None or data.rental_end_date is not None:
            cart.update_dates(
                line_id,
                data.rental_start_date or line.rental_start_date,
                data.rental_end_date or line.rental_end_date,
            )
        if data.size is not None:
            cart.update_size(line_id, data.size)
    return _line_response(cart.get(line_id), "Cart item updated")


@customer_bp.route("/cart/items/<line_id>", methods=["DELETE"])
def remove_cart_item(line_id):
    with transactional("Failed to remove cart item"):
        removed = get_cart().remove_item(line_id)
    if not removed:
        return error("Item not found", status=404)
    return jsonify({"status": "success", "message": "Item removed"}), 200


@customer_bp.route("/cart", methods=["DELETE"])
def clear_cart():
    with transactional("Failed to clear cart"):
        get_cart().clear()
    return jsonify({"status": "success", "message": "Cart cleared"}), 200
