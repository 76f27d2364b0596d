from flask import Blueprint, jsonify
from app.version import API_PREFIX
from app.services import catalog

catalog_bp = Blueprint("catalog", __name__, url_prefix=API_PREFIX)


@catalog_bp.route("/products", methods=["GET"])
def list_products():
    """
    Browse all rental products, newest first.
    ---
    tags:
      - Catalog
    responses:
      200:
        description: Product list
    """
    products = catalog.list_products()
    return jsonify({"status": "success", "products": [p.to_dict() for p in products]}), 200


@catalog_bp.route("/products/<product_id>", methods=["GET"])
def product_detail(product_id):
    product = catalog.get_product(product_id)
    return jsonify({"status": "success", "product": product.to_dict()}), 200
