import logging
from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.schemas.marketing import SubscribeRequest
from app.utils import error, transactional, validate_schema
from models import db
from models.subscriber import Subscriber

marketing_bp = Blueprint("marketing", __name__, url_prefix=f"{API_PREFIX}/marketing")


@marketing_bp.route("/subscribe", methods=["POST"])
@validate_schema(SubscribeRequest)
def subscribe():
    """
    Sign an email address up for the newsletter.
    ---
    tags:
      - Marketing
    responses:
      201:
        description: Subscribed
      400:
        description: Email already subscribed
    """
    data: SubscribeRequest = request.validated_data
    email = data.email.strip().lower()
    if Subscriber.query.filter_by(email=email).first():
        return error("Email is already subscribed", status=400)

    subscriber = Subscriber(email=email)
    with transactional("Failed to subscribe"):
        db.session.add(subscriber)
    logging.info("New newsletter subscriber %s", subscriber.id)
    return jsonify({
        "status": "success",
        "message": "Successfully subscribed",
        "subscriber": subscriber.to_dict(),
    }), 201
