from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.schemas.order import ResolveIssueRequest
from app.utils import auth_required, current_user, role_required, transactional, validate_schema
from app.services import lifecycle
from models.subscriber import Subscriber
from models.user import User

admin_bp = Blueprint("admin", __name__, url_prefix=API_PREFIX)


@admin_bp.before_request
@auth_required
@role_required("admin")
def _enforce_admin_role():
    """Ensure the requester is an authenticated admin."""
    return None

@admin_bp.route("/admin/users", methods=["GET"])
def list_users():
    users = User.query.order_by(User.created_at.desc()).limit(50).all()
    return jsonify({"status": "success", "users": [u.to_dict() for u in users]}), 200

@admin_bp.route("/admin/subscribers", methods=["GET"])
def list_subscribers():
    subscribers = Subscriber.query.order_by(Subscriber.subscribed_at.desc()).all()
    return jsonify({"status": "success", "subscribers": [s.to_dict() for s in subscribers]}), 200

@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    orders = lifecycle.list_all_orders()
    return jsonify({"status": "success", "orders": [lifecycle.serialize(o) for o in orders]}), 200

@admin_bp.route("/orders/<order_id>/issues/<issue_id>", methods=["PUT"])
@validate_schema(ResolveIssueRequest)
def resolve_issue(order_id, issue_id):
    data: ResolveIssueRequest = request.validated_data
    with transactional("Failed to update issue"):
        order = lifecycle.resolve_issue(current_user(), order_id, issue_id, data.status, data.admin_response)
    return jsonify({"status": "success", "message": "Issue updated", "order": lifecycle.serialize(order)}), 200
