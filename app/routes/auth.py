from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from werkzeug.security import check_password_hash, generate_password_hash
from app.version import API_PREFIX
from extensions import limiter
from models import db
from models.user import User, ROLE_VENDOR
from app.schemas.auth import LoginRequest, RegisterRequest
from app.utils import (
    auth_required,
    current_user,
    error,
    transactional,
    validate_schema,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)
import logging


auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


def _token_response(user, status=200, message="Login successful"):
    return jsonify({
        "status": "success",
        "message": message,
        "access_token": create_access_token(user.id, user.role),
        "refresh_token": create_refresh_token(user.id),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
        "user": user.to_dict(),
    }), status


@auth_bp.route("/register", methods=["POST"])
@validate_schema(RegisterRequest)
def register():
    """
    Create a customer or vendor account.
    ---
    tags:
      - Auth
    responses:
      201:
        description: Account created, tokens returned
      400:
        description: Email already registered or shop details missing
    """
    data: RegisterRequest = request.validated_data
    email = data.email.strip().lower()
    if User.query.filter_by(email=email).first():
        return error("Email already registered", status=400)
    if data.role == ROLE_VENDOR and not data.shop_name:
        return error("Vendors must provide a shop name", status=400)

    user = User(
        email=email,
        name=data.name,
        password_hash=generate_password_hash(data.password),
        role=data.role,
        shop_name=data.shop_name,
        shop_address=data.shop_address,
        mobile_number=data.mobile_number,
    )
    with transactional("Registration failed"):
        db.session.add(user)
    logging.info("Registered %s account %s", user.role, user.id)
    return _token_response(user, status=201, message="Account created")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(lambda: current_app.config["LOGIN_LIMIT_PER_IP"], key_func=get_remote_address, error_message="Too many login attempts from this IP")
@validate_schema(LoginRequest)
def login():
    data: LoginRequest = request.validated_data
    user = User.query.filter_by(email=data.email.strip().lower()).first()
    if user is None or not check_password_hash(user.password_hash, data.password):
        return error("Invalid email or password", status=401)
    return _token_response(user)


@auth_bp.route("/refresh", methods=["POST"])
def refresh_tokens():
    j = request.get_json(silent=True) or {}
    token = j.get("refresh_token", "")
    try:
        payload = decode_token(token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    user = db.session.get(User, payload.get("sub"))
    if user is None:
        return error("Unknown user", status=401)
    return jsonify({
        "access_token": create_access_token(user.id, user.role),
        "refresh_token": create_refresh_token(user.id),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }), 200


@auth_bp.route("/me", methods=["GET"])
@auth_required
def me():
    return jsonify({"status": "success", "user": current_user().profile()}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout_handler():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return error("Token missing", status=401)
    token = auth.split(" ", 1)[1]
    try:
        decode_token(token)
    except TokenError as e:
        return error(str(e), status=401)
    return jsonify({"status": "success", "message": "Logged out"}), 200
