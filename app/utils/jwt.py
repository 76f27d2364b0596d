import datetime as dt
import uuid
from typing import Dict
import jwt
from flask import current_app

ISSUER = "styleswap"


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def _utcnow():
    return dt.datetime.now(dt.timezone.utc)


def _claims(user_id: str, token_type: str, lifetime: dt.timedelta) -> Dict:
    now = _utcnow()
    return {
        "sub": user_id,
        "type": token_type,
        "iss": ISSUER,
        "iat": now,
        "exp": now + lifetime,
        "jti": uuid.uuid4().hex,
    }


def create_access_token(user_id: str, role: str) -> str:
    cfg = current_app.config
    payload = _claims(user_id, "access", dt.timedelta(minutes=cfg["ACCESS_TOKEN_LIFETIME_MIN"]))
    payload["role"] = role
    return jwt.encode(payload, _secret(), algorithm="HS256")


def create_refresh_token(user_id: str) -> str:
    cfg = current_app.config
    payload = _claims(user_id, "refresh", dt.timedelta(days=cfg["REFRESH_TOKEN_LIFETIME_DAYS"]))
    return jwt.encode(payload, _secret(), algorithm="HS256")


class TokenError(Exception):
    pass


def decode_token(token: str, expected_type: str = "access") -> Dict:
    try:
        data = jwt.decode(token, _secret(), algorithms=["HS256"], issuer=ISSUER)
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    if not data.get("sub"):
        raise TokenError("token missing subject")
    return data
