import datetime as dt

import jwt
import pytest

from app.utils.jwt import TokenError, create_access_token, create_refresh_token, decode_token


def test_access_token_round_trip(app):
    payload = decode_token(create_access_token("u1", "vendor"))
    assert payload["sub"] == "u1"
    assert payload["role"] == "vendor"
    assert payload["iss"] == "styleswap"


def test_refresh_token_type_enforced(app):
    with pytest.raises(TokenError):
        decode_token(create_refresh_token("u1"), expected_type="access")


def test_expired_token(app):
    token = jwt.encode(
        {
            "sub": "u1",
            "type": "access",
            "iss": "styleswap",
            "exp": dt.datetime.now(dt.timezone.utc) - dt.timedelta(minutes=1),
        },
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    with pytest.raises(TokenError, match="expired"):
        decode_token(token)


def test_foreign_issuer_rejected(app):
    token = jwt.encode(
        {"sub": "u1", "type": "access", "iss": "someone-else"},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    with pytest.raises(TokenError, match="invalid"):
        decode_token(token)
