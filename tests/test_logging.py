import json
import logging

from app.logging import JsonFormatter, MaskingFilter


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_request_id_generated_when_missing(client):
    resp = client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID", "")) == 32


def test_logs_include_request_id_attribute(client, caplog):
    from app.logging import RequestIdFilter
    caplog.set_level("INFO")
    caplog.handler.addFilter(RequestIdFilter())
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_sensitive_fields_masked_in_info(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "testing")
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    logger.info({"email": "user@example.com", "password": "hunter22", "user": {"access_token": "abc"}})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["password"] == "[REDACTED]"
    assert record.msg["user"]["access_token"] == "[REDACTED]"


def test_sensitive_fields_visible_in_debug(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_json_formatter_shape():
    formatter = JsonFormatter(service="styleswap-test")
    record = logging.LogRecord("styleswap", logging.WARNING, __file__, 1, "clamped %s", (3,), None)
    payload = json.loads(formatter.format(record))
    assert payload["service"] == "styleswap-test"
    assert payload["level"] == "WARNING"
    assert payload["message"] == "clamped 3"
    assert payload["request_id"] == "n/a"
