"""Tests for configuration loading via main.py entrypoint."""
import importlib
import sys

import pytest


@pytest.fixture(autouse=True)
def _fresh_config_module():
    yield
    # drop the env-specific module so later imports see the restored environment
    sys.modules.pop("app.config", None)
    importlib.import_module("app.config")


def load_app(monkeypatch, env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    # Reload modules with updated environment
    for module in ['main', 'app.config']:
        if module in sys.modules:
            del sys.modules[module]
    main = importlib.import_module('main')
    return main.app


def load_config_module(monkeypatch, env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    sys.modules.pop('app.config', None)
    return importlib.import_module('app.config')


def test_testing_config_uses_memory_db(monkeypatch):
    app = load_app(monkeypatch, {'APP_ENV': 'testing'})
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite://')
    assert app.config['OTEL_ENABLED'] is False


def test_development_defaults(monkeypatch):
    config = load_config_module(monkeypatch, {'APP_ENV': 'development', 'DATABASE_URL': None})
    cls = config.get_config_class()
    assert cls.DEBUG is True
    assert cls.SQLALCHEMY_DATABASE_URI == 'sqlite:///dev.db'
    assert cls.CART_STORAGE == 'database'
    assert cls.COUPONS == {'STYLE10': 10}


def test_production_requires_secrets(monkeypatch):
    config = load_config_module(monkeypatch, {
        'APP_ENV': 'production',
        'SECRET_KEY': None,
        'DATABASE_URL': None,
        'JWT_SECRET': None,
    })
    with pytest.raises(RuntimeError) as exc:
        config.get_config_class()
    assert 'JWT_SECRET' in str(exc.value)


def test_coupons_and_payment_methods_from_env(monkeypatch):
    config = load_config_module(monkeypatch, {
        'APP_ENV': 'development',
        'COUPONS': '{"SUMMER25": 25}',
        'PAYMENT_METHODS': 'UPI, Card',
    })
    assert config.BaseConfig.COUPONS == {'SUMMER25': 25}
    assert config.BaseConfig.PAYMENT_METHODS == ['UPI', 'Card']
