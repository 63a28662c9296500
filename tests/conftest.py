"""
Shared pytest fixtures for the connector test suite.
"""

import json

import pytest

from connector.config.models import ConnectionConfig, Credentials, GatewayConfig

# 32 ASCII characters -> 32 bytes, the AES-256 key size
TEST_KEY = "MySuperSecretKeyForParamsToken12"
TEST_SECRET = "s3cret-authtoken"


# ---------------------------------------------------------------------------
# Configuration objects
# ---------------------------------------------------------------------------

@pytest.fixture
def credentials():
    """Credentials with a valid key, secret and RDP account."""
    return Credentials.model_validate({
        "authtoken": TEST_SECRET,
        "guac_key": TEST_KEY,
        "username": "rdpuser",
        "password": "rdp-p4ss",
    })


@pytest.fixture
def make_connection():
    """Factory for ConnectionConfig using on-disk (camelCase) keys."""
    def _make(**overrides) -> ConnectionConfig:
        data = {
            "type": "rdp",
            "settings": {
                "hostname": "10.0.0.5",
                "port": "3389",
                "security": "any",
                "ignore-cert": True,
            },
            "guacd": {"port": 4822},
            "logLevel": "ERRORS",
        }
        data.update(overrides)
        return ConnectionConfig.model_validate(data)
    return _make


@pytest.fixture
def make_gateway_config(credentials, make_connection):
    """Factory for a full GatewayConfig."""
    def _make(credentials_override=None, **connection_overrides) -> GatewayConfig:
        return GatewayConfig(
            protocol="rdp",
            config_file="guacd_rdp.json",
            credentials=credentials_override or credentials,
            connection=make_connection(**connection_overrides),
        )
    return _make


@pytest.fixture
def gateway_config(make_gateway_config):
    return make_gateway_config()


# ---------------------------------------------------------------------------
# On-disk configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config_dir(tmp_path):
    """Directory with valid guacd_rdp.json and rdp_credentials files."""
    (tmp_path / "rdp_credentials").write_text(json.dumps({
        "authtoken": TEST_SECRET,
        "guac_key": TEST_KEY,
        "username": "rdpuser",
        "password": "rdp-p4ss",
    }))
    (tmp_path / "guacd_rdp.json").write_text(json.dumps({
        "type": "rdp",
        "defaultWidth": 1280,
        "defaultHeight": 800,
        "useCredentials": True,
        "settings": {"hostname": "10.0.0.5", "port": "3389"},
        "guacd": {"port": 4823},
        "logLevel": "NORMAL",
    }))
    return tmp_path


# ---------------------------------------------------------------------------
# Flask test client
# ---------------------------------------------------------------------------

@pytest.fixture
def make_app(gateway_config):
    """Factory building a fresh app with a clean rate limiter."""
    from connector.app import create_app
    from connector.api.rate_limit import limiter

    def _make(config=None, **app_config):
        app = create_app(config or gateway_config)
        app.config["TESTING"] = True
        app.config.update(app_config)
        limiter.reset()
        return app
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def app_client(app):
    return app.test_client()


@pytest.fixture
def token_url():
    return "/node/desktop01.cluster/5901/getToken"
