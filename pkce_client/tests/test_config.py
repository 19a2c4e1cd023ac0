"""Tests for startup configuration validation."""
from dataclasses import replace

import pytest

from pkce_client.config import ClientConfig
from pkce_client.errors import ConfigError
from pkce_client.main import create_app


def test_valid_config_passes(config):
    assert config.validate() is config
    assert config.token_endpoint == "https://provider.example/oauth2/v1/token"
    assert config.authorize_endpoint == "https://provider.example/oauth2/v1/authorize"


@pytest.mark.parametrize(
    "changes",
    [
        {"client_id": ""},
        {"scope": ""},
        {"redirect_uri": "localhost:4000/airtable-oauth"},
        {"provider_url": "ftp://provider.example"},
        {"port": 0},
        {"flow_ttl_seconds": -1},
        {"token_timeout_seconds": 0},
    ],
)
def test_invalid_config_rejected(config, changes):
    with pytest.raises(ConfigError):
        replace(config, **changes).validate()


def test_create_app_validates_config(config):
    with pytest.raises(ConfigError):
        create_app(replace(config, client_id=""))


def test_from_env_defaults_are_valid():
    ClientConfig.from_env().validate()
