"""Tests for ClientConfig."""

import dataclasses

import pytest

from aurkit import __version__
from aurkit.core.config import DEFAULT_BASE_URL, ClientConfig
from aurkit.core.errors import ConfigError, ErrorKind


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.user_agent == f"aurkit/{__version__}"
        assert config.rpc_version == 5

    def test_trailing_slash_stripped(self):
        assert ClientConfig(base_url="https://aur.test/").base_url == "https://aur.test"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ClientConfig().user_agent = "other"

    def test_from_env(self):
        config = ClientConfig.from_env(
            {
                "AURKIT_BASE_URL": "https://mirror.test/",
                "AURKIT_USER_AGENT": "bot/2",
                "AURKIT_TIMEOUT": "5",
                "AURKIT_MAX_RETRIES": "0",
            }
        )
        assert config.base_url == "https://mirror.test"
        assert config.user_agent == "bot/2"
        assert config.timeout == 5.0
        assert config.max_retries == 0

    def test_from_env_ignores_unset(self):
        assert ClientConfig.from_env({}) == ClientConfig()

    def test_with_overrides_skips_none(self):
        config = ClientConfig().with_overrides(base_url=None, user_agent="x/1")
        assert config.base_url == DEFAULT_BASE_URL
        assert config.user_agent == "x/1"

    @pytest.mark.parametrize(
        "key,value",
        [("AURKIT_TIMEOUT", "soon"), ("AURKIT_MAX_RETRIES", "2.5")],
    )
    def test_from_env_rejects_non_numbers(self, key, value):
        with pytest.raises(ConfigError) as exc_info:
            ClientConfig.from_env({key: value})
        assert key in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.CONFIG
