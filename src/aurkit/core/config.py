"""
Client configuration.

All settings the HTTP client needs travel in one immutable ClientConfig
that is passed to AURClient explicitly. Defaults can be overridden from
AURKIT_* environment variables.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from aurkit import __version__
from aurkit.core.errors import ConfigError

DEFAULT_BASE_URL = "https://aur.archlinux.org"
DEFAULT_USER_AGENT = f"aurkit/{__version__}"


def _number(env: Mapping[str, str], key: str, convert: type):
    try:
        return convert(env[key])
    except ValueError as e:
        raise ConfigError(f"{key} must be a {convert.__name__}, got {env[key]!r}") from e


@dataclass(frozen=True)
class ClientConfig:
    """Settings for AURClient."""

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    connect_timeout: float = 60.0
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    rpc_version: int = 5

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """
        Build a config from AURKIT_* environment variables.

        Raises:
            ConfigError: If a numeric variable does not hold a number.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if env.get("AURKIT_BASE_URL"):
            kwargs["base_url"] = env["AURKIT_BASE_URL"]
        if env.get("AURKIT_USER_AGENT"):
            kwargs["user_agent"] = env["AURKIT_USER_AGENT"]
        if env.get("AURKIT_TIMEOUT"):
            kwargs["timeout"] = _number(env, "AURKIT_TIMEOUT", float)
        if env.get("AURKIT_MAX_RETRIES"):
            kwargs["max_retries"] = _number(env, "AURKIT_MAX_RETRIES", int)
        return cls(**kwargs)

    def with_overrides(self, **changes) -> "ClientConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
