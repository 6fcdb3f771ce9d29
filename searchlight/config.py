"""
Searchlight Bridge Configuration

Resolves the endpoint URL, bearer token and request timeout from the
environment once at startup. The resulting BridgeConfig is immutable.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from logging_config import get_logger
from searchlight.constants import (
    DEFAULT_SERVER_URL,
    SERVER_URL_ENV_VARS,
    TIMEOUT_ENV_VAR,
    TOKEN_ENV_VARS,
    get_timeout,
)
from searchlight.exceptions import MissingTokenError

logger = get_logger("config")


@dataclass(frozen=True)
class BridgeConfig:
    """Process-lifetime settings for the bridge."""

    server_url: str
    token: str
    request_timeout: float = get_timeout("http_request")

    @property
    def masked_token(self) -> str:
        return mask_token(self.token)


def first_env(names: tuple[str, ...], environ: Mapping[str, str]) -> Optional[str]:
    """Return the value of the first variable in names that is set and non-empty."""
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def mask_token(token: Optional[str]) -> str:
    """Describe a token for logs without revealing it."""
    if not token:
        return "<missing>"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}..."


def _parse_timeout(raw: Optional[str]) -> float:
    default = get_timeout("http_request")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {TIMEOUT_ENV_VAR}={raw!r}, using {default}s")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {TIMEOUT_ENV_VAR}={raw!r}, using {default}s")
        return default
    return value


def load_config(environ: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """
    Build the bridge configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        BridgeConfig

    Raises:
        MissingTokenError: Neither MCP_TOKEN nor SEARCHLIGHT_API_TOKEN is set
    """
    if environ is None:
        environ = os.environ

    token = first_env(TOKEN_ENV_VARS, environ)
    if not token:
        raise MissingTokenError(
            f"No API token found. Set {' or '.join(TOKEN_ENV_VARS)}."
        )

    server_url = first_env(SERVER_URL_ENV_VARS, environ) or DEFAULT_SERVER_URL

    return BridgeConfig(
        server_url=server_url,
        token=token,
        request_timeout=_parse_timeout(environ.get(TIMEOUT_ENV_VAR)),
    )
