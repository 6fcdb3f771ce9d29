"""
Searchlight Exception Hierarchy

All bridge-specific exceptions inherit from SearchlightError.

Usage:
    from searchlight.exceptions import MissingTokenError

    try:
        config = load_config()
    except MissingTokenError as e:
        logger.error(str(e))
"""


class SearchlightError(Exception):
    """Base exception for all bridge errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SearchlightError):
    """Error in bridge configuration."""

    pass


class MissingTokenError(ConfigurationError):
    """No bearer token could be resolved from the environment."""

    pass


# =============================================================================
# Protocol Errors
# =============================================================================


class ProtocolError(SearchlightError):
    """Base class for JSON-RPC protocol errors."""

    pass


class InvalidMessageError(ProtocolError):
    """Decoded JSON is not a usable JSON-RPC request or notification.

    Carries whatever id could be recovered so the error response can be
    correlated by the client.
    """

    def __init__(self, message: str, request_id=None, details: dict | None = None):
        super().__init__(message, details)
        self.request_id = request_id
