"""
Searchlight Bridge Constants

Protocol identifiers, JSON-RPC error codes, environment variable names
and timeout configuration.
"""

from searchlight import __version__

# --- Protocol ---

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "searchlight-mcp"
SERVER_VERSION = __version__
CLIENT_IDENTIFIER = f"searchlight-mcp-client/{__version__}"

NOTIFICATION_PREFIX = "notifications/"

# --- JSON-RPC Error Codes ---

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
INTERNAL_ERROR = -32603

# --- Environment ---
# Priority order: first non-empty variable wins

TOKEN_ENV_VARS = ("MCP_TOKEN", "SEARCHLIGHT_API_TOKEN")
SERVER_URL_ENV_VARS = ("MCP_SERVER_URL", "SEARCHLIGHT_API_URL")
TIMEOUT_ENV_VAR = "SEARCHLIGHT_REQUEST_TIMEOUT"

DEFAULT_SERVER_URL = "https://api.searchlight.dev/mcp"

# --- Startup Probe ---

PROBE_METHOD = "ping"
PROBE_ID = "startup-ping"

# --- Timeout Configuration ---
# Centralized timeout values (in seconds)

TIMEOUTS = {
    "http_request": 30,  # Forwarded JSON-RPC call, end to end
}


def get_timeout(key: str, default: int | float | None = None) -> int | float:
    """
    Get a timeout value by key.

    Args:
        key: Timeout key from TIMEOUTS dict
        default: Default value if key not found

    Returns:
        Timeout value in seconds
    """
    if default is None:
        default = TIMEOUTS["http_request"]
    return TIMEOUTS.get(key, default)
