"""
HTTP transport to the Searchlight endpoint.

RemoteForwarder.forward() always returns a JSON-RPC response dict. Transport
failures (bad status, unparseable body, network errors, timeouts) are turned
into synthesized error responses rather than raised, so the local
conversation never hangs on a broken remote call.
"""

import asyncio
from typing import Any, Optional

import httpx

from logging_config import get_logger
from searchlight.config import BridgeConfig
from searchlight.constants import CLIENT_IDENTIFIER, INTERNAL_ERROR, PARSE_ERROR
from searchlight.protocol import decode_json, encode_json, make_error

logger = get_logger("forwarder")


class RemoteForwarder:
    """
    Async HTTP client for the Searchlight JSON-RPC endpoint.

    Usage:
        forwarder = RemoteForwarder(config)
        response = await forwarder.forward({"jsonrpc": "2.0", "method": "tools/list", "id": 1})
        await forwarder.close()
    """

    def __init__(self, config: BridgeConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._timeout = config.request_timeout
        # The deadline is enforced around the whole call in forward();
        # httpx's own timeout only bounds individual socket operations.
        self.client = httpx.AsyncClient(timeout=self._timeout, transport=transport)

    def _headers(self, body: bytes) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "Authorization": f"Bearer {self.config.token}",
            "User-Agent": CLIENT_IDENTIFIER,
        }

    async def forward(self, message: dict) -> dict:
        """
        POST a JSON-RPC message and return the JSON-RPC response.

        Args:
            message: Full decoded JSON-RPC message

        Returns:
            The remote response, or a synthesized error response
        """
        request_id = message.get("id")
        body = encode_json(message).encode("utf-8")

        try:
            response = await asyncio.wait_for(
                self.client.post(self.config.server_url, content=body, headers=self._headers(body)),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error(f"Request timed out after {self._timeout}s: {message.get('method')}")
            return make_error(
                request_id,
                INTERNAL_ERROR,
                "Request timeout",
                f"No response from server within {self._timeout:g} seconds",
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error forwarding to {self.config.server_url}: {e}")
            return make_error(request_id, INTERNAL_ERROR, "Network error", str(e) or type(e).__name__)

        if response.is_success:
            try:
                return decode_json(response.text)
            except ValueError as e:
                logger.error(f"Invalid JSON from server (HTTP {response.status_code}): {e}")
                return make_error(request_id, PARSE_ERROR, "Parse error", str(e))

        return self._error_response(request_id, response)

    def _error_response(self, request_id: Any, response: httpx.Response) -> dict:
        """Map a non-2xx response to a JSON-RPC error, preferring the remote's own."""
        status = response.status_code
        logger.error(f"Server returned HTTP {status}: {response.text[:500]}")

        try:
            parsed = decode_json(response.text)
        except ValueError:
            return make_error(
                request_id,
                INTERNAL_ERROR,
                f"HTTP {status}",
                {"status": status, "body": response.text},
            )

        if isinstance(parsed, dict):
            if "error" in parsed:
                return parsed
            message = parsed.get("message")
            if message:
                return make_error(request_id, INTERNAL_ERROR, str(message), parsed)

        return make_error(request_id, INTERNAL_ERROR, f"HTTP {status}", parsed)

    async def close(self) -> None:
        await self.client.aclose()
