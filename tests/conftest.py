"""
Pytest fixtures for Searchlight bridge tests.
"""

import asyncio
import io
import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Add project root to path for searchlight and logging_config imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from searchlight.bridge import SearchlightBridge  # noqa: E402
from searchlight.config import BridgeConfig  # noqa: E402
from searchlight.forwarder import RemoteForwarder  # noqa: E402

TEST_URL = "https://searchlight.test/mcp"
TEST_TOKEN = "sl-test-token-123456"


class ChunkReader:
    """Async reader that hands out pre-set chunks one read() at a time."""

    def __init__(self, chunks: list[bytes], delay: float = 0):
        self._chunks = list(chunks)
        self._delay = delay

    async def read(self, n: int = -1) -> bytes:
        if self._delay:
            await asyncio.sleep(self._delay)
        else:
            await asyncio.sleep(0)
        if not self._chunks:
            return b""
        return self._chunks.pop(0)


class RecordingHandler:
    """
    MockTransport handler that records requests and answers from a callable.

    The default reply echoes the request id with an empty result.
    """

    def __init__(self, reply: Callable | None = None):
        self.requests: list[httpx.Request] = []
        self._reply = reply

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def forwarded(self) -> list[dict]:
        """Bodies excluding the startup ping."""
        return [b for b in self.bodies if b.get("method") != "ping"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if self._reply is not None:
            result = self._reply(body)
            if asyncio.iscoroutine(result):
                result = await result
            return result
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body.get("id"), "result": {}})


def output_lines(output: io.BytesIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().decode("utf-8").splitlines()]


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(server_url=TEST_URL, token=TEST_TOKEN, request_timeout=30)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_bridge(config: BridgeConfig):
    """Build a bridge wired to a mock transport and an in-memory output."""

    def _make(handler: Callable, timeout: float | None = None) -> tuple[SearchlightBridge, io.BytesIO]:
        cfg = config if timeout is None else BridgeConfig(config.server_url, config.token, timeout)
        forwarder = RemoteForwarder(cfg, transport=httpx.MockTransport(handler))
        output = io.BytesIO()
        return SearchlightBridge(cfg, output=output, forwarder=forwarder), output

    return _make
