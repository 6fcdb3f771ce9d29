"""
MCP Stdio-to-HTTP Bridge

Reads MCP JSON-RPC messages from stdin, forwards them to the Searchlight
HTTP endpoint, and writes responses to stdout.

initialize, prompts/list and resources/list are answered locally;
notifications/* get no response; everything else is relayed.
Each frame is handled in its own task, so a slow remote call never blocks
the frames behind it and responses may come back out of order.
"""

import argparse
import asyncio
import signal
import sys
from typing import Any, BinaryIO, Optional, Protocol

from logging_config import get_logger, setup_logging
from searchlight import __version__
from searchlight.config import BridgeConfig, load_config
from searchlight.constants import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    PARSE_ERROR,
    PROBE_ID,
    PROBE_METHOD,
)
from searchlight.exceptions import InvalidMessageError, MissingTokenError
from searchlight.forwarder import RemoteForwarder
from searchlight.framing import LineBuffer
from searchlight.protocol import (
    InboundMessage,
    decode_json,
    encode_json,
    encode_line,
    initialize_result,
    make_error,
    make_result,
)

logger = get_logger("bridge")

READ_CHUNK_SIZE = 64 * 1024


class ByteReader(Protocol):
    async def read(self, n: int = -1) -> bytes: ...


class SearchlightBridge:
    """
    Translates between the line-delimited stdio transport and HTTP.

    Usage:
        bridge = SearchlightBridge(config)
        exit_code = await bridge.run(reader)
    """

    def __init__(
        self,
        config: BridgeConfig,
        output: Optional[BinaryIO] = None,
        forwarder: Optional[RemoteForwarder] = None,
    ):
        self.config = config
        self.output = output if output is not None else sys.stdout.buffer
        self.forwarder = forwarder if forwarder is not None else RemoteForwarder(config)
        self.buffer = LineBuffer()
        self._tasks: set[asyncio.Task] = set()
        self._probe_task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def handle_frame(self, frame: str) -> Optional[dict]:
        """
        Turn one input frame into its JSON-RPC response.

        Returns:
            The response dict, or None for notifications
        """
        request_id: Any = None
        try:
            try:
                data = decode_json(frame)
            except ValueError as e:
                logger.error(f"Invalid JSON: {e}")
                return make_error(None, PARSE_ERROR, "Parse error", str(e))

            if isinstance(data, dict):
                request_id = data.get("id")

            try:
                message = InboundMessage.from_dict(data)
            except InvalidMessageError as e:
                logger.warning(f"Invalid request: {e}")
                return make_error(e.request_id, INVALID_REQUEST, "Invalid Request", e.message)

            return await self.dispatch(message)
        except Exception as e:
            logger.exception(f"Error handling message (id={request_id})")
            return make_error(request_id, INTERNAL_ERROR, "Internal error", str(e))

    async def dispatch(self, message: InboundMessage) -> Optional[dict]:
        """Route a validated message to a local handler or the remote endpoint."""
        method = message.method
        if message.has_id:
            logger.debug(f"Received: {method} (id={message.id})")
        else:
            logger.debug(f"Received: {method} (no id)")

        if method == "initialize":
            return make_result(message.id, initialize_result())

        if message.is_notification:
            logger.info(f"Received notification: {method}")
            return None

        if method == "prompts/list":
            return make_result(message.id, {"prompts": []})

        if method == "resources/list":
            return make_result(message.id, {"resources": []})

        logger.debug(f"Forwarding: {encode_json(message.raw)}")
        return await self.forwarder.forward(message.raw)

    # =========================================================================
    # Output
    # =========================================================================

    def send_response(self, response: dict) -> None:
        """Write one JSON-RPC response line to the output stream."""
        self.output.write(encode_line(response))
        self.output.flush()

    async def process_frame(self, frame: str) -> None:
        response = await self.handle_frame(frame)
        if response is None:
            return
        try:
            self.send_response(response)
        except OSError as e:
            logger.error(f"Failed to write response: {e}")

    def submit(self, frame: str) -> asyncio.Task:
        """Start handling a frame without waiting for it."""
        task = asyncio.create_task(self.process_frame(frame))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    # =========================================================================
    # Startup probe
    # =========================================================================

    def start_probe(self) -> asyncio.Task:
        """Fire the diagnostic ping in the background; nothing waits on it."""
        self._probe_task = asyncio.create_task(self._probe())
        return self._probe_task

    async def _probe(self) -> None:
        logger.info("Testing connection to server...")
        try:
            response = await self.forwarder.forward(
                {"jsonrpc": JSONRPC_VERSION, "method": PROBE_METHOD, "id": PROBE_ID}
            )
        except Exception as e:
            logger.warning(f"Startup ping failed: {e}")
            return

        error = response.get("error") if isinstance(response, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            logger.warning(f"Startup ping failed: {message}")
        else:
            logger.info("Startup ping succeeded")

    # =========================================================================
    # Main loop
    # =========================================================================

    async def pump(self, reader: ByteReader) -> None:
        """Read until end of input, then drain frames still in flight."""
        while True:
            chunk = await reader.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            for frame in self.buffer.feed(chunk):
                self.submit(frame)

        tail = self.buffer.flush()
        if tail:
            self.submit(tail)

        logger.debug(f"Input closed, waiting for {self.in_flight} in-flight request(s)")
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def stop(self) -> None:
        """Request immediate shutdown; in-flight responses are dropped."""
        if self._stopped is not None:
            self._stopped.set()

    async def run(self, reader: ByteReader, handle_signals: bool = True) -> int:
        """
        Serve until the input stream closes or stop() is called.

        Returns:
            Process exit code
        """
        logger.info(f"Searchlight MCP bridge {__version__} starting")
        logger.info(f"Server URL: {self.config.server_url}")
        logger.info(f"Token: configured ({self.config.masked_token})")

        self._stopped = asyncio.Event()
        if handle_signals:
            self._install_signal_handlers()

        self.start_probe()
        pump = asyncio.create_task(self.pump(reader))
        stopped = asyncio.create_task(self._stopped.wait())

        try:
            done, _ = await asyncio.wait({pump, stopped}, return_when=asyncio.FIRST_COMPLETED)
            if pump in done:
                pump.result()
                logger.info("Input closed, shutting down")
            else:
                logger.info("Termination signal received, shutting down")
        finally:
            pending = [t for t in (pump, stopped, self._probe_task, *self._tasks) if t and not t.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            if handle_signals:
                self._remove_signal_handlers()
            await self.forwarder.close()

        return 0

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError):
                # Windows event loops and non-main threads
                pass

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass


class _FileReader:
    """Reads a regular file (stdin redirected from disk) off the event loop."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    async def read(self, n: int = -1) -> bytes:
        return await asyncio.get_running_loop().run_in_executor(None, self._stream.read, n)


async def open_stdin_reader() -> ByteReader:
    """Attach an asyncio reader to stdin."""
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    try:
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)
    except ValueError:
        # Pipe transports reject regular files
        return _FileReader(sys.stdin.buffer)
    return reader


async def serve(config: BridgeConfig) -> int:
    bridge = SearchlightBridge(config)
    reader = await open_stdin_reader()
    return await bridge.run(reader)


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="searchlight-mcp",
        description="Bridge MCP JSON-RPC on stdio to the Searchlight HTTP API",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    setup_logging(debug=True if args.debug else None)

    try:
        config = load_config()
    except MissingTokenError as e:
        logger.error(str(e))
        return 1

    try:
        return asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Bridge interrupted")
        return 0
    except Exception as e:
        logger.error(f"Bridge error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
