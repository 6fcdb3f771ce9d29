"""
Newline frame assembly for the stdin transport.
"""

import codecs
from typing import Optional


class LineBuffer:
    """
    Accumulates raw input and splits it into newline-delimited frames.

    Bytes are decoded incrementally so a UTF-8 sequence split across two
    reads is reassembled. Blank lines are dropped.

    Usage:
        buffer = LineBuffer()
        for frame in buffer.feed(chunk):
            ...
        tail = buffer.flush()
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received since the last newline."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        """
        Add a chunk and return the complete frames it finished.

        Args:
            chunk: Raw bytes (or already-decoded text) from the input stream

        Returns:
            Non-blank frames in arrival order, without line terminators
        """
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk

        if "\n" not in self._buffer:
            return []

        *lines, self._buffer = self._buffer.split("\n")
        return [line.strip() for line in lines if line.strip()]

    def flush(self) -> Optional[str]:
        """
        Return the unterminated remainder as a final frame at end of input.

        Returns:
            The remaining frame, or None if nothing but whitespace is left
        """
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer.strip(), ""
        return remainder or None
