"""Block-buffered reading shared by file-like resources.

:class:`BlockReader` pulls fixed-size blocks from a callable and serves
byte and line reads out of an internal look-ahead buffer. Resources hold
one by composition and clear it whenever their position jumps.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

BLOCK_SIZE = 4096


class BlockReader:
    """Look-ahead buffer fed by ``read_block`` until it returns ``None``.

    Args
    ----
        read_block: Callable returning the next block, or ``None`` / ``b""``
            at end of stream
    """

    def __init__(self, read_block: Callable[[], bytes | None]) -> None:
        self._read_block = read_block
        self._buffer = bytearray()
        self._exhausted = False

    @property
    def buffered(self) -> int:
        """Number of look-ahead bytes not yet consumed."""
        return len(self._buffer)

    @property
    def exhausted(self) -> bool:
        """True once the source reported end of stream."""
        return self._exhausted

    @property
    def eof(self) -> bool:
        """True when the source is exhausted and nothing is left in the buffer."""
        return self._exhausted and not self._buffer

    def _fill(self) -> bool:
        if self._exhausted:
            return False
        block = self._read_block()
        if not block:
            self._exhausted = True
            return False
        self._buffer.extend(block)
        return True

    def _take(self, size: int) -> bytes:
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def read(self, size: int = -1) -> bytes:
        """Read up to *size* bytes (everything when negative); ``b""`` at EOF."""
        if size is None or size < 0:
            while self._fill():
                pass
            return self._take(len(self._buffer))

        while len(self._buffer) < size and self._fill():
            pass
        return self._take(size)

    def readline(self, size: int = -1) -> bytes:
        """Read one line including its trailing newline; ``b""`` at EOF."""
        start = 0
        while True:
            newline = self._buffer.find(b"\n", start)
            if newline != -1:
                end = newline + 1
                break
            if 0 <= size <= len(self._buffer):
                end = size
                break
            start = len(self._buffer)
            if not self._fill():
                end = len(self._buffer)
                break

        if 0 <= size < end:
            end = size
        return self._take(end)

    def lines(self) -> Iterator[bytes]:
        """Yield lines until end of stream."""
        while line := self.readline():
            yield line

    def clear(self) -> None:
        """Drop look-ahead data and forget a previous end of stream."""
        self._buffer.clear()
        self._exhausted = False


__all__ = ["BLOCK_SIZE", "BlockReader"]
