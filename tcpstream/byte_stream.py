"""A bounded in-memory byte stream with a writing side and a reading side."""

from __future__ import annotations

from collections import deque


class ByteStream:
    """A FIFO of bytes limited to ``capacity`` buffered bytes at a time."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._chunks: deque[bytes] = deque()
        self._removed_prefix = 0
        self._total_pushed = 0
        self._total_popped = 0
        self._total_buffered = 0
        self._closed = False
        self._error = False

    # Writing side

    def push(self, data: bytes) -> None:
        """Append as much of ``data`` as the available capacity allows."""
        available = self.available_capacity()
        if self._closed or available == 0 or not data:
            return
        chunk = bytes(data[:available])
        self._total_pushed += len(chunk)
        self._total_buffered += len(chunk)
        self._chunks.append(chunk)

    def close(self) -> None:
        """Signal that nothing more will be written."""
        self._closed = True

    def is_closed(self) -> bool:
        return self._closed

    def available_capacity(self) -> int:
        return self.capacity - self._total_buffered

    def bytes_pushed(self) -> int:
        return self._total_pushed

    # Reading side

    def peek(self) -> bytes:
        """Return the next buffered bytes without removing them."""
        if not self._chunks:
            return b""
        return self._chunks[0][self._removed_prefix:]

    def pop(self, length: int) -> None:
        """Remove ``length`` bytes from the front of the buffer."""
        if length < 0:
            raise ValueError("length must not be negative")
        if length > self._total_buffered:
            raise ValueError(
                f"cannot pop {length} bytes, only {self._total_buffered} buffered"
            )
        self._total_buffered -= length
        self._total_popped += length
        while self._chunks and length > 0:
            remaining = len(self._chunks[0]) - self._removed_prefix
            if length >= remaining:
                length -= remaining
                self._removed_prefix = 0
                self._chunks.popleft()
            else:
                self._removed_prefix += length
                length = 0

    def is_finished(self) -> bool:
        """True once the stream is closed and every byte has been popped."""
        return self._closed and self._total_buffered == 0

    def bytes_buffered(self) -> int:
        return self._total_buffered

    def bytes_popped(self) -> int:
        return self._total_popped

    # Error state

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    def has_error(self) -> bool:
        return self._error


def read(stream: ByteStream, max_len: int) -> bytes:
    """Peek and pop up to ``max_len`` bytes from ``stream``."""
    out = bytearray()
    while stream.bytes_buffered() and len(out) < max_len:
        view = stream.peek()
        if not view:
            raise RuntimeError("peek() returned no bytes while bytes are buffered")
        view = view[: max_len - len(out)]
        out += view
        stream.pop(len(view))
    return bytes(out)