"""Reassembly of indexed, possibly overlapping substrings into a byte stream."""

from __future__ import annotations

from .byte_stream import ByteStream


class Reassembler:
    """Collects out-of-order substrings and writes them to ``output`` in order."""

    def __init__(self, output: ByteStream) -> None:
        self.output = output
        self._front = 0
        self._bytes_valid = 0
        self._last_substring_inserted = False
        self._last_index = 0
        self._data = bytearray()
        self._valid = bytearray()

    def insert(self, first_index: int, data: bytes, is_last_substring: bool) -> None:
        """Insert ``data`` whose first byte sits at stream index ``first_index``."""
        if is_last_substring:
            self._last_substring_inserted = True
            self._last_index = first_index + len(data)

        if first_index < self._front:
            to_drop = self._front - first_index
            if to_drop >= len(data):
                return
            data = data[to_drop:]
            offset = 0
        else:
            offset = first_index - self._front

        available = self.output.available_capacity()
        if len(self._data) < available:
            grow = available - len(self._data)
            self._data.extend(bytes(grow))
            self._valid.extend(bytes(grow))
        if offset >= len(self._data):
            return

        count = min(len(data), len(self._data) - offset)
        span = slice(offset, offset + count)
        newly_valid = max(0, min(count, available - offset))
        self._bytes_valid += newly_valid - sum(self._valid[span])
        self._data[span] = data[:count]
        self._valid[span] = b"\x01" * newly_valid + b"\x00" * (count - newly_valid)

        ready_len = self._valid.find(0)
        if ready_len == -1:
            ready_len = len(self._valid)
        ready = bytes(self._data[:ready_len])
        del self._data[:ready_len]
        del self._valid[:ready_len]
        self._front += ready_len
        self._bytes_valid -= ready_len

        if ready:
            self.output.push(ready)

        if self._last_substring_inserted and self._front == self._last_index:
            self._data.clear()
            self._valid.clear()
            self.output.close()

    def count_bytes_pending(self) -> int:
        """Number of bytes stored here and not yet written to the output."""
        return self._bytes_valid