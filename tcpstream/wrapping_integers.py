"""32-bit sequence numbers that wrap around, relative to a zero point."""

from __future__ import annotations

from dataclasses import dataclass

_MOD32 = 1 << 32
_MASK32 = _MOD32 - 1
_MASK64 = (1 << 64) - 1


@dataclass(frozen=True)
class Wrap32:
    """A 32-bit unsigned value that starts at an arbitrary zero point and wraps at 2**32."""

    raw_value: int

    def __post_init__(self) -> None:
        if not 0 <= self.raw_value <= _MASK32:
            raise ValueError(f"raw value {self.raw_value} does not fit in 32 bits")

    @staticmethod
    def wrap(n: int, zero_point: Wrap32) -> Wrap32:
        """Return the wrapped form of absolute sequence number ``n``."""
        return zero_point + (n & _MASK32)

    def unwrap(self, zero_point: Wrap32, checkpoint: int) -> int:
        """Return the absolute sequence number closest to ``checkpoint`` that wraps to this value."""
        low_bits = (self.raw_value - zero_point.raw_value) & _MASK32
        candidate = ((checkpoint >> 32) << 32) | low_bits
        best_distance = abs(checkpoint - candidate)

        above = (candidate + _MOD32) & _MASK64
        if abs(checkpoint - above) < best_distance:
            return above
        if candidate >= _MOD32:
            below = candidate - _MOD32
            if abs(checkpoint - below) < best_distance:
                return below
        return candidate

    def __add__(self, n: int) -> Wrap32:
        if not isinstance(n, int):
            return NotImplemented
        return Wrap32((self.raw_value + n) & _MASK32)