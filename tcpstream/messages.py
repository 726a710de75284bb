"""Segments exchanged between a TCP sender and the peer's TCP receiver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .wrapping_integers import Wrap32


@dataclass
class TCPSenderMessage:
    """A segment produced by a TCP sender."""

    seqno: Wrap32
    syn: bool = False
    payload: bytes = b""
    fin: bool = False
    rst: bool = False

    def sequence_length(self) -> int:
        """Number of sequence numbers the segment occupies (SYN and FIN count one each)."""
        return int(self.syn) + len(self.payload) + int(self.fin)


@dataclass(frozen=True)
class TCPReceiverMessage:
    """Acknowledgment and flow-control information sent back by a TCP receiver."""

    ackno: Optional[Wrap32]
    window_size: int
    rst: bool = False