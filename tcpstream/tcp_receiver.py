"""The receiving half of a TCP endpoint."""

from __future__ import annotations

from typing import Optional

from .byte_stream import ByteStream
from .messages import TCPReceiverMessage, TCPSenderMessage
from .reassembler import Reassembler
from .wrapping_integers import Wrap32

_MASK64 = (1 << 64) - 1
_MAX_WINDOW = 0xFFFF


class TCPReceiver:
    """Feeds incoming segments into a reassembler and reports acknowledgments."""

    def __init__(self, reassembler: Reassembler) -> None:
        self.reassembler = reassembler
        self._zero_point: Optional[Wrap32] = None

    @property
    def stream(self) -> ByteStream:
        """The byte stream the reassembled data is written to."""
        return self.reassembler.output

    def receive(self, message: TCPSenderMessage) -> None:
        """Insert the segment's payload at its position in the stream."""
        stream = self.stream
        if stream.has_error():
            return
        if message.rst:
            stream.set_error()
            return

        if self._zero_point is None:
            if not message.syn:
                return
            self._zero_point = message.seqno

        checkpoint = stream.bytes_pushed()
        absolute_seqno = message.seqno.unwrap(self._zero_point, checkpoint)
        stream_index = (absolute_seqno + int(message.syn) - 1) & _MASK64
        self.reassembler.insert(stream_index, message.payload, message.fin)

    def send(self) -> TCPReceiverMessage:
        """Build the acknowledgment and window advertisement for the peer."""
        stream = self.stream
        window_size = min(stream.available_capacity(), _MAX_WINDOW)
        if self._zero_point is None:
            return TCPReceiverMessage(None, window_size, stream.has_error())
        ack_abs = stream.bytes_pushed() + 1 + int(stream.is_closed())
        return TCPReceiverMessage(
            Wrap32.wrap(ack_abs, self._zero_point), window_size, stream.has_error()
        )