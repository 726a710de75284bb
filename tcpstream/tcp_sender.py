"""The sending half of a TCP endpoint, with retransmission on timeout."""

from __future__ import annotations

from collections import deque
from typing import Callable

from .byte_stream import ByteStream
from .messages import TCPReceiverMessage, TCPSenderMessage
from .wrapping_integers import Wrap32

MAX_PAYLOAD_SIZE = 1000

TransmitFunction = Callable[[TCPSenderMessage], None]


class RetransmissionTimer:
    """A countdown that expires once ``rto_ms`` milliseconds have passed while active."""

    def __init__(self, initial_rto_ms: int) -> None:
        self.rto_ms = initial_rto_ms
        self._active = False
        self._elapsed = 0

    def is_active(self) -> bool:
        return self._active

    def is_expired(self) -> bool:
        return self._active and self._elapsed >= self.rto_ms

    def reset(self) -> None:
        self._elapsed = 0

    def exponential_backoff(self) -> None:
        self.rto_ms *= 2

    def reload(self, initial_rto_ms: int) -> None:
        self.rto_ms = initial_rto_ms
        self.reset()

    def start(self) -> None:
        self._active = True
        self.reset()

    def stop(self) -> None:
        self._active = False
        self.reset()

    def tick(self, ms_since_last_tick: int) -> RetransmissionTimer:
        if self._active:
            self._elapsed += ms_since_last_tick
        return self


class TCPSender:
    """Turns an outbound byte stream into segments and retransmits unacknowledged ones."""

    def __init__(
        self,
        stream: ByteStream,
        isn: Wrap32,
        initial_rto_ms: int,
        max_payload_size: int = MAX_PAYLOAD_SIZE,
    ) -> None:
        self.stream = stream
        self.isn = isn
        self.initial_rto_ms = initial_rto_ms
        self.max_payload_size = max_payload_size
        self._timer = RetransmissionTimer(initial_rto_ms)
        self._outstanding: deque[TCPSenderMessage] = deque()
        self._retransmissions = 0
        self._next_abs_seqno = 0
        self._ack_abs_seqno = 0
        self._window_size = 1
        self._bytes_in_flight = 0
        self._syn_sent = False
        self._fin_sent = False

    def sequence_numbers_in_flight(self) -> int:
        """How many sequence numbers are sent but not yet acknowledged."""
        return self._bytes_in_flight

    def consecutive_retransmissions(self) -> int:
        """How many retransmissions have happened since the last new acknowledgment."""
        return self._retransmissions

    def make_empty_message(self) -> TCPSenderMessage:
        """A segment carrying no data, positioned at the next sequence number."""
        return TCPSenderMessage(
            Wrap32.wrap(self._next_abs_seqno, self.isn), rst=self.stream.has_error()
        )

    def push(self, transmit: TransmitFunction) -> None:
        """Send as many segments as the peer's window allows."""
        window = self._window_size or 1
        while window > self._bytes_in_flight and not self._fin_sent:
            msg = self.make_empty_message()
            if not self._syn_sent:
                msg.syn = True
                self._syn_sent = True

            remaining = window - self._bytes_in_flight
            limit = min(self.max_payload_size, remaining - msg.sequence_length())
            payload = bytearray()
            while self.stream.bytes_buffered() and len(payload) < limit:
                view = self.stream.peek()[: limit - len(payload)]
                payload += view
                self.stream.pop(len(view))
            msg.payload = bytes(payload)

            if remaining > msg.sequence_length() and self.stream.is_finished():
                msg.fin = True
                self._fin_sent = True

            if msg.sequence_length() == 0:
                break

            transmit(msg)
            if not self._timer.is_active():
                self._timer.start()
            self._next_abs_seqno += msg.sequence_length()
            self._bytes_in_flight += msg.sequence_length()
            self._outstanding.append(msg)

    def receive(self, msg: TCPReceiverMessage) -> None:
        """Process an acknowledgment and window update from the peer."""
        if self.stream.has_error():
            return
        if msg.rst:
            self.stream.set_error()
            return

        self._window_size = msg.window_size
        if msg.ackno is None:
            return
        ack_abs = msg.ackno.unwrap(self.isn, self._next_abs_seqno)
        if ack_abs > self._next_abs_seqno:
            return

        acknowledged = False
        while self._outstanding:
            length = self._outstanding[0].sequence_length()
            if self._ack_abs_seqno + length > ack_abs:
                break
            acknowledged = True
            self._ack_abs_seqno += length
            self._bytes_in_flight -= length
            self._outstanding.popleft()

        if acknowledged:
            self._retransmissions = 0
            self._timer.reload(self.initial_rto_ms)
            if self._outstanding:
                self._timer.start()
            else:
                self._timer.stop()

    def tick(self, ms_since_last_tick: int, transmit: TransmitFunction) -> None:
        """Advance time and retransmit the oldest outstanding segment if the timer expires."""
        if not self._timer.tick(ms_since_last_tick).is_expired():
            return
        if not self._outstanding:
            return
        transmit(self._outstanding[0])
        if self._window_size != 0:
            self._retransmissions += 1
            self._timer.exponential_backoff()
        self._timer.reset()