"""Byte streams, stream reassembly, wrapping sequence numbers and a TCP sender/receiver pair."""

__version__ = "0.1.0"
__all__ = ["byte_stream", "messages", "reassembler", "tcp_receiver", "tcp_sender", "wrapping_integers"]