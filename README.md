# tcpstream

The parts of a TCP endpoint as plain Python objects. You feed messages in and
take messages out. The package never touches the network. It is meant for
studying, simulating and testing how TCP behaves.

## Components

- `tcpstream.wrapping_integers.Wrap32` is a frozen dataclass that holds a 32-bit
  sequence number (`raw_value`). A value outside 0 to 2**32 - 1 raises
  `ValueError`.
  - `Wrap32.wrap(n, zero_point)` turns an absolute sequence number into a
    wrapped one.
  - `unwrap(zero_point, checkpoint)` goes the other way. It returns the absolute
    number closest to `checkpoint` that wraps to this value.
  - `wrapped + n` adds an integer, modulo 2**32.
- `tcpstream.byte_stream.ByteStream(capacity)` is an in-memory byte FIFO. It
  holds at most `capacity` buffered bytes.
  - Writing: `push(data)` takes bytes and drops whatever does not fit. The other
    writing methods are `close`, `is_closed`, `available_capacity` and
    `bytes_pushed`.
  - Reading: `peek`, `pop(length)`, `is_finished`, `bytes_buffered` and
    `bytes_popped`. `pop` raises `ValueError` when `length` is negative or
    larger than what is buffered.
  - Errors: `set_error` and `has_error`.
  - `read(stream, max_len)` peeks and pops up to `max_len` bytes and returns
    them.
- `tcpstream.reassembler.Reassembler(output)` takes indexed substrings that may
  arrive out of order or overlap. It calls them with `insert(first_index, data,
  is_last_substring)`.
  - It writes bytes to the output `ByteStream` as soon as they are in order.
  - It drops bytes beyond the stream's available capacity.
  - It closes the stream once the last byte has been written.
  - `count_bytes_pending()` reports how many bytes are still held back.
- `tcpstream.messages` defines the two message types.
  - `TCPSenderMessage` has the fields `seqno`, `syn`, `payload`, `fin` and
    `rst`, plus `sequence_length()`. SYN and FIN each count as one sequence
    number.
  - `TCPReceiverMessage` has the fields `ackno`, `window_size` and `rst`.
- `tcpstream.tcp_receiver.TCPReceiver(reassembler)` handles the receiving side.
  - `receive(message)` places each payload at its stream index.
  - `send()` builds the acknowledgement. The advertised window is capped at
    65535.
  - The reassembled bytes can be read from `receiver.stream`.
- `tcpstream.tcp_sender.TCPSender(stream, isn, initial_rto_ms,
  max_payload_size=1000)` handles the sending side.
  - `push(transmit)` cuts the outbound stream into segments that fit the peer's
    window. A window of zero is treated as one.
  - `receive(msg)` processes acknowledgements and window updates.
  - `tick(ms, transmit)` retransmits the oldest unacknowledged segment when the
    `RetransmissionTimer` expires. The timeout doubles only while the window is
    non-zero.
  - `sequence_numbers_in_flight()` and `consecutive_retransmissions()` report
    the sender's state.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from tcpstream.byte_stream import ByteStream, read
from tcpstream.messages import TCPSenderMessage
from tcpstream.reassembler import Reassembler
from tcpstream.tcp_receiver import TCPReceiver
from tcpstream.tcp_sender import TCPSender
from tcpstream.wrapping_integers import Wrap32

stream = ByteStream(capacity=8)
stream.push(b"hello, world")      # only the first 8 bytes fit
assert stream.available_capacity() == 0
assert read(stream, 5) == b"hello"

isn = Wrap32(2**32 - 2)
assert Wrap32.wrap(5, isn).unwrap(isn, 0) == 5

outbound = ByteStream(capacity=64)
sender = TCPSender(outbound, isn, initial_rto_ms=1000)
receiver = TCPReceiver(Reassembler(ByteStream(capacity=64)))

segments = []
sender.push(segments.append)          # SYN first: the initial window is one
for segment in segments:
    receiver.receive(segment)
sender.receive(receiver.send())

outbound.push(b"data")
outbound.close()
segments.clear()
sender.push(segments.append)
for segment in segments:
    receiver.receive(segment)
assert read(receiver.stream, 64) == b"data"
assert receiver.stream.is_finished()
```

## What it does not do

The package has no sockets and no tunnel or network adapter. It does not encode
or parse TCP or IP headers. It also has no connection object that joins a
sender and a receiver into one endpoint. Moving messages between the two sides,
and driving `tick`, is up to the caller.