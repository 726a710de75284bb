from tcpstream.byte_stream import ByteStream
from tcpstream.messages import TCPReceiverMessage
from tcpstream.tcp_sender import MAX_PAYLOAD_SIZE, RetransmissionTimer, TCPSender
from tcpstream.wrapping_integers import Wrap32

ISN = Wrap32(12345)
RTO = 100


def make_sender(capacity=5000):
    sent = []
    sender = TCPSender(ByteStream(capacity), ISN, RTO)
    return sender, sent


def ack(abs_seqno, window):
    return TCPReceiverMessage(Wrap32.wrap(abs_seqno, ISN), window)


def test_timer_inactive_does_not_expire():
    timer = RetransmissionTimer(RTO)
    timer.tick(RTO * 5)
    assert timer.is_expired() is False
    assert timer.is_active() is False


def test_timer_expires_after_rto():
    timer = RetransmissionTimer(RTO)
    timer.start()
    assert timer.tick(RTO - 1).is_expired() is False
    assert timer.tick(1).is_expired() is True
    timer.reset()
    assert timer.is_expired() is False


def test_timer_backoff_reload_and_stop():
    timer = RetransmissionTimer(RTO)
    timer.exponential_backoff()
    assert timer.rto_ms == 2 * RTO
    timer.reload(RTO)
    assert timer.rto_ms == RTO
    timer.start()
    timer.tick(RTO)
    timer.stop()
    assert timer.is_active() is False
    assert timer.is_expired() is False


def test_first_push_sends_syn():
    sender, sent = make_sender()
    sender.push(sent.append)
    assert len(sent) == 1
    assert sent[0].syn is True
    assert sent[0].seqno == ISN
    assert sent[0].payload == b""
    assert sender.sequence_numbers_in_flight() == 1


def test_no_second_segment_while_window_full():
    sender, sent = make_sender()
    sender.stream.push(b"data")
    sender.push(sent.append)
    sender.push(sent.append)
    assert len(sent) == 1
    assert sent[0].payload == b""


def test_data_after_syn_ack():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.receive(ack(1, 1000))
    assert sender.sequence_numbers_in_flight() == 0
    sender.stream.push(b"hello")
    sender.push(sent.append)
    assert sent[-1].payload == b"hello"
    assert sent[-1].seqno == Wrap32.wrap(1, ISN)
    assert sender.sequence_numbers_in_flight() == len(b"hello")


def test_payload_split_by_max_size_and_window():
    sender, sent = make_sender(capacity=5000)
    sender.push(sent.append)
    sender.receive(ack(1, 3000))
    data = bytes(range(256)) * 10
    sender.stream.push(data)
    sender.push(sent.append)
    segments = sent[1:]
    assert all(len(s.payload) <= MAX_PAYLOAD_SIZE for s in segments)
    assert b"".join(s.payload for s in segments) == data
    assert sender.sequence_numbers_in_flight() == len(data)


def test_window_limits_payload():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.receive(ack(1, 3))
    sender.stream.push(b"abcdef")
    sender.push(sent.append)
    assert sent[-1].payload == b"abc"
    assert sender.stream.bytes_buffered() == len(b"def")


def test_fin_sent_when_stream_finished():
    sender, sent = make_sender()
    sender.stream.close()
    sender.push(sent.append)
    assert sent[0].syn is True and sent[0].fin is False
    sender.receive(ack(1, 10))
    sender.push(sent.append)
    assert sent[-1].fin is True
    assert sent[-1].seqno == Wrap32.wrap(1, ISN)
    sender.receive(ack(2, 10))
    assert sender.sequence_numbers_in_flight() == 0
    count = len(sent)
    sender.push(sent.append)
    assert len(sent) == count


def test_retransmission_with_backoff():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.tick(RTO - 1, sent.append)
    assert len(sent) == 1
    sender.tick(1, sent.append)
    assert len(sent) == 2
    assert sent[1] == sent[0]
    assert sender.consecutive_retransmissions() == 1
    sender.tick(2 * RTO - 1, sent.append)
    assert len(sent) == 2
    sender.tick(1, sent.append)
    assert len(sent) == 3
    assert sender.consecutive_retransmissions() == 2
    sender.receive(ack(1, 10))
    assert sender.consecutive_retransmissions() == 0
    assert sender.sequence_numbers_in_flight() == 0


def test_zero_window_probe_without_backoff():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.receive(ack(1, 0))
    sender.stream.push(b"xyz")
    sender.push(sent.append)
    assert sent[-1].payload == b"x"
    sender.tick(RTO, sent.append)
    sender.tick(RTO, sent.append)
    assert sent[-1].payload == b"x"
    assert len(sent) == 4
    assert sender.consecutive_retransmissions() == 0


def test_partial_ack_keeps_segment_outstanding():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.receive(ack(1, 100))
    sender.stream.push(b"abcd")
    sender.push(sent.append)
    sender.receive(ack(3, 100))
    assert sender.sequence_numbers_in_flight() == len(b"abcd")


def test_ack_beyond_sent_is_ignored():
    sender, sent = make_sender()
    sender.push(sent.append)
    sender.receive(ack(5, 100))
    assert sender.sequence_numbers_in_flight() == 1


def test_rst_sets_error_and_marks_messages():
    sender, _ = make_sender()
    sender.receive(TCPReceiverMessage(None, 10, rst=True))
    assert sender.stream.has_error()
    assert sender.make_empty_message().rst is True


def test_empty_message_uses_next_seqno():
    sender, sent = make_sender()
    assert sender.make_empty_message().seqno == ISN
    sender.push(sent.append)
    empty = sender.make_empty_message()
    assert empty.seqno == Wrap32.wrap(1, ISN)
    assert empty.sequence_length() == 0