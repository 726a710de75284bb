import pytest

from tcpstream.messages import TCPReceiverMessage, TCPSenderMessage
from tcpstream.wrapping_integers import Wrap32


def test_empty_message_occupies_no_sequence_numbers():
    assert TCPSenderMessage(Wrap32(7)).sequence_length() == 0


@pytest.mark.parametrize(
    "syn, payload, fin",
    [
        (True, b"", False),
        (False, b"", True),
        (True, b"", True),
    ],
)
def test_flags_count_one_each(syn, payload, fin):
    msg = TCPSenderMessage(Wrap32(0), syn=syn, payload=payload, fin=fin)
    assert msg.sequence_length() == (1 if syn else 0) + (1 if fin else 0)


def test_payload_counts_its_length():
    payload = b"hello world"
    msg = TCPSenderMessage(Wrap32(0), payload=payload)
    assert msg.sequence_length() == len(payload)


def test_syn_payload_and_fin_together():
    payload = b"abc"
    msg = TCPSenderMessage(Wrap32(0), syn=True, payload=payload, fin=True)
    assert msg.sequence_length() == len(payload) + 2


def test_rst_does_not_occupy_sequence_space():
    msg = TCPSenderMessage(Wrap32(0), rst=True)
    assert msg.sequence_length() == 0
    assert msg.rst is True


def test_receiver_message_defaults():
    msg = TCPReceiverMessage(ackno=None, window_size=10)
    assert msg.ackno is None
    assert msg.window_size == 10
    assert msg.rst is False


def test_receiver_message_equality():
    first = TCPReceiverMessage(Wrap32(3), 5)
    assert first.ackno == Wrap32(3)
    assert first.window_size == 5
    assert first == TCPReceiverMessage(Wrap32(3), 5)
    assert (first == TCPReceiverMessage(Wrap32(4), 5)) is False
    assert (first == TCPReceiverMessage(Wrap32(3), 6)) is False