import io
import pytest
import socket
import sys
import os
from unittest.mock import MagicMock
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src', 'python')))

from udpcast.config import MAX_RECV_STRING, MulticastInfo
from udpcast.errors import SocketError
from udpcast.logger import ILogger
from udpcast.receiver import MulticastReceiver, receive_message


@pytest.fixture
def pair():
    """A bound receiving socket on loopback and a socket to send to it."""
    rx = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    rx.bind(("127.0.0.1", 0))
    rx.settimeout(2.0)
    tx = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    yield rx, tx, rx.getsockname()
    rx.close()
    tx.close()


def test_receive_hello(pair):
    rx, tx, addr = pair
    tx.sendto(b"hello", addr)
    assert receive_message(rx) == "hello"


def test_payload_of_exactly_255_bytes(pair):
    rx, tx, addr = pair
    payload = b"a" * MAX_RECV_STRING
    tx.sendto(payload, addr)
    assert receive_message(rx) == payload.decode()


def test_oversized_payload_is_truncated(pair):
    rx, tx, addr = pair
    tx.sendto(b"x" * 300, addr)
    text = receive_message(rx)
    assert text == "x" * MAX_RECV_STRING


def test_undecodable_bytes_are_replaced(pair):
    rx, tx, addr = pair
    tx.sendto(b"ok\xff", addr)
    assert receive_message(rx) == "ok�"


def test_receive_timeout_is_socket_error(pair):
    rx, _, _ = pair
    rx.settimeout(0.05)
    with pytest.raises(SocketError) as exc:
        receive_message(rx)
    assert "timed out" in str(exc.value)


def test_receive_failure_reports_line():
    s = MagicMock(spec=socket.socket)
    s.recvfrom.side_effect = OSError(9, "Bad file descriptor")
    with pytest.raises(SocketError, match=r"^\(line:\d+\) Bad file descriptor$"):
        receive_message(s)


def test_multicast_receiver_receives_once(pair):
    rx, tx, addr = pair
    tx.sendto(b"hello", addr)
    tx.sendto(b"second", addr)
    out = io.StringIO()
    info = MulticastInfo("239.1.1.1", addr[1], sock=rx)

    text = MulticastReceiver(info, ILogger(), out).receive_once()

    assert text == "hello"
    assert out.getvalue() == "Received: hello\n"
    # the second datagram is still queued
    assert rx.recvfrom(255)[0] == b"second"
