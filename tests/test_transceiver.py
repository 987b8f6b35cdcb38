import io
import pytest
import socket
import threading
import sys
import os
from unittest.mock import MagicMock
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src', 'python')))

from udpcast import sockets
from udpcast.config import BroadcastInfo, ReceiveInfo
from udpcast.errors import ShortSendError
from udpcast.logger import ILogger
from udpcast.transceiver import BroadcastTransceiver


def test_short_send_aborts_before_receive():
    tx = MagicMock(spec=socket.socket)
    tx.sendto.return_value = 0
    rx = MagicMock(spec=socket.socket)
    info = BroadcastInfo("255.255.255.255", 6000, b"ping", sock=tx, addr=("255.255.255.255", 6000))
    info_r = ReceiveInfo(6000, sock=rx)
    out = io.StringIO()

    with pytest.raises(ShortSendError):
        BroadcastTransceiver(info, info_r, interval=0, logger=ILogger(), out=out).run(threading.Event())

    rx.recvfrom.assert_not_called()
    assert out.getvalue() == ""
    assert info.count == 0


def test_cycle_order_send_then_receive():
    calls = []
    tx = MagicMock(spec=socket.socket)
    tx.sendto.side_effect = lambda payload, addr: calls.append(("send", payload)) or len(payload)
    rx = MagicMock(spec=socket.socket)
    rx.recvfrom.side_effect = lambda n: calls.append(("recv", n)) or (b"pong", ("10.0.0.2", 6000))
    info = BroadcastInfo("255.255.255.255", 6000, b"ping", sock=tx, addr=("255.255.255.255", 6000))
    out = io.StringIO()
    t = BroadcastTransceiver(info, ReceiveInfo(6000, sock=rx), interval=0, logger=ILogger(), out=out)

    t.cycle()
    t.cycle()

    assert calls == [("send", b"ping 0"), ("recv", 255), ("send", b"ping 1"), ("recv", 255)]
    assert out.getvalue() == "Sended\nReceived: pong\nSended\nReceived: pong\n"


def test_run_until_stopped_over_loopback():
    info_r = ReceiveInfo(0, timeout=2.0)
    with sockets.opened(info_r, sockets.init_receiver, ILogger()):
        port = info_r.sock.getsockname()[1]
        info = BroadcastInfo("127.0.0.1", port, b"ping")
        stop = threading.Event()
        out = io.StringIO()

        class StopAfterTwo(BroadcastTransceiver):
            def cycle(self):
                text = super().cycle()
                if self.info.count == 2:
                    stop.set()
                return text

        with sockets.opened(info, sockets.init_broadcast_sender, ILogger()):
            # the receiver is bound to the same port, so it hears its own datagrams
            StopAfterTwo(info, info_r, interval=0, logger=ILogger(), out=out).run(stop)

        assert info.sock is None
    assert info_r.sock is None
    assert out.getvalue() == "Sended\nReceived: ping 0\nSended\nReceived: ping 1\n"
