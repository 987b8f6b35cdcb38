import socket
import sys
from typing import Optional

from .config import MAX_RECV_STRING, MulticastInfo
from .errors import SocketError
from .logger import ConsoleLogger, ILogger, LogLevel


def receive_message(sock: socket.socket) -> str:
    """
    Blocks for one datagram and returns its payload as text.
    Anything past MAX_RECV_STRING bytes is dropped by the socket layer.
    """
    try:
        data, _ = sock.recvfrom(MAX_RECV_STRING)
    except OSError as e:
        raise SocketError.from_os_error(e) from e
    return data[:MAX_RECV_STRING].decode(errors="replace")


def print_received(text: str, out=None):
    print(f"Received: {text}", file=out or sys.stdout, flush=True)


class MulticastReceiver:
    def __init__(self, info: MulticastInfo, logger: Optional[ILogger] = None, out=None):
        self.info = info
        self.logger = logger or ConsoleLogger()
        self.out = out

    def receive_once(self) -> str:
        self.logger.log(LogLevel.INFO, "Receiver", f"Waiting on {self.info.ipaddr}:{self.info.port}")
        text = receive_message(self.info.sock)
        print_received(text, self.out)
        return text
