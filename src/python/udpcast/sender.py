import os
import threading
from typing import Optional

from .config import SEND_INTERVAL, BroadcastInfo, MulticastInfo
from .errors import ShortSendError
from .logger import ConsoleLogger, ILogger, LogLevel


def send_payload(info, payload: bytes) -> int:
    """Sends `payload` to `info.addr`; any count other than len(payload) is a ShortSendError."""
    try:
        sent = info.sock.sendto(payload, info.addr)
    except OSError as e:
        raise ShortSendError(0, len(payload), e.strerror or str(e)) from e
    if sent != len(payload):
        raise ShortSendError(sent, len(payload), os.strerror(0))
    return sent


class PeriodicSender:
    """
    Send, then wait `interval` seconds, until `stop` is set or a send fails.
    Subclasses choose the payload of each cycle.
    """
    component = "Sender"

    def __init__(self, info, interval: float = SEND_INTERVAL, logger: Optional[ILogger] = None):
        self.info = info
        self.interval = interval
        self.logger = logger or ConsoleLogger()

    def next_message(self) -> bytes:
        raise NotImplementedError()

    def send_once(self) -> bytes:
        payload = self.next_message()
        send_payload(self.info, payload)
        self.logger.log(LogLevel.DEBUG, self.component, f"Sent {len(payload)} bytes to {self.info.addr[0]}:{self.info.addr[1]}")
        return payload

    def cycle(self):
        return self.send_once()

    def run(self, stop: Optional[threading.Event] = None):
        stop = stop or threading.Event()
        while not stop.is_set():
            self.cycle()
            stop.wait(self.interval)
        self.logger.log(LogLevel.INFO, self.component, "Stopped")


class MulticastSender(PeriodicSender):
    component = "MulticastSender"

    def __init__(self, info: MulticastInfo, interval: float = SEND_INTERVAL, logger: Optional[ILogger] = None):
        super().__init__(info, interval, logger)

    def next_message(self) -> bytes:
        return self.info.msg


class BroadcastSender(PeriodicSender):
    component = "BroadcastSender"

    def __init__(self, info: BroadcastInfo, interval: float = SEND_INTERVAL, logger: Optional[ILogger] = None):
        super().__init__(info, interval, logger)

    def next_message(self) -> bytes:
        return self.info.msg + b" " + str(self.info.count).encode()

    def send_once(self) -> bytes:
        payload = super().send_once()
        self.info.count += 1
        return payload
