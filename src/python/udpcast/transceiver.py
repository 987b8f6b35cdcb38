import sys
from typing import Optional

from .config import SEND_INTERVAL, BroadcastInfo, ReceiveInfo
from .logger import ILogger
from .receiver import print_received, receive_message
from .sender import BroadcastSender


class BroadcastTransceiver(BroadcastSender):
    """
    Broadcast a numbered message, then block for one reply on the bound
    socket, then wait `interval`. The receive has no deadline unless
    `info_r.timeout` is set, so a cycle without a reply stalls here.
    """
    component = "Transceiver"

    def __init__(self, info: BroadcastInfo, info_r: ReceiveInfo, interval: float = SEND_INTERVAL,
                 logger: Optional[ILogger] = None, out=None):
        super().__init__(info, interval, logger)
        self.info_r = info_r
        self.out = out

    def cycle(self) -> str:
        self.send_once()
        print("Sended", file=self.out or sys.stdout, flush=True)
        text = receive_message(self.info_r.sock)
        print_received(text, self.out)
        return text
