"""
Runs a multicast receiver and a sender inside a single process, all on
the loopback interface. Useful to check a host's multicast setup before
trying the real programs across machines.

    python examples/loopback_demo.py [group] [port]
"""
import sys
import os
import threading
import time
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src', 'python'))

from udpcast import sockets
from udpcast.config import MulticastInfo
from udpcast.errors import UdpcastError
from udpcast.logger import ConsoleLogger, LogLevel
from udpcast.receiver import MulticastReceiver
from udpcast.sender import MulticastSender

M_IP = "224.0.0.3"
PORT = 30890
IFACE_IP = "127.0.0.1"

logger = ConsoleLogger(LogLevel.DEBUG)


def receiver(name, group, port, ready):
    info = MulticastInfo(group, port, timeout=5.0)
    try:
        with sockets.opened(info, sockets.init_multicast_receiver, logger):
            ready.set()
            MulticastReceiver(info, logger).receive_once()
    except UdpcastError as e:
        ready.set()
        logger.log(LogLevel.ERROR, name, str(e))


def main():
    group = sys.argv[1] if len(sys.argv) > 1 else M_IP
    port = int(sys.argv[2]) if len(sys.argv) > 2 else PORT

    ready = threading.Event()
    t = threading.Thread(target=receiver, args=("R1", group, port, ready))
    t.start()
    ready.wait(2.0)

    time.sleep(0.5)
    info = MulticastInfo(group, port, msg=b"HELLO MULTICAST", iface=IFACE_IP)
    try:
        with sockets.opened(info, sockets.init_multicast_sender, logger):
            MulticastSender(info, logger=logger).send_once()
    except UdpcastError as e:
        print(f"Error: {e}", file=sys.stderr)
        return -1

    t.join()
    return 0


if __name__ == "__main__":
    sys.exit(main())
