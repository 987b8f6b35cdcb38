"""
Entry points of the four programs.

Each main() returns the process status: 0 on a clean exit, -1 after printing
`Error: <message>` to stderr.
"""
import contextlib
import signal
import sys
import threading
from typing import List, Optional

from . import config, sockets
from .errors import UdpcastError
from .logger import ConsoleLogger, LogLevel
from .receiver import MulticastReceiver
from .sender import BroadcastSender, MulticastSender
from .transceiver import BroadcastTransceiver


def _make_logger(args) -> ConsoleLogger:
    return ConsoleLogger(LogLevel.DEBUG if args.verbose else LogLevel.INFO)


def _terminate(signum, frame):
    # Must raise: a recvfrom without timeout resumes after a handler returns
    raise KeyboardInterrupt()


@contextlib.contextmanager
def _interrupt_on_sigterm():
    """SIGTERM takes the same path as Ctrl-C: sockets closed, exit 0."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def _report(e: Exception) -> int:
    print(f"Error: {e}", file=sys.stderr)
    return -1


def mcast_recv_main(argv: Optional[List[str]] = None) -> int:
    try:
        info, args = config.parse_mcast_recv(sys.argv[1:] if argv is None else argv)
        logger = _make_logger(args)
        with _interrupt_on_sigterm(), sockets.opened(info, sockets.init_multicast_receiver, logger):
            MulticastReceiver(info, logger).receive_once()
    except UdpcastError as e:
        return _report(e)
    except KeyboardInterrupt:
        return 0
    return 0


def mcast_send_main(argv: Optional[List[str]] = None, stop: Optional[threading.Event] = None) -> int:
    stop = stop or threading.Event()
    try:
        info, args = config.parse_mcast_send(sys.argv[1:] if argv is None else argv)
        logger = _make_logger(args)
        with _interrupt_on_sigterm(), sockets.opened(info, sockets.init_multicast_sender, logger):
            logger.log(LogLevel.INFO, "Main", f"Sending to {info.ipaddr}:{info.port} every {config.SEND_INTERVAL:g}s")
            MulticastSender(info, config.SEND_INTERVAL, logger).run(stop)
    except UdpcastError as e:
        return _report(e)
    except KeyboardInterrupt:
        return 0
    return 0


def bcast_send_main(argv: Optional[List[str]] = None, stop: Optional[threading.Event] = None) -> int:
    stop = stop or threading.Event()
    try:
        info, args = config.parse_bcast_send(sys.argv[1:] if argv is None else argv)
        logger = _make_logger(args)
        with _interrupt_on_sigterm(), sockets.opened(info, sockets.init_broadcast_sender, logger):
            logger.log(LogLevel.INFO, "Main", f"Broadcasting to {info.ipaddr}:{info.port} every {config.SEND_INTERVAL:g}s")
            BroadcastSender(info, config.SEND_INTERVAL, logger).run(stop)
    except UdpcastError as e:
        return _report(e)
    except KeyboardInterrupt:
        return 0
    return 0


def bcast_sendrecv_main(argv: Optional[List[str]] = None, stop: Optional[threading.Event] = None) -> int:
    stop = stop or threading.Event()
    try:
        info, info_r, args = config.parse_bcast_sendrecv(sys.argv[1:] if argv is None else argv)
        logger = _make_logger(args)
        with _interrupt_on_sigterm(), \
                sockets.opened(info, sockets.init_broadcast_sender, logger), \
                sockets.opened(info_r, sockets.init_receiver, logger):
            BroadcastTransceiver(info, info_r, config.SEND_INTERVAL, logger).run(stop)
    except UdpcastError as e:
        return _report(e)
    except KeyboardInterrupt:
        return 0
    return 0
