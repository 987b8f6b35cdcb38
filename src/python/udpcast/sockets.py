"""
Socket setup for the four programs.

Every init_* function fills in `info.sock` and `info.addr` or raises
SocketError naming the line of the socket call that failed. Use `opened()`
to get the matching finalize() on every exit path.
"""
import contextlib
import socket
import struct
from typing import Callable, Optional

from .config import ANY_IFACE, BroadcastInfo, MulticastInfo, ReceiveInfo
from .errors import SocketError
from .logger import ConsoleLogger, ILogger, LogLevel


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)


def init_multicast_receiver(info: MulticastInfo, logger: Optional[ILogger] = None):
    logger = logger or ConsoleLogger()
    try:
        info.sock = _udp_socket()
        info.addr = (ANY_IFACE, info.port)
        info.sock.bind(("", info.port))
        mreq = struct.pack("4s4s", socket.inet_aton(info.ipaddr), socket.inet_aton(ANY_IFACE))
        info.sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, mreq)
        info.sock.settimeout(info.timeout)
    except OSError as e:
        raise SocketError.from_os_error(e) from e
    logger.log(LogLevel.DEBUG, "Socket", f"Joined {info.ipaddr} on ANY:{info.port}")


def init_multicast_sender(info: MulticastInfo, logger: Optional[ILogger] = None):
    logger = logger or ConsoleLogger()
    try:
        info.sock = _udp_socket()
        # Multi-homed hosts pick an arbitrary interface unless this is set
        info.sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(info.iface))
        info.sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, info.ttl)
    except OSError as e:
        raise SocketError.from_os_error(e) from e
    info.addr = (info.ipaddr, info.port)
    logger.log(LogLevel.DEBUG, "Socket", f"Multicast to {info.ipaddr}:{info.port} via {info.iface} (ttl={info.ttl})")


def init_broadcast_sender(info: BroadcastInfo, logger: Optional[ILogger] = None):
    logger = logger or ConsoleLogger()
    try:
        info.sock = _udp_socket()
        info.sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, int(info.permission))
    except OSError as e:
        raise SocketError.from_os_error(e) from e
    info.addr = (info.ipaddr, info.port)
    logger.log(LogLevel.DEBUG, "Socket", f"Broadcast to {info.ipaddr}:{info.port}")


def init_receiver(info: ReceiveInfo, logger: Optional[ILogger] = None):
    logger = logger or ConsoleLogger()
    try:
        info.sock = _udp_socket()
        info.addr = (ANY_IFACE, info.port)
        info.sock.bind(("", info.port))
        info.sock.settimeout(info.timeout)
    except OSError as e:
        raise SocketError.from_os_error(e) from e
    logger.log(LogLevel.DEBUG, "Socket", f"Bound ANY:{info.sock.getsockname()[1]}")


def finalize(info):
    if info.sock is not None:
        info.sock.close()
        info.sock = None


@contextlib.contextmanager
def opened(info, init: Callable, logger: Optional[ILogger] = None):
    """Runs `init(info)` and closes the socket when the block exits, however it exits."""
    try:
        init(info, logger)
        yield info
    finally:
        finalize(info)
