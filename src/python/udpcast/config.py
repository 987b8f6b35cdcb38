import argparse
import ipaddress
import os
import socket
from dataclasses import dataclass
from typing import List, Optional, Tuple

import psutil

from .errors import UsageError

SEND_INTERVAL = 5.0
MULTICAST_TTL = 1   # hop count
MAX_RECV_STRING = 255
ANY_IFACE = "0.0.0.0"
MSG_EPILOG = "A message that starts with '-' must follow '--', e.g. 10.0.0.255 6000 -- -ping"


@dataclass
class MulticastInfo:
    ipaddr: str
    port: int
    msg: bytes = b""
    ttl: int = MULTICAST_TTL
    iface: str = ANY_IFACE
    timeout: Optional[float] = None
    sock: Optional[socket.socket] = None
    addr: Optional[Tuple[str, int]] = None

    @property
    def msg_len(self) -> int:
        return len(self.msg)


@dataclass
class BroadcastInfo:
    ipaddr: str
    port: int
    msg: bytes
    permission: bool = True
    count: int = 0
    sock: Optional[socket.socket] = None
    addr: Optional[Tuple[str, int]] = None

    @property
    def msg_len(self) -> int:
        return len(self.msg)


@dataclass
class ReceiveInfo:
    port: int
    timeout: Optional[float] = None
    sock: Optional[socket.socket] = None
    addr: Tuple[str, int] = (ANY_IFACE, 0)


class ArgumentParser(argparse.ArgumentParser):
    """argparse that raises UsageError instead of exiting with status 2."""
    def error(self, message):
        raise UsageError(f"{self.format_usage().strip()} ({message})")


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port '{value}'")
    if not 0 <= port <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port out of range '{value}'")
    return port


def _timeout(value: str) -> float:
    try:
        t = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout '{value}'")
    if t <= 0:
        raise argparse.ArgumentTypeError("timeout must be positive")
    return t


def resolve_interface(iface: str) -> str:
    """
    Returns the IPv4 address to use as the outbound multicast interface.
    `iface` is either an IPv4 address or an interface name such as 'eth0'.
    """
    try:
        return str(ipaddress.IPv4Address(iface))
    except ipaddress.AddressValueError:
        pass
    addrs = psutil.net_if_addrs()
    if iface not in addrs:
        raise UsageError(f"unknown interface '{iface}' (available: {', '.join(sorted(addrs))})")
    for addr in addrs[iface]:
        if addr.family == socket.AF_INET:
            return addr.address
    raise UsageError(f"interface '{iface}' has no IPv4 address")


def _base_parser(prog: str, description: str, ip_help: str) -> ArgumentParser:
    p = ArgumentParser(prog=prog, description=description, epilog=MSG_EPILOG)
    p.add_argument("ipaddr", help=ip_help)
    p.add_argument("port", type=_port, help="UDP port")
    p.add_argument("-v", "--verbose", action="store_true", help="Log socket setup and every send")
    return p


def parse_mcast_recv(argv: List[str], prog: str = "udpcast-mrecv"):
    p = _base_parser(prog, "Receive one multicast datagram and print it.", "Multicast group address")
    p.add_argument("--timeout", type=_timeout, default=None, help="Give up waiting after SECONDS")
    args = p.parse_args(argv)
    return MulticastInfo(ipaddr=args.ipaddr, port=args.port, timeout=args.timeout), args


def parse_mcast_send(argv: List[str], prog: str = "udpcast-msend"):
    p = _base_parser(prog, "Send a message to a multicast group every 5 seconds.", "Multicast group address")
    p.add_argument("msg", help="Message to send")
    p.add_argument("--iface", default=ANY_IFACE, help="Outbound interface (IPv4 address or name)")
    args = p.parse_args(argv)
    info = MulticastInfo(ipaddr=args.ipaddr, port=args.port, msg=os.fsencode(args.msg),
                         iface=resolve_interface(args.iface))
    return info, args


def parse_bcast_send(argv: List[str], prog: str = "udpcast-bsend"):
    p = _base_parser(prog, "Send a numbered message to a broadcast address every 5 seconds.", "Broadcast address")
    p.add_argument("msg", help="Message to send")
    args = p.parse_args(argv)
    return BroadcastInfo(ipaddr=args.ipaddr, port=args.port, msg=os.fsencode(args.msg)), args


def parse_bcast_sendrecv(argv: List[str], prog: str = "udpcast-bsendrecv"):
    p = _base_parser(prog, "Broadcast a numbered message and wait for a reply, every 5 seconds.", "Broadcast address")
    p.add_argument("msg", help="Message to send")
    p.add_argument("--timeout", type=_timeout, default=None, help="Give up waiting for a reply after SECONDS")
    args = p.parse_args(argv)
    info = BroadcastInfo(ipaddr=args.ipaddr, port=args.port, msg=os.fsencode(args.msg))
    info_r = ReceiveInfo(port=args.port, timeout=args.timeout)
    return info, info_r, args
