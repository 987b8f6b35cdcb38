import os
from typing import Optional

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

class UdpcastError(Exception):
    """Base class; str(err) is the text printed after 'Error: '."""


class UsageError(UdpcastError):
    pass


class SocketError(UdpcastError):
    """A socket call failed. Reported as '(line:N) <strerror>'."""
    def __init__(self, line: int, strerror: str):
        self.line = line
        self.strerror = strerror
        super().__init__(f"(line:{line}) {strerror}")

    @classmethod
    def from_os_error(cls, exc: OSError) -> 'SocketError':
        # Line of the innermost udpcast frame, i.e. the call that failed
        line = 0
        tb = exc.__traceback__
        while tb is not None:
            if os.path.dirname(os.path.abspath(tb.tb_frame.f_code.co_filename)) == _PACKAGE_DIR:
                line = tb.tb_lineno
            tb = tb.tb_next
        return cls(line, exc.strerror or str(exc))


class ShortSendError(UdpcastError):
    def __init__(self, sent: int, expected: int, strerror: Optional[str] = None):
        self.sent = sent
        self.expected = expected
        self.strerror = strerror if strerror is not None else os.strerror(0)
        super().__init__(f"invalid msg is sent.({self.strerror})")
