import datetime
import sys
from enum import Enum

class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

class ILogger:
    def log(self, level: LogLevel, component: str, msg: str):
        pass

class ConsoleLogger(ILogger):
    """Writes to stderr; stdout belongs to the programs' own output."""
    def __init__(self, min_level: LogLevel = LogLevel.INFO, stream=None):
        self.min_level = min_level
        self.stream = stream

    def log(self, level: LogLevel, component: str, msg: str):
        if level.value < self.min_level.value:
            return
        ts = datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]
        print(f"[{ts}] [{level.name:5}] [{component}] {msg}", file=self.stream or sys.stderr)
