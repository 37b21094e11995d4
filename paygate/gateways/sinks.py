"""Log sinks that receive formatted gateway log lines."""

import logging
import sys
import threading
from typing import TextIO


class StreamSink:
    """Write one line per message to a text stream; writes are serialized."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def __call__(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(message + "\n")
            stream.flush()


class LoggingSink:
    """Forward gateway log lines to a python logger (handlers serialize writes)."""

    def __init__(self, name: str = "paygate.transactions", level: int = logging.INFO) -> None:
        self._logger = logging.getLogger(name)
        self._level = level

    def __call__(self, message: str) -> None:
        self._logger.log(self._level, message)
