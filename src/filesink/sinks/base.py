"""LogSink protocol: strategy pattern for log line destinations."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Where fully formatted log lines get written."""

    def write(self, line: str) -> None: ...
