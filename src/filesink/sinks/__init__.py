"""Log sinks: strategy pattern for log line destinations."""

from filesink.sinks.base import LogSink
from filesink.sinks.file_sink import DEFAULT_MAX_SIZE_BYTES, FileSink

__all__ = ["LogSink", "FileSink", "DEFAULT_MAX_SIZE_BYTES"]
