"""filesink: append formatted log lines to a size-capped file.

Public API:
    FileSink              The file target (create/rotate at construction, append + fsync on write)
    LogSink               Protocol every sink satisfies: write(line) -> None
    SinkConfig            YAML + env var configuration
    default_log_path()    file name -> platform cache directory path
    add_file_target()     attach a FileSink to a stdlib logger
"""

from filesink.config import SinkConfig
from filesink.errors import ConfigurationError, FileSinkError
from filesink.logging import (
    FileSinkDestination,
    FileSinkHandler,
    LogDestination,
    add_file_target,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from filesink.paths import (
    DEFAULT_FILE_NAME,
    LinuxPaths,
    MacOSPaths,
    PlatformPaths,
    WindowsPaths,
    default_log_path,
    platform_paths,
)
from filesink.sinks import DEFAULT_MAX_SIZE_BYTES, FileSink, LogSink

__all__ = [
    # Sinks
    "FileSink",
    "LogSink",
    "DEFAULT_MAX_SIZE_BYTES",
    # Paths
    "DEFAULT_FILE_NAME",
    "PlatformPaths",
    "MacOSPaths",
    "LinuxPaths",
    "WindowsPaths",
    "platform_paths",
    "default_log_path",
    # Config
    "SinkConfig",
    # Errors
    "FileSinkError",
    "ConfigurationError",
    # Logging
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "LogDestination",
    "FileSinkDestination",
    "FileSinkHandler",
    "add_file_target",
]
