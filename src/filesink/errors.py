"""Error types raised by filesink.

Construction-time filesystem failures are not wrapped: they surface as the
builtin OSError so callers can inspect errno and filename directly.
"""

from __future__ import annotations


class FileSinkError(Exception):
    """Base class for filesink errors."""


class ConfigurationError(FileSinkError, ValueError):
    """No usable log file path or an invalid setting."""
