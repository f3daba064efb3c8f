"""Platform cache directories and default log path resolution.

Each platform gets a small PlatformPaths implementation; platform_paths()
picks one from sys.platform. default_log_path() joins the default file name
onto the platform's cache directory.

Locations:
    darwin          ~/Library/Caches
    win32, cygwin   %LOCALAPPDATA%
    everything else /var/cache
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Protocol, runtime_checkable

from filesink.errors import ConfigurationError

DEFAULT_FILE_NAME = "application.log"


@runtime_checkable
class PlatformPaths(Protocol):
    """Capability: where this platform keeps per-user cache files."""

    def cache_directory(self) -> Path | None: ...


class MacOSPaths:
    """~/Library/Caches for the current user."""

    def cache_directory(self) -> Path | None:
        try:
            home = Path("~").expanduser()
        except RuntimeError:
            return None
        return home / "Library" / "Caches"


class LinuxPaths:
    """System-wide /var/cache."""

    def cache_directory(self) -> Path | None:
        return Path("/var/cache")


class WindowsPaths:
    """%LOCALAPPDATA%, or None when the variable is not set."""

    def cache_directory(self) -> Path | None:
        local = os.environ.get("LOCALAPPDATA")
        if not local:
            return None
        return Path(local)


_PLATFORMS: dict[str, type] = {
    "darwin": MacOSPaths,
    "win32": WindowsPaths,
    "cygwin": WindowsPaths,
}


def platform_paths(platform: str | None = None) -> PlatformPaths:
    """Return the PlatformPaths for ``platform`` (defaults to sys.platform)."""
    cls = _PLATFORMS.get(platform or sys.platform, LinuxPaths)
    return cls()


def default_log_path(
    file_name: str = DEFAULT_FILE_NAME,
    paths: PlatformPaths | None = None,
) -> Path:
    """Resolve ``file_name`` against the platform cache directory.

    Raises ConfigurationError if the name is not a bare file name or the
    platform has no cache directory to offer.
    """
    if not file_name or os.sep in file_name or (os.altsep and os.altsep in file_name):
        raise ConfigurationError(
            f"Log file name must be a bare file name, got {file_name!r}"
        )
    if file_name in (".", ".."):
        raise ConfigurationError(f"Log file name {file_name!r} is not a file")

    directory = (paths or platform_paths()).cache_directory()
    if directory is None:
        raise ConfigurationError(
            "No cache directory available on this platform. "
            "Pass an explicit path or set FILESINK_PATH."
        )
    return directory / file_name
