"""File sink: append formatted log lines to a file, rotating at construction.

Lifecycle:
    construct   create the file if missing; if it is already at or over
                max_size_bytes, delete it and start an empty one
    write       lazily open one append handle, write line + "\\n" as UTF-8,
                flush and fsync before returning
    close       release the handle (also on context-manager exit)

Rotation is decided once, at construction, before any handle exists. A
long-running process keeps appending past the threshold until a new sink
is constructed for the same path.

Writes are best-effort. Encoding, open, write and sync failures are dropped
without raising; they are counted in ``failure_count`` and passed to the
optional ``on_error`` hook. Nothing on the write path logs, so a sink wired
into the logging system cannot recurse into itself.
"""

from __future__ import annotations

import errno
import os
import threading
from pathlib import Path
from typing import BinaryIO, Callable

from filesink.errors import ConfigurationError
from filesink.logging import get_logger
from filesink.paths import DEFAULT_FILE_NAME, PlatformPaths, default_log_path

DEFAULT_MAX_SIZE_BYTES = 10_485_760  # 10 MiB
ENCODING = "utf-8"

logger = get_logger(__name__)


def _validate_max_size(max_size_bytes: int) -> int:
    if isinstance(max_size_bytes, bool) or not isinstance(max_size_bytes, int):
        raise ConfigurationError(
            f"max_size_bytes must be an int, got {type(max_size_bytes).__name__}"
        )
    if max_size_bytes <= 0:
        raise ConfigurationError(f"max_size_bytes must be positive, got {max_size_bytes}")
    return max_size_bytes


class FileSink:
    """Append-only log file with a size-triggered rotation at construction.

    Thread-safe: open-if-needed, append and sync run under one lock, so
    concurrent writers never open a second handle or split a line.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        self._max_size_bytes = _validate_max_size(max_size_bytes)
        self._path = Path(path).expanduser().absolute()
        self._on_error = on_error
        self._handle: BinaryIO | None = None
        self._lock = threading.Lock()
        self._failures = 0
        self._reporting = threading.local()
        self._rotated = False

        self._prepare_file()

    @classmethod
    def from_file_name(
        cls,
        file_name: str = DEFAULT_FILE_NAME,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        platform_paths: PlatformPaths | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> FileSink:
        """Build a sink for ``file_name`` inside the platform cache directory."""
        path = default_log_path(file_name, platform_paths)
        return cls(path, max_size_bytes=max_size_bytes, on_error=on_error)

    # ------------------------------------------------------------------
    # Construction-time file lifecycle
    # ------------------------------------------------------------------

    def _prepare_file(self) -> None:
        """Create or rotate the file. OSError propagates to the constructor."""
        path = self._path
        if not path.exists():
            path.touch()
            logger.debug("sink.created", path=str(path))
            return

        if path.is_dir():
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))

        size = path.stat().st_size
        if size >= self._max_size_bytes:
            path.unlink()
            path.touch()
            self._rotated = True
            logger.info(
                "sink.rotated",
                path=str(path),
                size_bytes=size,
                max_size_bytes=self._max_size_bytes,
            )
        else:
            logger.debug("sink.reused", path=str(path), size_bytes=size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    @property
    def failure_count(self) -> int:
        """Writes dropped since construction."""
        return self._failures

    @property
    def rotated(self) -> bool:
        """True if construction discarded an oversized file."""
        return self._rotated

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def write(self, line: str) -> None:
        """Append ``line`` plus a newline and sync it to disk. Never raises."""
        try:
            data = (line + "\n").encode(ENCODING)
        except (UnicodeEncodeError, TypeError) as exc:
            self._report(exc)
            return

        with self._lock:
            error = self._append_locked(data)
        if error is not None:
            self._report(error)

    def _append_locked(self, data: bytes) -> BaseException | None:
        """Write ``data`` through the shared handle. Must hold _lock."""
        try:
            handle = self._acquire_handle()
        except OSError as exc:
            return exc
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except (OSError, ValueError) as exc:
            self._discard_handle()
            return exc
        return None

    def _acquire_handle(self) -> BinaryIO:
        """Return the open handle, opening it at end of file if needed.

        The file is never created here: if it vanished after construction,
        the open fails and the write is dropped.
        """
        if self._handle is None:
            fd = os.open(self._path, os.O_WRONLY | os.O_APPEND)
            try:
                self._handle = os.fdopen(fd, "ab")
            except Exception:
                os.close(fd)
                raise
        return self._handle

    def _discard_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError:
            pass  # handle is already unusable; the write failure gets reported

    def _report(self, exc: BaseException) -> None:
        """Count a dropped write and pass it to on_error.

        Writes the hook makes to this sink are best-effort too: if they fail
        they are dropped without being counted again or re-entering the hook.
        """
        if getattr(self._reporting, "active", False):
            return
        with self._lock:
            self._failures += 1
        if self._on_error is None:
            return
        self._reporting.active = True
        try:
            self._on_error(exc)
        except Exception:
            pass  # the hook must not make write() fallible
        finally:
            self._reporting.active = False

    # ------------------------------------------------------------------
    # Disposal
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the handle if open. Safe to call more than once."""
        with self._lock:
            handle, self._handle = self._handle, None
            if handle is not None:
                handle.close()

    def __enter__(self) -> FileSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileSink(path={str(self._path)!r}, max_size_bytes={self._max_size_bytes})"
