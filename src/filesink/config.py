"""Sink configuration: YAML file + env var overrides.

Priority: env var > YAML file > default.
Env vars use the FILESINK_{FIELD_NAME} convention (e.g. FILESINK_MAX_SIZE_BYTES).
YAML file default: ~/.filesink/config.yaml

    path: /var/log/myapp/app.log      # explicit file, wins over file_name
    file_name: application.log        # resolved in the platform cache dir
    max_size_bytes: 10485760
    log_level: WARNING                # filesink's own diagnostics
    log_format: console               # console | json
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from filesink.errors import ConfigurationError
from filesink.paths import DEFAULT_FILE_NAME, PlatformPaths, default_log_path
from filesink.sinks.file_sink import DEFAULT_MAX_SIZE_BYTES, FileSink

ENV_PREFIX = "FILESINK_"
_DEFAULT_PATH = Path("~/.filesink/config.yaml").expanduser()


def _coerce_int(name: str, raw: Any) -> int:
    """Parse an integer setting with a helpful error on bad input."""
    if isinstance(raw, bool):
        raise ConfigurationError(f"{name}={raw!r} is not a valid integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as err:
        raise ConfigurationError(f"{name}={raw!r} is not a valid integer") from err


@dataclass
class SinkConfig:
    """Where the log file lives and when it rotates."""

    path: str | None = None
    file_name: str = DEFAULT_FILE_NAME
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES
    log_level: str = "WARNING"
    log_format: str = "console"  # "console" | "json"

    @classmethod
    def load(cls, path: Path | None = None) -> SinkConfig:
        """Load settings from YAML file, then override with env vars."""
        file_path = path or _DEFAULT_PATH
        values: dict[str, Any] = {}

        if file_path.exists():
            try:
                raw = yaml.safe_load(file_path.read_text()) or {}
            except yaml.YAMLError as err:
                raise ConfigurationError(f"Invalid YAML in {file_path}: {err}") from err
            if isinstance(raw, dict):
                known = {f.name for f in fields(cls)}
                values.update({k: v for k, v in raw.items() if k in known})

        for f in fields(cls):
            env_key = f"{ENV_PREFIX}{f.name.upper()}"
            if env_key in os.environ:
                values[f.name] = os.environ[env_key]

        if "max_size_bytes" in values:
            values["max_size_bytes"] = _coerce_int(
                "max_size_bytes", values["max_size_bytes"]
            )
        for key in ("path", "file_name", "log_level", "log_format"):
            if values.get(key) is not None:
                values[key] = str(values[key])
        if values.get("path") == "":
            values["path"] = None

        return cls(**values)

    def resolve_path(self, paths: PlatformPaths | None = None) -> Path:
        """Explicit path if set, else file_name in the platform cache dir."""
        if self.path:
            return Path(self.path).expanduser()
        return default_log_path(self.file_name, paths)

    def create_sink(self, paths: PlatformPaths | None = None, **kwargs: Any) -> FileSink:
        """Construct a FileSink from this configuration."""
        return FileSink(
            self.resolve_path(paths),
            max_size_bytes=self.max_size_bytes,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
