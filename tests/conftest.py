"""Shared fixtures: isolated env, logging state reset, fake platform paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from filesink.logging import ROOT_LOGGER_NAME, shutdown_logging


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop FILESINK_* env vars so host settings never leak into tests."""
    for key in list(os.environ):
        if key.startswith("FILESINK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Detach managed handlers and restore the package logger level."""
    yield
    shutdown_logging()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.NOTSET)


class FakePaths:
    """PlatformPaths returning a fixed directory (or None)."""

    def __init__(self, directory: Path | None) -> None:
        self.directory = directory

    def cache_directory(self) -> Path | None:
        return self.directory


@pytest.fixture()
def cache_dir(tmp_path):
    d = tmp_path / "cache"
    d.mkdir()
    return d


@pytest.fixture()
def fake_paths(cache_dir):
    return FakePaths(cache_dir)


@pytest.fixture()
def no_cache_paths():
    return FakePaths(None)
