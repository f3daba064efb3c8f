"""Tests for platform cache directories and default log path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from filesink.errors import ConfigurationError
from filesink.paths import (
    DEFAULT_FILE_NAME,
    LinuxPaths,
    MacOSPaths,
    PlatformPaths,
    WindowsPaths,
    default_log_path,
    platform_paths,
)


class TestPlatformSelection:
    """platform_paths() picks an implementation from the platform string."""

    @pytest.mark.parametrize(
        "platform, expected",
        [
            ("darwin", MacOSPaths),
            ("win32", WindowsPaths),
            ("cygwin", WindowsPaths),
            ("linux", LinuxPaths),
            ("freebsd13", LinuxPaths),
        ],
    )
    def test_selection(self, platform, expected):
        assert isinstance(platform_paths(platform), expected)

    def test_default_uses_current_platform(self):
        assert isinstance(platform_paths(), PlatformPaths)


class TestCacheDirectories:
    def test_linux_is_var_cache(self):
        assert LinuxPaths().cache_directory() == Path("/var/cache")

    def test_macos_under_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert MacOSPaths().cache_directory() == tmp_path / "Library" / "Caches"

    def test_macos_without_resolvable_home(self, monkeypatch):
        pwd = pytest.importorskip("pwd")

        def no_such_user(uid):
            raise KeyError(uid)

        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.setattr(pwd, "getpwuid", no_such_user)
        assert MacOSPaths().cache_directory() is None
        with pytest.raises(ConfigurationError):
            default_log_path("x.log", MacOSPaths())

    def test_windows_local_app_data(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
        assert WindowsPaths().cache_directory() == tmp_path

    def test_windows_without_local_app_data(self, monkeypatch):
        monkeypatch.delenv("LOCALAPPDATA", raising=False)
        assert WindowsPaths().cache_directory() is None


class TestDefaultLogPath:
    def test_default_file_name(self):
        assert DEFAULT_FILE_NAME == "application.log"

    def test_joins_cache_dir(self, fake_paths, cache_dir):
        assert default_log_path("x.log", fake_paths) == cache_dir / "x.log"

    def test_default_name_used(self, fake_paths, cache_dir):
        assert default_log_path(paths=fake_paths) == cache_dir / "application.log"

    def test_no_cache_dir_raises(self, no_cache_paths):
        with pytest.raises(ConfigurationError, match="FILESINK_PATH"):
            default_log_path("x.log", no_cache_paths)

    @pytest.mark.parametrize("name", ["", "sub/x.log", ".", ".."])
    def test_rejects_non_bare_names(self, fake_paths, name):
        with pytest.raises(ConfigurationError):
            default_log_path(name, fake_paths)
