"""Tests for platform detection and path resolution."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from svckit.service.resolve import (
    UnsupportedPlatformError,
    detect_platform,
    is_root,
    launchd_log_dir,
    launchd_plist_path,
    systemd_unit_candidates,
    systemd_unit_path,
)


class TestDetectPlatform:
    def test_macos(self):
        with patch.object(sys, "platform", "darwin"):
            assert detect_platform() == "macos"

    def test_linux(self):
        with patch.object(sys, "platform", "linux"):
            assert detect_platform() == "linux"

    def test_windows_raises(self):
        with patch.object(sys, "platform", "win32"):
            with pytest.raises(UnsupportedPlatformError):
                detect_platform()


class TestIsRoot:
    def test_root(self):
        with patch("svckit.service.resolve.os.geteuid", return_value=0):
            assert is_root() is True

    def test_user(self):
        with patch("svckit.service.resolve.os.geteuid", return_value=501):
            assert is_root() is False


@pytest.fixture
def home(tmp_path):
    with patch("svckit.service.resolve.Path.home", return_value=tmp_path):
        yield tmp_path


class TestSystemdPaths:
    def test_root(self, home):
        assert systemd_unit_path("demo", True) == Path("/etc/systemd/system/demo.service")

    def test_user(self, home):
        assert systemd_unit_path("demo", False) == home / ".config" / "systemd" / "user" / "demo.service"

    def test_scopes_differ_and_are_stable(self, home):
        assert systemd_unit_path("demo", True) != systemd_unit_path("demo", False)
        assert systemd_unit_path("demo", False) == systemd_unit_path("demo", False)

    def test_root_candidates_include_vendor_dir(self, home):
        assert systemd_unit_candidates("demo", True) == [
            Path("/etc/systemd/system/demo.service"),
            Path("/usr/lib/systemd/system/demo.service"),
        ]

    def test_user_candidates(self, home):
        assert systemd_unit_candidates("demo", False) == [systemd_unit_path("demo", False)]


class TestLaunchdPaths:
    def test_root(self, home):
        assert launchd_plist_path("com.example.demo", True) == Path(
            "/Library/LaunchDaemons/com.example.demo.plist"
        )

    def test_user(self, home):
        assert launchd_plist_path("com.example.demo", False) == (
            home / "Library" / "LaunchAgents" / "com.example.demo.plist"
        )

    def test_log_dirs(self, home):
        assert launchd_log_dir("demo", True) == Path("/Library/Logs/demo")
        assert launchd_log_dir("demo", False) == home / "Library" / "Logs" / "demo"
