"""Platform detection, privilege and file layout.

Path helpers are pure functions of ``(name, root)``; callers pass the result
of :func:`is_root` evaluated at call time.
"""

import os
import sys
from pathlib import Path

from svckit.service.base import ServiceError

SYSTEMD_SYSTEM_DIR = Path("/etc/systemd/system")
SYSTEMD_VENDOR_DIR = Path("/usr/lib/systemd/system")
LAUNCHD_DAEMONS_DIR = Path("/Library/LaunchDaemons")
LAUNCHD_SYSTEM_LOG_DIR = Path("/Library/Logs")


class UnsupportedPlatformError(ServiceError):
    """Raised on platforms without a supported service manager (e.g. Windows)."""


def detect_platform() -> str:
    """Return 'macos' or 'linux'. Raises on anything else."""
    if sys.platform == "darwin":
        return "macos"
    elif sys.platform.startswith("linux"):
        return "linux"
    raise UnsupportedPlatformError(
        f"Service management is not supported on {sys.platform}."
    )


def is_root() -> bool:
    """Whether the current process runs with root privileges."""
    return os.geteuid() == 0


def systemd_unit_path(name: str, root: bool) -> Path:
    """Where the unit file for *name* is written."""
    if root:
        return SYSTEMD_SYSTEM_DIR / f"{name}.service"
    return Path.home() / ".config" / "systemd" / "user" / f"{name}.service"


def systemd_unit_candidates(name: str, root: bool) -> list[Path]:
    """Where the unit file for *name* may be read from, in lookup order."""
    if root:
        return [systemd_unit_path(name, root), SYSTEMD_VENDOR_DIR / f"{name}.service"]
    return [systemd_unit_path(name, root)]


def launchd_plist_path(name: str, root: bool) -> Path:
    """Where the property list for *name* is written."""
    if root:
        return LAUNCHD_DAEMONS_DIR / f"{name}.plist"
    return Path.home() / "Library" / "LaunchAgents" / f"{name}.plist"


def launchd_log_dir(name: str, root: bool) -> Path:
    """Default log directory for *name*."""
    if root:
        return LAUNCHD_SYSTEM_LOG_DIR / name
    return Path.home() / "Library" / "Logs" / name
