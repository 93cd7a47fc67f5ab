"""Service drivers: factory and re-exports."""

from svckit.config import Settings
from svckit.descriptor.schema import ServiceSpec
from svckit.service.base import (
    CommandError,
    Service,
    ServiceConfigError,
    ServiceDoesNotExistError,
    ServiceError,
    ServiceInfo,
)
from svckit.service.resolve import UnsupportedPlatformError, detect_platform

__all__ = [
    "CommandError",
    "Service",
    "ServiceConfigError",
    "ServiceDoesNotExistError",
    "ServiceError",
    "ServiceInfo",
    "UnsupportedPlatformError",
    "from_descriptor",
    "from_name",
    "from_template",
    "get_driver_class",
]


def get_driver_class(platform: str | None = None) -> type[Service]:
    """Return the driver class for *platform* (default: this host)."""
    platform = platform or detect_platform()
    if platform == "macos":
        from svckit.service.launchd import LaunchdService
        return LaunchdService
    elif platform == "linux":
        from svckit.service.systemd import SystemdService
        return SystemdService
    raise UnsupportedPlatformError(f"No service driver for platform '{platform}'")


def from_descriptor(spec: ServiceSpec, settings: Settings | None = None) -> Service:
    """Driver that installs *spec* as given."""
    return get_driver_class().from_spec(spec, settings=settings)


def from_name(name: str, settings: Settings | None = None) -> Service:
    """Driver for an already installed service. Raises ServiceDoesNotExistError."""
    return get_driver_class().from_name(name, settings=settings)


def from_template(name: str, template: str | bytes, settings: Settings | None = None) -> Service:
    """Driver that installs the native *template* verbatim."""
    return get_driver_class().from_template(name, template, settings=settings)
