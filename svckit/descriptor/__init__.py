"""Service descriptors."""

from svckit.descriptor.loader import load_descriptor, save_descriptor
from svckit.descriptor.schema import LoggingSpec, LogTarget, ServiceSpec

__all__ = [
    "LogTarget",
    "LoggingSpec",
    "ServiceSpec",
    "load_descriptor",
    "save_descriptor",
]
