"""Native configuration codecs, one per engine."""

from dataclasses import dataclass
from typing import Callable

from svckit.codecs import launchd, systemd
from svckit.descriptor.schema import ServiceSpec


@dataclass(frozen=True)
class Codec:
    """Pure translation between a descriptor and an engine's file format."""

    engine: str
    extension: str
    encode: Callable[[ServiceSpec], str]
    decode: Callable[[str | bytes, str], ServiceSpec]


SYSTEMD = Codec("systemd", systemd.EXTENSION, systemd.encode, systemd.decode)
LAUNCHD = Codec("launchd", launchd.EXTENSION, launchd.encode, launchd.decode)

CODECS = {codec.engine: codec for codec in (SYSTEMD, LAUNCHD)}


def get_codec(engine: str) -> Codec:
    """Return the codec registered for *engine* ('systemd' or 'launchd')."""
    try:
        return CODECS[engine]
    except KeyError:
        raise ValueError(f"Unknown engine '{engine}'. Available: {', '.join(CODECS)}") from None


__all__ = ["Codec", "CODECS", "LAUNCHD", "SYSTEMD", "get_codec"]
