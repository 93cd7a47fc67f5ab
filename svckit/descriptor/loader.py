"""Read and write descriptors as JSON files."""

import json
from pathlib import Path

from svckit.config.loader import convert_keys, convert_to_camel
from svckit.descriptor.schema import ServiceSpec

# Keys whose values are user data, not schema, and must keep their casing
_PRESERVED = frozenset({"environment"})


def load_descriptor(path: Path) -> ServiceSpec:
    """Load a descriptor from a JSON file.

    Keys may be camelCase or snake_case. Raises ``OSError`` if the file
    cannot be read and ``ValueError`` if it is not a valid descriptor.
    """
    with open(path) as f:
        data = json.load(f)
    return ServiceSpec.model_validate(convert_keys(data, _PRESERVED))


def save_descriptor(spec: ServiceSpec, path: Path) -> None:
    """Save a descriptor as camelCase JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(spec.model_dump(), _PRESERVED)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
