"""launchd property list encoding and decoding."""

import plistlib
from typing import Any
from xml.parsers.expat import ExpatError

from svckit.descriptor.schema import DEV_NULL, ServiceSpec, salvage_spec

EXTENSION = ".plist"


def encode(spec: ServiceSpec) -> str:
    """Render *spec* as an XML property list.

    Description and documentation have no launchd equivalent and are dropped.
    """
    plist: dict = {"Label": spec.name}
    if spec.command:
        plist["ProgramArguments"] = spec.command
    if spec.working_directory:
        plist["WorkingDirectory"] = spec.working_directory
    if spec.environment:
        plist["EnvironmentVariables"] = dict(spec.environment)
    if spec.user:
        plist["UserName"] = spec.user
    if spec.group:
        plist["GroupName"] = spec.group
    plist["RunAtLoad"] = True
    plist["KeepAlive"] = spec.keep_alive
    if spec.restart_delay:
        plist["ThrottleInterval"] = spec.restart_delay
    for key, target in (
        ("StandardOutPath", spec.logging.stdout),
        ("StandardErrorPath", spec.logging.stderr),
    ):
        if target.disabled:
            plist[key] = DEV_NULL
        elif target.path:
            plist[key] = target.path

    return plistlib.dumps(plist, sort_keys=False).decode("utf-8")


def decode(text: str | bytes, name: str) -> ServiceSpec:
    """Parse an XML or binary property list into a descriptor.

    ``Label`` wins over *name* when present. Never fails: content that is
    not a property list dictionary yields a descriptor holding only *name*,
    and launchd itself reports the file when it is loaded.
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    try:
        plist = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError, OverflowError):
        plist = {}
    if not isinstance(plist, dict):
        plist = {}

    arguments = [str(arg) for arg in _get(plist, "ProgramArguments", list, [])]
    if _get(plist, "Program", str, ""):
        # With Program set, ProgramArguments[0] is only argv[0]
        executable = plist["Program"]
    else:
        executable = arguments[0] if arguments else ""
    args = arguments[1:]

    keep_alive = plist.get("KeepAlive", False)
    if isinstance(keep_alive, dict):
        keep_alive = bool(keep_alive)

    environment = _get(plist, "EnvironmentVariables", dict, {})

    fields = {
        "executable": executable,
        "args": args,
        "working_directory": _get(plist, "WorkingDirectory", str, ""),
        "environment": {str(k): str(v) for k, v in environment.items()},
        "user": _get(plist, "UserName", str, ""),
        "group": _get(plist, "GroupName", str, ""),
        "keep_alive": keep_alive is True,
        "restart_delay": _get(plist, "ThrottleInterval", int, 0),
        "logging": {
            "stdout": _log_target(_get(plist, "StandardOutPath", str, "")),
            "stderr": _log_target(_get(plist, "StandardErrorPath", str, "")),
        },
    }
    label = _get(plist, "Label", str, "")
    if label:
        fields["name"] = label
    return salvage_spec(name, fields)


def _get(plist: dict, key: str, kind: type, default: Any) -> Any:
    value = plist.get(key, default)
    return value if isinstance(value, kind) else default


def _log_target(value: str) -> dict:
    if value == DEV_NULL:
        return {"disabled": True}
    return {"path": value}
