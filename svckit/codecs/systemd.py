"""systemd unit file encoding and decoding."""

import shlex

from svckit.descriptor.schema import ServiceSpec, salvage_spec

EXTENSION = ".service"

# Prefixes systemd accepts in front of ExecStart= command lines
_EXEC_PREFIXES = "-@+!:"
_RESTART_ON = {"always", "on-success", "on-failure", "on-abnormal", "on-abort", "on-watchdog"}


def encode(spec: ServiceSpec) -> str:
    """Render *spec* as a unit file."""
    unit = ["[Unit]"]
    if spec.description:
        unit.append(f"Description={spec.description}")
    if spec.documentation:
        unit.append(f"Documentation={spec.documentation}")
    unit.append("After=network.target")

    service = ["[Service]", "Type=simple"]
    if spec.command:
        service.append(f"ExecStart={_exec_line(spec.command)}")
    if spec.working_directory:
        service.append(f"WorkingDirectory={spec.working_directory}")
    for key, value in spec.environment.items():
        service.append(f"Environment={_quote_assignment(key, value)}")
    if spec.user:
        service.append(f"User={spec.user}")
    if spec.group:
        service.append(f"Group={spec.group}")
    service.append(f"Restart={'always' if spec.keep_alive else 'no'}")
    if spec.restart_delay:
        service.append(f"RestartSec={spec.restart_delay}")
    for key, target in (
        ("StandardOutput", spec.logging.stdout),
        ("StandardError", spec.logging.stderr),
    ):
        if target.disabled:
            service.append(f"{key}=null")
        elif target.path:
            service.append(f"{key}=append:{target.path}")

    install = ["[Install]", "WantedBy=default.target"]

    return "\n".join(unit + [""] + service + [""] + install) + "\n"


def decode(text: str | bytes, name: str) -> ServiceSpec:
    """Parse a unit file into a descriptor named *name*.

    Never fails: unknown sections and keys are ignored, and values that
    cannot be parsed are left out. The unit file itself stays the authority
    for anything the descriptor cannot express.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    sections = _parse(text)
    unit = sections.get("Unit", {})
    service = sections.get("Service", {})

    fields: dict = {
        "description": _last(unit, "Description"),
        "documentation": _last(unit, "Documentation"),
        "working_directory": _last(service, "WorkingDirectory"),
        "user": _last(service, "User"),
        "group": _last(service, "Group"),
        "keep_alive": _last(service, "Restart") in _RESTART_ON,
        "logging": {
            "stdout": _log_target(_last(service, "StandardOutput")),
            "stderr": _log_target(_last(service, "StandardError")),
        },
    }

    if service.get("ExecStart"):
        command = _split(service["ExecStart"][-1].lstrip(_EXEC_PREFIXES))
        if command:
            fields["executable"], fields["args"] = command[0], command[1:]

    environment: dict[str, str] = {}
    for line in service.get("Environment", []):
        if not line:
            environment.clear()
            continue
        for assignment in _split(line):
            key, sep, value = assignment.partition("=")
            if sep:
                environment[key] = value
    fields["environment"] = environment

    if service.get("RestartSec"):
        raw = service["RestartSec"][-1].removesuffix("s")
        if raw.isdigit():
            fields["restart_delay"] = int(raw)

    return salvage_spec(name, fields)


def _parse(text: str) -> dict[str, dict[str, list[str]]]:
    """Split unit file text into {section: {key: [values in order]}}."""
    sections: dict[str, dict[str, list[str]]] = {}
    current: dict[str, list[str]] | None = None
    pending = ""

    for raw in text.splitlines():
        line = pending + raw.strip()
        pending = ""
        if line.endswith("\\"):
            pending = line[:-1] + " "
            continue
        if not line or line[0] in "#;":
            continue
        if line.startswith("[") and line.endswith("]"):
            current = sections.setdefault(line[1:-1], {})
            continue
        if current is None:
            continue
        key, sep, value = line.partition("=")
        if sep:
            current.setdefault(key.strip(), []).append(value.strip())

    return sections


def _last(section: dict[str, list[str]], key: str) -> str:
    values = section.get(key)
    return values[-1] if values else ""


def _split(line: str) -> list[str]:
    try:
        return shlex.split(line)
    except ValueError:
        # Unbalanced quotes; systemd will report the line when loading the unit
        return []


def _exec_line(command: list[str]) -> str:
    line = shlex.join(command)
    if line[:1] in _EXEC_PREFIXES:
        # Keep a leading "-", "@", "+" or ":" from reading as an exec prefix
        line = f"'{command[0]}' {shlex.join(command[1:])}".rstrip()
    return line


def _quote_assignment(key: str, value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{key}={escaped}"'


def _log_target(value: str) -> dict:
    if value == "null":
        return {"disabled": True}
    for prefix in ("append:", "file:"):
        if value.startswith(prefix):
            return {"path": value[len(prefix):]}
    # journal, inherit, tty, ... are left to the manager
    return {}
