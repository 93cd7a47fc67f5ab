"""Linux systemd service driver."""

from pathlib import Path

from svckit.codecs import SYSTEMD
from svckit.config import Settings
from svckit.service.base import (
    CommandError,
    Service,
    ServiceDoesNotExistError,
    ServiceError,
    ServiceInfo,
)
from svckit.service.patterns import OutputRule, match_rule
from svckit.service.resolve import is_root, systemd_unit_candidates, systemd_unit_path
from svckit.service.runner import CommandResult, run_command

ENABLE_RULES = (
    OutputRule(("Failed to enable unit", "does not exist"), ServiceDoesNotExistError),
)
START_RULES = (
    OutputRule(("Failed to start", "not found"), ServiceDoesNotExistError),
)
STOP_RULES = (
    OutputRule(("Failed to stop", "not loaded"), ServiceDoesNotExistError),
)
DISABLE_RULES = (
    OutputRule(("Failed to disable", "does not exist"), ServiceDoesNotExistError),
    # Unit symlinks already went away; treated as disabled
    OutputRule(("Removed",)),
)
STATUS_RULES = (
    OutputRule(("could not be found",), ServiceDoesNotExistError),
)

# `systemctl status` exits 3 for a known unit that is not active
STATUS_PARSEABLE_EXITS = (0, 3)


def parse_status(output: str) -> tuple[bool, int]:
    """Extract (running, pid) from `systemctl status` output.

    The PID is -1 unless the unit is running.
    """
    running = False
    pid = -1
    for line in output.splitlines():
        if "Main PID:" in line:
            # "Main PID: 1234 (demo)"
            tokens = line.split()
            if len(tokens) >= 3 and tokens[2].isdigit():
                pid = int(tokens[2])
        elif "Active:" in line and "active (running)" in line:
            running = True
    return running, pid if running else -1


class SystemdService(Service):
    """Drive a unit through ``systemctl`` (``--user`` unless root)."""

    engine = "systemd"
    codec = SYSTEMD

    @classmethod
    def from_name(cls, name: str, settings: Settings | None = None) -> "SystemdService":
        for path in systemd_unit_candidates(name, is_root()):
            try:
                template = path.read_bytes()
            except OSError:
                continue
            return cls.from_template(name, template, settings=settings)
        raise ServiceDoesNotExistError(f"No unit file found for {name}")

    @property
    def file_path(self) -> Path:
        return systemd_unit_path(self.name, is_root())

    def read_paths(self) -> list[Path]:
        return systemd_unit_candidates(self.name, is_root())

    def start(self) -> None:
        self.log.debug("reloading daemon")
        self.classify(self._ctl("daemon-reload"))

        self.log.debug(f"enabling {self.name}")
        self.classify(self._ctl("enable", self.name), ENABLE_RULES)

        self.log.debug(f"starting {self.name}")
        self.classify(self._ctl("start", self.name), START_RULES)

    def stop(self) -> None:
        self.log.debug("reloading daemon")
        self.classify(self._ctl("daemon-reload"))

        self.log.debug(f"stopping {self.name}")
        self.classify(self._ctl("stop", self.name), STOP_RULES)

        self.log.debug(f"disabling {self.name}")
        result = self._ctl("disable", self.name)
        if not result.ok:
            self.log.warning(f"disabling {self.name} failed: {result.output.strip()}")
        if self.classify(result, DISABLE_RULES):
            return

        self.log.debug("reloading daemon")
        self.classify(self._ctl("daemon-reload"))

        self.log.debug("running reset-failed")
        self.classify(self._ctl("reset-failed"))

    def info(self) -> ServiceInfo:
        path, content = self.read_file()
        info = ServiceInfo(
            service=self.spec,
            file_path=path,
            file_content=content,
        )
        if not content:
            info.error = ServiceDoesNotExistError(f"{self.name}: no unit file at {path}")

        result = self._ctl("status", self.name)
        try:
            self._check_status(result)
        except ServiceError as e:
            info.error = e
            return info

        info.is_running, info.pid = parse_status(result.stdout)
        return info

    def _check_status(self, result: CommandResult) -> None:
        rule = match_rule(result.output, STATUS_RULES)
        if rule is not None and rule.error is not None:
            raise rule.error(f"{self.name}: {result.output.strip()}")
        if result.returncode not in STATUS_PARSEABLE_EXITS:
            raise CommandError(result)

    def _ctl(self, *args: str) -> CommandResult:
        command = [self.settings.systemctl]
        if not is_root():
            command.append("--user")
        return run_command(*command, *args, tag=self.log_tag)
