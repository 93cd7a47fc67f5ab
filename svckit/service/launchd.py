"""macOS launchd service driver."""

from pathlib import Path

from svckit.codecs import LAUNCHD
from svckit.config import Settings
from svckit.descriptor.schema import LoggingSpec, LogTarget, ServiceSpec
from svckit.service.base import (
    CommandError,
    Service,
    ServiceConfigError,
    ServiceDoesNotExistError,
    ServiceInfo,
)
from svckit.service.patterns import OutputRule
from svckit.service.resolve import is_root, launchd_log_dir, launchd_plist_path
from svckit.service.runner import CommandResult, run_command

# launchctl frequently exits 0 while printing an error, so these tables are
# consulted on every result, not only on failures.
LOAD_RULES = (
    OutputRule(("No such file or directory",), ServiceDoesNotExistError),
    OutputRule(("Invalid property list",), ServiceConfigError),
    OutputRule(("service already loaded",)),
)
UNLOAD_RULES = (
    OutputRule(("Could not find specified service",), ServiceDoesNotExistError),
    OutputRule(("No such file or directory",), ServiceDoesNotExistError),
)


def parse_list(output: str, name: str) -> tuple[bool, int]:
    """Extract (running, pid) for *name* from `launchctl list` output.

    Rows are ``PID<TAB>Status<TAB>Label``; a ``-`` PID means loaded but not
    running. A missing row means not loaded, which is not an error.
    """
    for line in output.strip().splitlines():
        fields = line.split("\t")
        if fields[-1].strip() != name:
            continue
        pid = fields[0].strip()
        if pid.isdigit():
            return True, int(pid)
        return False, -1
    return False, -1


class LaunchdService(Service):
    """Drive a job through ``launchctl``.

    Agents live under the user's LaunchAgents, daemons (root) under
    /Library/LaunchDaemons.
    """

    engine = "launchd"
    codec = LAUNCHD

    @classmethod
    def from_name(cls, name: str, settings: Settings | None = None) -> "LaunchdService":
        path = launchd_plist_path(name, is_root())
        try:
            template = path.read_bytes()
        except OSError:
            raise ServiceDoesNotExistError(f"No property list found for {name} at {path}") from None
        return cls.from_template(name, template, settings=settings)

    @property
    def file_path(self) -> Path:
        return launchd_plist_path(self.name, is_root())

    def resolved_spec(self) -> ServiceSpec:
        """Fill default log targets in for the current privilege scope."""
        log_dir = launchd_log_dir(self.name, is_root())
        stdout, stderr = self.spec.logging.stdout, self.spec.logging.stderr
        if stdout.use_default:
            stdout = LogTarget(path=str(log_dir / f"{self.name}.stdout.log"))
        if stderr.use_default:
            stderr = LogTarget(path=str(log_dir / f"{self.name}.stderr.log"))
        return self.spec.model_copy(update={"logging": LoggingSpec(stdout=stdout, stderr=stderr)})

    def install(self) -> None:
        if self.template is None:
            targets = self.spec.logging
            if targets.stdout.use_default or targets.stderr.use_default:
                log_dir = launchd_log_dir(self.name, is_root())
                self.log.debug(f"making sure log folder exists: {log_dir}")
                log_dir.mkdir(parents=True, exist_ok=True)
        super().install()

    def uninstall(self) -> None:
        super().uninstall()
        # The result is ignored: launchctl documents remove loosely, and the
        # unload plus file removal above already took the job out.
        self._ctl("remove", self.name)

    def start(self) -> None:
        self.log.debug(f"loading {self.file_path}")
        if self.classify(self._ctl("load", "-w", str(self.file_path)), LOAD_RULES, always=True):
            self.log.debug("service already loaded")
            return

        # Best effort: launchctl's answer for an already running job is undefined
        self._ctl("start", self.name)

    def stop(self) -> None:
        self._ctl("stop", self.name)
        self.log.debug(f"unloading {self.file_path}")
        self.classify(self._ctl("unload", str(self.file_path)), UNLOAD_RULES, always=True)

    def info(self) -> ServiceInfo:
        path, content = self.read_file()
        info = ServiceInfo(
            service=self.spec,
            file_path=path,
            file_content=content,
        )
        if not content:
            info.error = ServiceDoesNotExistError(f"{self.name}: no property list at {path}")

        result = self._ctl("list")
        if not result.ok:
            info.error = CommandError(result)
            self.log.error(f"error getting launchctl status: {info.error}")
            return info

        info.is_running, info.pid = parse_list(result.stdout, self.name)
        return info

    def _ctl(self, *args: str) -> CommandResult:
        return run_command(self.settings.launchctl, *args, tag=self.log_tag)
