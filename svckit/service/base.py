"""Abstract service driver interface and shared types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from loguru import logger

from svckit.config import Settings, load_config
from svckit.descriptor.schema import ServiceSpec
from svckit.service.patterns import OutputRule, match_rule

if TYPE_CHECKING:
    from svckit.codecs import Codec
    from svckit.service.runner import CommandResult


class ServiceError(Exception):
    """Raised when a service operation fails."""


class ServiceDoesNotExistError(ServiceError):
    """The service's file or its registration with the manager is absent."""


class ServiceConfigError(ServiceError):
    """The service configuration is malformed."""


class CommandError(ServiceError):
    """A native control command failed with output we do not recognise."""

    def __init__(self, result: CommandResult):
        self.result = result
        super().__init__(
            f"{' '.join(result.args)} failed (exit {result.returncode}): {result.output.strip()}"
        )


@dataclass
class ServiceInfo:
    """Point-in-time snapshot of a service."""

    service: ServiceSpec
    file_path: Path
    is_running: bool = False
    pid: int = -1
    file_content: bytes = b""
    error: Exception | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation for diagnostics."""
        return {
            "service": self.service.model_dump(),
            "isRunning": self.is_running,
            "pid": self.pid,
            "filePath": str(self.file_path),
            "fileContent": self.file_content.decode("utf-8", errors="replace"),
            "error": None if self.error is None else {
                "type": type(self.error).__name__,
                "message": str(self.error),
            },
        }


class Service(ABC):
    """Abstract base for platform-specific service drivers.

    A driver wraps one descriptor. When *template* is given, that text (or
    the raw bytes read from disk) is authoritative and is written verbatim
    on install instead of being regenerated from the descriptor. Paths and
    privilege are re-resolved on every call; nothing else is cached.
    """

    engine: ClassVar[str] = ""
    codec: ClassVar[Codec]

    def __init__(
        self,
        spec: ServiceSpec,
        template: str | bytes | None = None,
        settings: Settings | None = None,
        log_tag: str | None = None,
    ):
        self.spec = spec
        self.template = template
        self.settings = settings or load_config()
        self.log_tag = log_tag or self.engine
        self.log = logger.bind(tag=self.log_tag)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_spec(cls, spec: ServiceSpec, settings: Settings | None = None) -> Service:
        """Driver for which *spec* is authoritative."""
        logger.bind(tag=cls.engine).debug(f"service spec: {spec.model_dump_json()}")
        return cls(spec, settings=settings)

    @classmethod
    def from_template(
        cls, name: str, template: str | bytes, settings: Settings | None = None
    ) -> Service:
        """Driver for which the raw *template* is authoritative."""
        logger.bind(tag=cls.engine).debug(f"template: {template!r}")
        return cls(cls.codec.decode(template, name), template=template, settings=settings)

    @classmethod
    @abstractmethod
    def from_name(cls, name: str, settings: Settings | None = None) -> Service:
        """Adopt an installed service by reading its file.

        Raises ServiceDoesNotExistError when no file is found.
        """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    @abstractmethod
    def file_path(self) -> Path:
        """Where the service file lives for the current privilege scope."""

    @abstractmethod
    def start(self) -> None:
        """Register the service with the manager and start it."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the service and unregister it from the manager."""

    @abstractmethod
    def info(self) -> ServiceInfo:
        """Get current service status."""

    def install(self) -> None:
        """Write the service file. Write failures propagate as OSError."""
        path = self.file_path

        self.log.debug(f"making sure folder exists: {path.parent}")
        path.parent.mkdir(parents=True, exist_ok=True)

        content = self.render()
        self.log.debug(f"writing {self.engine} file to: {path}")
        path.write_bytes(content.encode("utf-8") if isinstance(content, str) else content)
        self.log.debug(f"wrote: {content!r}")

    def uninstall(self) -> None:
        """Stop the service and remove its file. An absent service is fine."""
        self.log.debug(f"attempting to uninstall: {self.name}")
        try:
            self.stop()
        except ServiceDoesNotExistError:
            self.log.debug(f"{self.name} was not registered, nothing to stop")

        self.log.debug(f"removing {self.file_path}")
        self.file_path.unlink(missing_ok=True)

    def restart(self) -> None:
        """Stop (if registered) and start the service."""
        try:
            self.stop()
        except ServiceDoesNotExistError:
            pass
        self.start()

    def is_installed(self) -> bool:
        """Check whether the service file exists."""
        return self.file_path.exists()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def resolved_spec(self) -> ServiceSpec:
        """The descriptor with context-dependent defaults filled in."""
        return self.spec

    def render(self) -> str | bytes:
        """File content to install."""
        if self.template is not None:
            return self.template
        return self.codec.encode(self.resolved_spec())

    def read_paths(self) -> list[Path]:
        """Paths the service file may be read from, in lookup order."""
        return [self.file_path]

    def read_file(self) -> tuple[Path, bytes]:
        """Return the first readable service file and its raw content.

        Falls back to ``(file_path, b"")`` when none can be read.
        """
        for path in self.read_paths():
            try:
                return path, path.read_bytes()
            except OSError:
                continue
        return self.file_path, b""

    def classify(
        self,
        result: CommandResult,
        rules: tuple[OutputRule, ...] = (),
        *,
        always: bool = False,
    ) -> bool:
        """Interpret a command result against *rules*.

        Rules are consulted only for failed commands unless *always* is set
        (for tools that report errors with a zero exit). Returns True when a
        rule recognised the output as success, raises the rule's error when
        it maps to one, and raises CommandError for unrecognised failures.
        """
        if result.ok and not always:
            return False

        rule = match_rule(result.output, rules)
        if rule is None:
            if not result.ok:
                raise CommandError(result)
            return False
        if rule.error is not None:
            raise rule.error(f"{self.name}: {result.output.strip()}")
        return True
