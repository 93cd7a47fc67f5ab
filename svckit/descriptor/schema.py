"""Engine-neutral service descriptor."""

import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

DEV_NULL = "/dev/null"

# Native files are line oriented; a newline in a value would start a new directive
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _check_text(value: str) -> str:
    if _CONTROL_CHARS.search(value):
        raise ValueError("must not contain control characters")
    return value


class LogTarget(BaseModel):
    """Where one output stream of the service goes.

    Neither ``disabled`` nor ``path`` set means the engine picks the
    destination (see :attr:`use_default`). A path of ``/dev/null`` is stored
    as ``disabled``.
    """
    disabled: bool = False
    path: str = ""

    @field_validator("path")
    @classmethod
    def _clean_path(cls, v: str) -> str:
        return _check_text(v).strip()

    @model_validator(mode="after")
    def _check_exclusive(self) -> "LogTarget":
        if self.disabled and self.path:
            raise ValueError("A log target cannot be both disabled and have a path")
        if self.path == DEV_NULL:
            self.disabled, self.path = True, ""
        return self

    @property
    def use_default(self) -> bool:
        return not self.disabled and not self.path


class LoggingSpec(BaseModel):
    """Standard output and standard error targets."""
    stdout: LogTarget = Field(default_factory=LogTarget)
    stderr: LogTarget = Field(default_factory=LogTarget)


class ServiceSpec(BaseModel):
    """A background service, independent of the engine that runs it."""
    name: str = Field(min_length=1, pattern=r"^[^/\s]+$")  # file stem and native identifier
    description: str = ""
    documentation: str = ""
    executable: str = ""
    args: list[str] = Field(default_factory=list)
    working_directory: str = ""
    environment: dict[str, str] = Field(default_factory=dict)
    user: str = ""
    group: str = ""
    keep_alive: bool = False  # restart whenever the process exits
    restart_delay: int = Field(default=0, ge=0)  # seconds
    logging: LoggingSpec = Field(default_factory=LoggingSpec)

    @field_validator("description", "documentation", "working_directory", "user", "group")
    @classmethod
    def _clean_text(cls, v: str) -> str:
        # Unit files do not keep whitespace around unquoted values
        return _check_text(v).strip()

    @field_validator("executable")
    @classmethod
    def _check_executable(cls, v: str) -> str:
        return _check_text(v)

    @field_validator("args")
    @classmethod
    def _check_args(cls, v: list[str]) -> list[str]:
        for arg in v:
            _check_text(arg)
        return v

    @field_validator("environment")
    @classmethod
    def _check_environment(cls, v: dict[str, str]) -> dict[str, str]:
        for key, value in v.items():
            if not key or "=" in key:
                raise ValueError(f"invalid environment variable name {key!r}")
            _check_text(key)
            _check_text(value)
        return v

    @model_validator(mode="after")
    def _check_command(self) -> "ServiceSpec":
        if self.args and not self.executable:
            raise ValueError("args require an executable")
        return self

    @property
    def command(self) -> list[str]:
        """Full argv, executable first."""
        return [self.executable, *self.args] if self.executable else list(self.args)


def salvage_spec(name: str, fields: dict[str, Any]) -> ServiceSpec:
    """Build a descriptor from fields read out of a native file.

    Fields the model rejects are dropped instead of failing the whole
    descriptor; an unusable ``name`` falls back to *name*. The native file
    stays the authority for whatever is lost.
    """
    fields = {"name": name, **fields}
    while True:
        try:
            return ServiceSpec(**fields)
        except ValidationError as e:
            # Model-level errors carry no field; the only one is args without executable
            rejected = {error["loc"][0] for error in e.errors() if error["loc"]} or {"args"}
            if not rejected & fields.keys() or ("name" in rejected and fields["name"] == name):
                raise
        fields = {key: value for key, value in fields.items() if key not in rejected}
        fields.setdefault("name", name)
