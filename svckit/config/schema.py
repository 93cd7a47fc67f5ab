"""Configuration schema using Pydantic."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Root configuration for svckit."""
    systemctl: str = "systemctl"  # systemd control binary
    launchctl: str = "launchctl"  # launchd control binary
    log_level: str = Field(default="WARNING", pattern=r"^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")

    model_config = SettingsConfigDict(env_prefix="SVCKIT_")
