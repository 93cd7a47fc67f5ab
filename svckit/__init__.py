"""svckit - install and drive background services on systemd and launchd."""

__version__ = "0.1.0"
__logo__ = "⚙"
