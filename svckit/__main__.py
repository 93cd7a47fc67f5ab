"""Entry point for ``python -m svckit``."""

from svckit.cli.commands import app

if __name__ == "__main__":
    app()
