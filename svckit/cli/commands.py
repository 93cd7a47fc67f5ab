"""CLI commands for svckit."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from svckit import __logo__, __version__
from svckit.config import load_config
from svckit.descriptor import ServiceSpec, load_descriptor
from svckit.log import setup_logging
from svckit.service import (
    Service,
    ServiceDoesNotExistError,
    ServiceError,
    from_descriptor,
    from_name,
    get_driver_class,
)

app = typer.Typer(
    name="svckit",
    help=f"{__logo__} svckit - background services on systemd and launchd",
    no_args_is_help=True,
)

console = Console()

ENGINE_PLATFORMS = {"systemd": "linux", "launchd": "macos"}


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} svckit v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log every native command"),
):
    """svckit - install and drive background services."""
    setup_logging("DEBUG" if verbose else load_config().log_level)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def _load_spec(spec_file: Path) -> ServiceSpec:
    try:
        return load_descriptor(spec_file)
    except (OSError, ValueError) as e:
        _fail(f"Cannot read descriptor {spec_file}: {e}")


def _adopt(name: str) -> Service:
    """Driver for an installed service, exiting if there is none."""
    try:
        return from_name(name)
    except ServiceDoesNotExistError:
        console.print(f"[yellow]Service {name} is not installed[/yellow]")
        raise typer.Exit(1)
    except ServiceError as e:
        _fail(str(e))


# ============================================================================
# Lifecycle
# ============================================================================


@app.command()
def install(
    spec_file: Path = typer.Argument(..., help="Descriptor JSON file"),
    start: bool = typer.Option(False, "--start", "-s", help="Start after installing"),
):
    """Write the native service file for a descriptor."""
    spec = _load_spec(spec_file)
    try:
        service = from_descriptor(spec)
        service.install()
        console.print(f"[green]✓[/green] Installed {spec.name} at {service.file_path}")
        if start:
            service.start()
            console.print(f"[green]✓[/green] Started {spec.name}")
    except (ServiceError, OSError) as e:
        _fail(str(e))


@app.command()
def uninstall(name: str = typer.Argument(..., help="Service name")):
    """Stop a service and remove its file."""
    service = _adopt(name)
    try:
        service.uninstall()
    except (ServiceError, OSError) as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Removed {name}")


@app.command()
def start(name: str = typer.Argument(..., help="Service name")):
    """Start an installed service."""
    service = _adopt(name)
    try:
        service.start()
    except ServiceError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Started {name}")


@app.command()
def stop(name: str = typer.Argument(..., help="Service name")):
    """Stop a running service."""
    service = _adopt(name)
    try:
        service.stop()
    except ServiceDoesNotExistError:
        console.print(f"[yellow]{name} is not loaded[/yellow]")
        return
    except ServiceError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Stopped {name}")


@app.command()
def restart(name: str = typer.Argument(..., help="Service name")):
    """Restart an installed service."""
    service = _adopt(name)
    try:
        service.restart()
    except ServiceError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Restarted {name}")


# ============================================================================
# Inspection
# ============================================================================


@app.command()
def status(
    name: str = typer.Argument(..., help="Service name"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw snapshot as JSON"),
):
    """Show service status."""
    try:
        service = from_name(name)
    except ServiceDoesNotExistError:
        # Still ask the manager; a job can be loaded without a file on disk
        service = get_driver_class().from_spec(ServiceSpec(name=name))
    except ServiceError as e:
        _fail(str(e))

    info = service.info()

    if as_json:
        typer.echo(json.dumps(info.to_dict(), indent=2))
        return

    if info.is_running:
        state = "[green]running[/green]"
    elif isinstance(info.error, ServiceDoesNotExistError):
        state = "[dim]not installed[/dim]"
    else:
        state = "[yellow]stopped[/yellow]"

    table = Table(title=f"{name} ({service.engine})")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Status", state)
    if info.pid > 0:
        table.add_row("PID", str(info.pid))
    table.add_row("Service file", str(info.file_path))
    if info.error is not None and not isinstance(info.error, ServiceDoesNotExistError):
        table.add_row("Error", f"[red]{info.error}[/red]")

    console.print(table)


@app.command()
def render(
    spec_file: Path = typer.Argument(..., help="Descriptor JSON file"),
    engine: str = typer.Option(None, "--engine", "-e", help="systemd or launchd (default: this host)"),
):
    """Print the native file a descriptor would install, without installing it."""
    spec = _load_spec(spec_file)
    if engine is not None and engine not in ENGINE_PLATFORMS:
        _fail(f"Unknown engine '{engine}'. Available: {', '.join(ENGINE_PLATFORMS)}")

    try:
        driver_class = get_driver_class(ENGINE_PLATFORMS.get(engine))
    except ServiceError as e:
        _fail(str(e))

    typer.echo(driver_class.from_spec(spec).render(), nl=False)


if __name__ == "__main__":
    app()
