"""Main entry point for the merakidash application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from typing import Annotated, Any, Dict, List, Optional

import typer

from merakidash import __version__
# --- Core Layer ---
from merakidash.core.client import DashboardClient
from merakidash.core.command_handler import CommandHandler
from merakidash.domain.exceptions import DashboardError
# --- Infrastructure Layer ---
from merakidash.infrastructure.cli.display import ConsoleDisplay
from merakidash.infrastructure.config.settings import get_config, load_configuration, set_config
from merakidash.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First
    load_configuration()
    setup_logging(
        log_level=get_config("logging.level", "WARNING"),
        log_file=get_config("logging.file"),
        log_format=get_config("logging.format", DEFAULT_LOG_FORMAT),
    )
    logger.info("Configuration and logging initialized.")

    # 2. UI first so initialization errors can be shown
    dependencies["ui"] = ConsoleDisplay()

    # 3. Client: settings -> rate limiter, transport, retry policy -> engine
    try:
        dependencies["client"] = DashboardClient()
    except DashboardError as e:
        logger.error(f"Fatal Error during application initialization: {e}")
        dependencies["ui"].display_error(f"Application Initialization Failed: {e}")
        raise typer.Exit(code=1)

    # 4. Command Handler
    dependencies["command_handler"] = CommandHandler(client=dependencies["client"], ui=dependencies["ui"])
    logger.info("All dependencies initialized successfully.")
    return dependencies


# Built on first command so --help and --version work without an API key.
_dependencies: Optional[Dict[str, Any]] = None


def get_handler() -> CommandHandler:
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies()
    return _dependencies["command_handler"]


def _finish(exit_code: int) -> None:
    if exit_code:
        raise typer.Exit(code=exit_code)


# --- Typer App Definition ---
app = typer.Typer(
    name="merakidash",
    help="merakidash: query and manage the Cisco Meraki Dashboard API from the command line.",
    add_completion=False,
)

# --- CLI Commands ---

@app.command()
def get(
    path: Annotated[str, typer.Argument(help="API path, e.g. /organizations/123/networks.")],
    param: Annotated[
        Optional[List[str]],
        typer.Option("--param", "-p", help="Query parameter as key=value; repeatable.")
    ] = None,
    paginate: Annotated[bool, typer.Option("--paginate/--no-paginate", help="Follow continuation pages.")] = True,
):
    """GET any API path and render the result."""
    _finish(get_handler().handle_get(path, param, paginate=paginate))


@app.command()
def request(
    method: Annotated[str, typer.Argument(help="GET, POST, PUT or DELETE.")],
    path: Annotated[str, typer.Argument(help="API path.")],
    data: Annotated[Optional[str], typer.Option("--data", "-d", help="JSON object sent as the body.")] = None,
):
    """Send an arbitrary request."""
    _finish(get_handler().handle_request(method, path, data))


@app.command()
def orgs():
    """List organizations the API key can access."""
    _finish(get_handler().handle_orgs())


@app.command()
def networks(org_id: Annotated[str, typer.Argument(help="Organization ID.")]):
    """List networks of an organization."""
    _finish(get_handler().handle_networks(org_id))


@app.command()
def devices(network_id: Annotated[str, typer.Argument(help="Network ID.")]):
    """List devices in a network."""
    _finish(get_handler().handle_devices(network_id))


@app.command()
def clients(
    serial: Annotated[str, typer.Argument(help="Device serial number.")],
    timespan: Annotated[int, typer.Option("--timespan", "-t", help="Look-back window in seconds (max 2592000).")] = 86400,
):
    """List clients seen by a device."""
    _finish(get_handler().handle_clients(serial, timespan))


@app.command(name="switch-ports")
def switch_ports(serial: Annotated[str, typer.Argument(help="Switch serial number.")]):
    """Show the port configuration of a switch."""
    _finish(get_handler().handle_switch_ports(serial))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"merakidash {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit.")
    ] = False,
):
    """Cisco Meraki Dashboard API client."""
    if verbose:
        set_config("logging.level", "DEBUG")

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
