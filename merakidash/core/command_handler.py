"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), turns raw CLI
arguments into wrapper or engine calls on the DashboardClient, and hands the
outcome to the UserInterface. Every handler returns a process exit code.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from merakidash.core.client import DashboardClient
from merakidash.domain.exceptions import APIError, DashboardError, ValidationError
from merakidash.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def parse_params(params: Optional[Sequence[str]]) -> Dict[str, Any]:
    """Turns repeated 'key=value' arguments into an options mapping.

    A key given more than once, or written as 'key[]', collects its values
    into a list.

    Raises:
        ValidationError: If an argument has no '='.
    """
    options: Dict[str, Any] = {}
    for raw in params or []:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise ValidationError(f"Parameter '{raw}' is not in key=value form")
        if key.endswith("[]"):
            options.setdefault(key[:-2], []).append(value)
        elif key in options:
            existing = options[key]
            options[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            options[key] = value
    return options


def parse_body(data: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parses a --data JSON argument; it must be a JSON object."""
    if data is None:
        return None
    try:
        body = json.loads(data)
    except json.JSONDecodeError as e:
        raise ValidationError(f"--data is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise ValidationError("--data must be a JSON object")
    return body


class CommandHandler:
    """Handles incoming commands and delegates to the Dashboard client."""

    def __init__(self, client: DashboardClient, ui: UserInterface):
        """Initializes the CommandHandler with the client and display."""
        self.client = client
        self.ui = ui

    def _report(self, error: DashboardError) -> int:
        if isinstance(error, APIError) and error.status_code == 404:
            self.ui.display_error(f"Not found: {error}")
        else:
            self.ui.display_error(str(error))
        return EXIT_FAILURE

    def handle_get(self, path: str, params: Optional[List[str]] = None, paginate: bool = True) -> int:
        """Handles the 'get' command: a raw GET on any API path."""
        logger.info(f"Handling 'get' command for path: {path}")
        try:
            result = self.client.request(path, "GET", parse_params(params) or None, paginate=paginate)
        except DashboardError as e:
            logger.debug(f"'get' failed: {e!r}")
            return self._report(e)
        if result.pages > 1:
            self.ui.display_info(f"Collected {len(result.data)} items from {result.pages} pages.")
        self.ui.display_result(result.value, title=path)
        return EXIT_OK

    def handle_request(self, method: str, path: str, data: Optional[str] = None) -> int:
        """Handles the 'request' command: any verb with an optional JSON body."""
        logger.info(f"Handling 'request' command: {method} {path}")
        try:
            result = self.client.request(path, method, parse_body(data))
        except DashboardError as e:
            logger.debug(f"'request' failed: {e!r}")
            return self._report(e)
        self.ui.display_result(result.value, title=f"{method.upper()} {path}")
        return EXIT_OK

    def _show(self, title: str, call, *args: Any, **kwargs: Any) -> int:
        try:
            data = call(*args, **kwargs)
        except DashboardError as e:
            logger.debug(f"'{title}' failed: {e!r}")
            return self._report(e)
        self.ui.display_result(data, title=title)
        return EXIT_OK

    def handle_orgs(self) -> int:
        return self._show("Organizations", self.client.organizations.list_all_organizations)

    def handle_networks(self, org_id: str) -> int:
        return self._show(f"Networks in {org_id}", self.client.networks.get_networks, org_id)

    def handle_devices(self, network_id: str) -> int:
        return self._show(f"Devices in {network_id}", self.client.devices.list_devices_in_network, network_id)

    def handle_clients(self, serial: str, timespan: int) -> int:
        return self._show(
            f"Clients of {serial}", self.client.clients.get_client_info_for_device, serial, timespan
        )

    def handle_switch_ports(self, serial: str) -> int:
        return self._show(f"Switch ports of {serial}", self.client.switch_ports.get_switch_ports, serial)
