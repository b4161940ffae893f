"""Thin wrappers mapping Dashboard API sections onto the request engine."""

from merakidash.core.resources.clients import Clients
from merakidash.core.resources.devices import Devices
from merakidash.core.resources.networks import Networks
from merakidash.core.resources.organizations import Organizations
from merakidash.core.resources.switch_ports import SwitchPorts

__all__ = ["Clients", "Devices", "Networks", "Organizations", "SwitchPorts"]
