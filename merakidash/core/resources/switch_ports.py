"""Switch ports section of the Meraki Dashboard API."""

from typing import Any, Dict, List

from merakidash.core.resources.base import ResourceClient
from merakidash.domain.exceptions import ValidationError
from merakidash.domain.models.common import DeviceSerial, Options, OptionalOptions, OrganizationId
from merakidash.domain.models.http import HttpMethod


def _check_port(port_number: Any) -> int:
    # bool is an int subclass, but True is not a port.
    if not isinstance(port_number, int) or isinstance(port_number, bool):
        raise ValidationError(f"Invalid switchport provided: {port_number!r}")
    return port_number


class SwitchPorts(ResourceClient):

    def get_switch_ports(self, device_serial: DeviceSerial) -> List[Dict[str, Any]]:
        """Returns the configuration of every port on a switch."""
        return self._call(f"/devices/{device_serial}/switch/ports")

    def get_switch_ports_by_switch(
        self, org_id: OrganizationId, options: OptionalOptions = None
    ) -> List[Dict[str, Any]]:
        """Lists switch ports across an organization, grouped by switch.

        Args:
            org_id: Dashboard organization ID.
            options: Filters such as serial, name or networkIds.
        """
        return self._call(f"/organizations/{org_id}/switch/ports/bySwitch", HttpMethod.GET, options)

    def get_single_switch_port(self, device_serial: DeviceSerial, port_number: int) -> Dict[str, Any]:
        port = _check_port(port_number)
        return self._call(f"/devices/{device_serial}/switch/ports/{port}")

    def update_switchport(self, device_serial: DeviceSerial, port_number: int, options: Options) -> Dict[str, Any]:
        """Updates one switch port.

        Args:
            device_serial: Serial number of the switch.
            port_number: Port to modify.
            options: Keys such as name, tags, enabled, type, vlan, voiceVlan,
                allowedVlans, poeEnabled or stpGuard.

        Raises:
            ValidationError: If port_number is not an integer.
        """
        port = _check_port(port_number)
        return self._call(f"/devices/{device_serial}/switch/ports/{port}", HttpMethod.PUT, options)
