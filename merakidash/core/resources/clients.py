"""Clients section of the Meraki Dashboard API."""

from typing import Any, Dict, List

from merakidash.core.resources.base import ResourceClient, check_timespan
from merakidash.domain.models.common import DeviceSerial, NetworkId, OptionalOptions
from merakidash.domain.models.http import HttpMethod


class Clients(ResourceClient):

    def get_client_info_for_device(self, serial: DeviceSerial, timespan: Any) -> List[Dict[str, Any]]:
        """Returns client usage seen by a device.

        Args:
            serial: Serial number of the device.
            timespan: Look-back window in seconds, at most one month.

        Raises:
            ValidationError: If timespan exceeds 2,592,000 seconds. The
                engine is not called in that case.
        """
        seconds = check_timespan(timespan)
        return self._call(f"/devices/{serial}/clients?timespan={seconds}")

    def list_clients_in_network(self, network_id: NetworkId, options: OptionalOptions = None) -> List[Dict[str, Any]]:
        """Lists clients of a network; options filter by mac, vlan, ip, perPage..."""
        return self._call(f"/networks/{network_id}/clients", HttpMethod.GET, options)
