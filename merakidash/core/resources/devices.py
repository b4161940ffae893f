"""Devices section of the Meraki Dashboard API."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from merakidash.core.resources.base import ResourceClient, warn_deprecated
from merakidash.domain.models.common import (
    DeviceSerial, NetworkId, Options, OptionalOptions, OrganizationId
)
from merakidash.domain.models.http import HttpMethod

logger = logging.getLogger(__name__)


class Devices(ResourceClient):
    """Device inventory, status, management interface and live tools."""

    def list_devices_in_network(self, network_id: NetworkId) -> List[Dict[str, Any]]:
        return self._call(f"/networks/{network_id}/devices")

    def list_devices_for_organization(
        self, org_id: OrganizationId, options: OptionalOptions = None
    ) -> List[Dict[str, Any]]:
        """Lists devices claimed by an organization.

        Args:
            org_id: Dashboard organization ID.
            options: Filters such as serial, tags, model or networkIds.
        """
        return self._call(f"/organizations/{org_id}/devices", HttpMethod.GET, options)

    def get_organization_inventory_devices(
        self, org_id: OrganizationId, options: OptionalOptions = None
    ) -> List[Dict[str, Any]]:
        return self._call(f"/organizations/{org_id}/inventory/devices", HttpMethod.GET, options)

    def get_organization_devices_availabilities(
        self, org_id: OrganizationId, options: OptionalOptions = None
    ) -> List[Dict[str, Any]]:
        """Lists device availability; the server refreshes it every 5 minutes."""
        return self._call(f"/organizations/{org_id}/devices/availabilities", HttpMethod.GET, options)

    def get_device(self, device_serial: DeviceSerial) -> Dict[str, Any]:
        return self._call(f"/devices/{device_serial}")

    def get_single_device(self, network_id: NetworkId, device_serial: DeviceSerial) -> Dict[str, Any]:
        warn_deprecated("get_single_device", "get_device")
        return self.get_device(device_serial)

    def get_device_uplink_stats(
        self,
        network_id: NetworkId,
        device_serial: DeviceSerial,
        organization_id: Optional[OrganizationId] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Returns the uplinks of one appliance.

        Looks up the network's organization when organization_id is not
        given, then filters the organization-wide uplink statuses.

        Returns:
            The device's uplink list, or None if the device is not listed.
        """
        warn_deprecated("get_device_uplink_stats", "get_organization_uplink_stats")
        if organization_id is None:
            network = self._call(f"/networks/{network_id}") or {}
            organization_id = network.get("organizationId")

        statuses = self.get_organization_uplink_stats(organization_id, networks=[network_id]) or []
        for device in statuses:
            if device.get("serial") == device_serial:
                return device.get("uplinks")
        logger.debug(f"No uplink status found for {device_serial} in network {network_id}")
        return None

    def get_organization_uplink_stats(
        self, organization_id: OrganizationId, networks: Sequence[NetworkId] = ()
    ) -> List[Dict[str, Any]]:
        """Returns uplink statuses for every appliance in an organization.

        Args:
            organization_id: Dashboard organization ID.
            networks: Restrict the result to these network IDs.
        """
        options = {"networkIds": list(networks)} if networks else {}
        return self._call(f"/organizations/{organization_id}/appliance/uplink/statuses", HttpMethod.GET, options)

    def get_organization_cellular_gateway_uplink_stats(
        self, organization_id: OrganizationId, options: OptionalOptions = None
    ) -> List[Dict[str, Any]]:
        return self._call(
            f"/organizations/{organization_id}/cellularGateway/uplink/statuses", HttpMethod.GET, options
        )

    def get_device_lldp_cdp(self, device_serial: DeviceSerial) -> Dict[str, Any]:
        return self._call(f"/devices/{device_serial}/lldpCdp")

    def update_device(self, device_serial: DeviceSerial, options: Options) -> Dict[str, Any]:
        """Updates a device's attributes (name, tags, lat, lng, address, notes...)."""
        return self._call(f"/devices/{device_serial}", HttpMethod.PUT, options)

    def update_device_attributes(
        self, network_id: NetworkId, device_serial: DeviceSerial, options: Options
    ) -> Dict[str, Any]:
        warn_deprecated("update_device_attributes", "update_device")
        return self.update_device(device_serial, options)

    def get_device_management_interface(self, device_serial: DeviceSerial) -> Dict[str, Any]:
        return self._call(f"/devices/{device_serial}/managementInterface")

    def update_device_management_interface(self, device_serial: DeviceSerial, options: Options) -> Dict[str, Any]:
        return self._call(f"/devices/{device_serial}/managementInterface", HttpMethod.PUT, options)

    def claim_device_into_network(self, network_id: NetworkId, options: Options) -> Any:
        """Claims devices into a network; options carry a 'serials' list.

        Returns:
            The HTTP status code (the endpoint answers with an empty body).
        """
        return self._call(f"/networks/{network_id}/devices/claim", HttpMethod.POST, options)

    def remove_device_from_network(self, network_id: NetworkId, device_serial: DeviceSerial) -> Any:
        return self._call(f"/networks/{network_id}/devices/remove", HttpMethod.POST, {"serial": device_serial})

    def create_speed_test(self, device_serial: DeviceSerial, interface: str) -> Dict[str, Any]:
        """Enqueues a speed test job on one WAN interface of a device."""
        return self._call(
            f"/devices/{device_serial}/liveTools/speedTest", HttpMethod.POST, {"interface": interface}
        )

    def get_speed_test(self, device_serial: DeviceSerial, speed_test_id: str) -> Dict[str, Any]:
        """Returns a speed test job; results are absent until it completes."""
        return self._call(f"/devices/{device_serial}/liveTools/speedTest/{speed_test_id}")
