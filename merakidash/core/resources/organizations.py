"""Organizations section of the Meraki Dashboard API."""

from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from merakidash.core.resources.base import ResourceClient, warn_deprecated
from merakidash.domain.exceptions import ValidationError
from merakidash.domain.models.common import Options, OrganizationId
from merakidash.domain.models.http import HttpMethod
from merakidash.infrastructure.http.request_builder import validate_options


class Organizations(ResourceClient):
    """Organization-level endpoints: licensing, inventory, SNMP, VPN peers."""

    def get_organization(self, org_id: OrganizationId) -> Dict[str, Any]:
        """Returns the id, name and attributes of one organization."""
        return self._call(f"/organizations/{org_id}")

    def get_license_overview(self, org_id: OrganizationId) -> Dict[str, Any]:
        """Returns the current license state for an organization."""
        return self._call(f"/organizations/{org_id}/licenses/overview")

    def get_license_state(self, org_id: OrganizationId) -> Dict[str, Any]:
        warn_deprecated("get_license_state", "get_license_overview")
        return self.get_license_overview(org_id)

    def get_inventory_devices(self, org_id: OrganizationId) -> List[Dict[str, Any]]:
        """Returns every device in the organization's inventory."""
        return self._call(f"/organizations/{org_id}/inventory/devices")

    def get_inventory(self, org_id: OrganizationId) -> List[Dict[str, Any]]:
        warn_deprecated("get_inventory", "get_inventory_devices")
        return self.get_inventory_devices(org_id)

    def get_snmp_settings(self, org_id: OrganizationId) -> Dict[str, Any]:
        return self._call(f"/organizations/{org_id}/snmp")

    def update_snmp_settings(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        """Updates SNMP settings.

        Args:
            org_id: Dashboard organization ID.
            options: Any of v2cEnabled, v3Enabled, v3AuthMode, v3AuthPass,
                v3PrivMode, v3PrivPass, peerIps.
        """
        return self._call(f"/organizations/{org_id}/snmp", HttpMethod.PUT, options)

    def get_third_party_vpn_peers(self, org_id: OrganizationId) -> Dict[str, Any]:
        """Returns the organization's third party VPN peer configuration."""
        return self._call(f"/organizations/{org_id}/appliance/vpn/thirdPartyVPNPeers")

    def update_third_party_vpn_peers(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        """Replaces all third party VPN peers.

        Args:
            org_id: Dashboard organization ID.
            options: Mapping with a 'peers' list; each peer takes name,
                publicIp, privateSubnets and secret.

        Raises:
            ValidationError: If options is not a mapping or lacks 'peers'.
        """
        validate_options(options)
        if options is None or not options.get("peers"):
            raise ValidationError("Key 'peers' is missing from supplied options")
        return self._call(f"/organizations/{org_id}/appliance/vpn/thirdPartyVPNPeers", HttpMethod.PUT, options)

    def get_third_party_peers(self, org_id: OrganizationId) -> Dict[str, Any]:
        warn_deprecated("get_third_party_peers", "get_third_party_vpn_peers")
        return self.get_third_party_vpn_peers(org_id)

    def update_third_party_peers(self, org_id: OrganizationId, peers: Sequence[Mapping]) -> Dict[str, Any]:
        warn_deprecated("update_third_party_peers", "update_third_party_vpn_peers")
        if isinstance(peers, (str, bytes, Mapping)) or not isinstance(peers, Sequence):
            raise ValidationError("Peers were not passed as a list")
        return self.update_third_party_vpn_peers(org_id, {"peers": list(peers)})

    def list_all_organizations(self) -> List[Dict[str, Any]]:
        """Returns all organizations the API key administers."""
        return self._call("/organizations")

    def update_organization(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        return self._call(f"/organizations/{org_id}", HttpMethod.PUT, options)

    def create_organization(self, options: Options) -> Dict[str, Any]:
        return self._call("/organizations", HttpMethod.POST, options)

    def clone_organization(self, source_org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        """Clones an organization; options carry the new organization's name."""
        return self._call(f"/organizations/{source_org_id}/clone", HttpMethod.POST, options)

    def claim(self, org_id: OrganizationId, options: Options) -> Any:
        """Claims orders, serials or license keys into an organization.

        Returns:
            The claimed items, or the HTTP status code when the body is empty.
        """
        return self._call(f"/organizations/{org_id}/claim", HttpMethod.POST, options)
