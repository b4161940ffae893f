"""Networks section of the Meraki Dashboard API."""

from typing import Any, Dict, List

from merakidash.core.resources.base import ResourceClient, check_timespan, warn_deprecated
from merakidash.domain.models.common import NetworkId, Options, OptionalOptions, OrganizationId
from merakidash.domain.models.http import HttpMethod
from merakidash.infrastructure.http.request_builder import validate_options


class Networks(ResourceClient):
    """Network CRUD, templates, VPN, policies and traffic endpoints."""

    def get_networks(self, org_id: OrganizationId, options: OptionalOptions = None) -> List[Dict[str, Any]]:
        """Returns the list of networks for an organization, across all pages.

        Args:
            org_id: Dashboard organization ID.
            options: Optional query parameters such as configTemplateId,
                tags, tagsFilterType or perPage.
        """
        return self._call(f"/organizations/{org_id}/networks", HttpMethod.GET, options)

    def get_network(self, network_id: NetworkId) -> Dict[str, Any]:
        return self._call(f"/networks/{network_id}")

    def get_single_network(self, network_id: NetworkId) -> Dict[str, Any]:
        warn_deprecated("get_single_network", "get_network")
        return self.get_network(network_id)

    def update_network(self, network_id: NetworkId, options: Options) -> Dict[str, Any]:
        """Updates a network's name, tags or time zone."""
        return self._call(f"/networks/{network_id}", HttpMethod.PUT, options)

    def create_network(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        """Creates a network.

        Args:
            org_id: Dashboard organization ID.
            options: Requires name and productTypes; tags and timeZone are
                optional.

        Returns:
            The new network's details.
        """
        return self._call(f"/organizations/{org_id}/networks", HttpMethod.POST, options)

    def create_v1_network(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        warn_deprecated("create_v1_network", "create_network")
        return self.create_network(org_id, options)

    def delete_network(self, network_id: NetworkId) -> bool:
        """Deletes a network; True when the server answered 204 No Content."""
        return self._execute(f"/networks/{network_id}", HttpMethod.DELETE).has_status(204)

    def combine_network(self, org_id: OrganizationId, options: Options) -> Dict[str, Any]:
        """Combines networks into one.

        Args:
            org_id: Dashboard organization ID.
            options: name and networkIds, plus an optional enrollmentString.
        """
        return self._call(f"/organizations/{org_id}/networks/combine", HttpMethod.POST, options)

    def get_auto_vpn_settings(self, network_id: NetworkId) -> Dict[str, Any]:
        return self._call(f"/networks/{network_id}/appliance/vpn/siteToSiteVpn")

    def update_auto_vpn_settings(self, network_id: NetworkId, options: Options) -> Dict[str, Any]:
        """Updates site-to-site VPN mode, hubs and subnets for a network."""
        return self._call(f"/networks/{network_id}/appliance/vpn/siteToSiteVpn", HttpMethod.PUT, options)

    def get_ms_access_policies(self, network_id: NetworkId) -> List[Dict[str, Any]]:
        return self._call(f"/networks/{network_id}/switch/accessPolicies")

    def get_group_access_policies(self, network_id: NetworkId) -> List[Dict[str, Any]]:
        return self._call(f"/networks/{network_id}/groupPolicies")

    def create_group_access_policy(self, network_id: NetworkId, options: Options) -> Any:
        return self._call(f"/networks/{network_id}/groupPolicies", HttpMethod.POST, options)

    def update_group_access_policy(self, network_id: NetworkId, group_policy_id: Any, options: Options) -> Any:
        return self._call(
            f"/networks/{network_id}/groupPolicies/{group_policy_id}", HttpMethod.PUT, options
        )

    def bind_network_to_template(self, network_id: NetworkId, options: Options) -> Any:
        """Binds a network to a template; options take configTemplateId and autoBind."""
        return self._call(f"/networks/{network_id}/bind", HttpMethod.POST, options)

    def unbind_network_to_template(self, network_id: NetworkId) -> Any:
        return self._call(f"/networks/{network_id}/unbind", HttpMethod.POST)

    def split_network_from_template(self, network_id: NetworkId) -> Any:
        return self._call(f"/networks/{network_id}/split", HttpMethod.POST)

    def traffic_analysis(self, network_id: NetworkId, options: Options) -> List[Dict[str, Any]]:
        """Returns traffic analysis data for a network.

        Args:
            network_id: Dashboard network ID.
            options: timespan (at most one month, in seconds) and deviceType.

        Raises:
            ValidationError: If options is not a mapping or the timespan is
                out of range. Nothing is sent in either case.
        """
        validate_options(options)
        if options and options.get("timespan") is not None:
            check_timespan(options["timespan"])
        return self._call(f"/networks/{network_id}/traffic", HttpMethod.GET, options)

    def uplink_traffic_shaping(self, network_id: NetworkId) -> Dict[str, Any]:
        """Returns the per-uplink bandwidth limits of a network."""
        return self._call(f"/networks/{network_id}/appliance/trafficShaping/uplinkBandwidth")

    def get_thousandeyes_networks(self, org_id: OrganizationId) -> List[Dict[str, Any]]:
        return self._call(f"/organizations/{org_id}/extensions/thousandEyes/networks")

    def get_thousandeyes_network(self, org_id: OrganizationId, network_id: NetworkId) -> Dict[str, Any]:
        return self._call(f"/organizations/{org_id}/extensions/thousandEyes/networks/{network_id}")
