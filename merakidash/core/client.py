"""DashboardClient: one object giving access to every resource wrapper.

Builds the request engine from configuration unless one is injected, then
shares that single engine (and so its connection pool and rate limiter)
between all resource sections.
"""

import logging
from typing import Any, Optional

from merakidash.core.engine import RequestEngine
from merakidash.core.resources import Clients, Devices, Networks, Organizations, SwitchPorts
from merakidash.domain.exceptions import ValidationError
from merakidash.domain.interfaces.rate_limiter import RateLimiter
from merakidash.domain.models.http import ApiResult, HttpMethod
from merakidash.domain.models.policies import RetryPolicy, TransportSettings
from merakidash.infrastructure.config import settings
from merakidash.infrastructure.http.transport import RequestsTransport
from merakidash.infrastructure.resilience.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


def build_engine(
    api_key: Optional[str] = None,
    policy: Optional[RetryPolicy] = None,
    rate_limiter: Optional[RateLimiter] = None,
    transport_settings: Optional[TransportSettings] = None,
) -> RequestEngine:
    """Wires a RequestEngine from configuration, with explicit overrides.

    Raises:
        ValidationError: If no API key is given or configured.
    """
    api_key = api_key or settings.get_api_key()
    if not api_key:
        raise ValidationError(
            f"No Dashboard API key configured. Set {settings.API_KEY_ENV_VAR} or meraki.api_key."
        )
    transport_settings = transport_settings or settings.get_transport_settings()
    policy = policy or settings.get_retry_policy()
    rate_limiter = rate_limiter or SlidingWindowRateLimiter(settings.get_rate_limit_settings())
    transport = RequestsTransport(api_key, transport_settings)
    return RequestEngine(transport, rate_limiter, base_url=transport_settings.base_url, policy=policy)


class DashboardClient:
    """Entry point for library users.

    Example:
        with DashboardClient(api_key="...") as dashboard:
            for org in dashboard.organizations.list_all_organizations():
                print(dashboard.networks.get_networks(org["id"]))
    """

    def __init__(self, api_key: Optional[str] = None, engine: Optional[RequestEngine] = None, **engine_options: Any):
        """Initializes the client.

        Args:
            api_key: Dashboard API key; falls back to configuration.
            engine: Pre-built engine; api_key and engine_options are ignored
                when given.
            **engine_options: policy, rate_limiter or transport_settings
                overrides for build_engine.
        """
        self.engine = engine or build_engine(api_key, **engine_options)
        self.organizations = Organizations(self.engine)
        self.networks = Networks(self.engine)
        self.devices = Devices(self.engine)
        self.switch_ports = SwitchPorts(self.engine)
        self.clients = Clients(self.engine)
        logger.debug("DashboardClient initialized.")

    def request(
        self, path: str, method: Any = HttpMethod.GET, options: Any = None, paginate: bool = True
    ) -> ApiResult:
        """Performs an arbitrary call for endpoints without a wrapper."""
        return self.engine.execute(path, method, options, paginate=paginate)

    def close(self) -> None:
        self.engine.close()

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
