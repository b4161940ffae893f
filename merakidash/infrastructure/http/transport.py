"""Concrete implementation of the Transport interface using requests.

A single requests.Session with a mounted HTTPAdapter keeps connections
alive across calls; the adapter's pool is sized for the number of threads
expected to fan out over devices and networks concurrently.
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from merakidash import __version__
from merakidash.domain.exceptions import TransportError
from merakidash.domain.interfaces.transport import Transport
from merakidash.domain.models.http import ApiResponse, PreparedRequest
from merakidash.domain.models.policies import TransportSettings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Cisco-Meraki-API-Key"

# Substrings urllib3 puts in the message of a DNS resolution failure.
_DNS_FAILURE_MARKERS = ("NameResolutionError", "Failed to resolve", "Name or service not known", "nodename nor servname")


def classify_exception(exc: requests.RequestException) -> bool:
    """Returns True if the failure is transient and worth retrying."""
    if isinstance(exc, requests.Timeout):
        return True
    if isinstance(exc, requests.exceptions.SSLError):
        return False
    if isinstance(exc, requests.ConnectionError):
        text = str(exc)
        return not any(marker in text for marker in _DNS_FAILURE_MARKERS)
    return False


class RequestsTransport(Transport):
    """Sends PreparedRequests over a pooled requests.Session."""

    def __init__(
        self,
        api_key: Optional[str],
        settings: TransportSettings = TransportSettings(),
        session: Optional[requests.Session] = None,
    ):
        """Initializes the transport.

        Args:
            api_key: Dashboard API key sent with every request.
            settings: Timeouts, pool size and TLS verification.
            session: Optional pre-built session (mainly for tests).
        """
        if not api_key:
            raise ValueError("Dashboard API key not provided or found in configuration.")

        self.settings = settings
        self.timeout = (settings.connect_timeout, settings.read_timeout)
        self.session = session or requests.Session()

        # pool_block=False: a saturated pool opens an extra connection
        # instead of queueing one logical call behind another.
        adapter = HTTPAdapter(
            pool_connections=settings.pool_maxsize,
            pool_maxsize=settings.pool_maxsize,
            pool_block=False,
        )
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.verify = settings.verify_ssl
        self.session.headers.update(
            {
                API_KEY_HEADER: api_key.strip(),
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"{settings.user_agent}/{__version__}",
            }
        )
        logger.info(
            f"RequestsTransport initialized: timeout={self.timeout}, "
            f"pool_maxsize={settings.pool_maxsize}, verify_ssl={settings.verify_ssl}"
        )

    def send(self, request: PreparedRequest) -> ApiResponse:
        """Performs exactly one HTTP round trip."""
        try:
            response = self.session.request(
                request.method.value,
                request.url,
                params=request.params or None,
                data=request.body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            transient = classify_exception(e)
            logger.warning(
                f"{type(e).__name__} for {request.method.value} {request.url} "
                f"({'transient' if transient else 'permanent'}): {e}"
            )
            raise TransportError(
                f"{type(e).__name__}: {e}", transient=transient, url=request.url
            ) from e

        logger.debug(f"{request.method.value} {response.url} -> {response.status_code}")
        return ApiResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content or b"",
            url=response.url,
        )

    def close(self) -> None:
        self.session.close()
        logger.debug("RequestsTransport session closed.")
