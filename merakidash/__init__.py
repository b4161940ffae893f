"""merakidash: a Meraki Dashboard API client.

Thin resource wrappers (organizations, networks, devices, switch ports,
clients) on top of a shared request engine that handles retries, rate
limiting, pagination and response normalization.
"""

__version__ = "0.1.0"
