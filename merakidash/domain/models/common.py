"""Defines common Value Objects used across the Dashboard resources.

These objects represent simple identifiers and option containers, giving
the wrapper signatures semantic clarity although they are plain values at
runtime.
"""

from typing import Any, Mapping, NewType, Optional

# === Identifiers ===
OrganizationId = NewType("OrganizationId", str)
NetworkId = NewType("NetworkId", str)            # e.g. 'L_123456' or 'N_123456'
DeviceSerial = NewType("DeviceSerial", str)      # e.g. 'Q2XX-XXXX-XXXX'

# === Pagination ===
PageCursor = NewType("PageCursor", str)          # Absolute URL from a rel=next Link header

# === Options ===
# Ordered key/value container passed through to the engine verbatim.
# Values are opaque: scalars, lists or nested mappings.
Options = Mapping[str, Any]
OptionalOptions = Optional[Options]

# Longest client/traffic timespan the Dashboard accepts (one month).
MAX_TIMESPAN_SECONDS = 2_592_000
