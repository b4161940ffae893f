"""Turns (path, method, options) into a transport-ready request.

GET and DELETE options become query parameters, flattened the way the
Dashboard API expects nested filters:

    {"serial": "Q2XX"}                 -> serial=Q2XX
    {"networkIds": ["N_1", "N_2"]}     -> networkIds[]=N_1&networkIds[]=N_2
    {"filter": {"vlan": 10}}           -> filter[vlan]=10
    {"rules": [{"port": 22}]}          -> rules[][port]=22

POST and PUT options are encoded to the JSON body here, so a body that
cannot be represented as strict JSON fails before anything is sent.
Building is pure: no I/O, no shared state.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from merakidash.domain.exceptions import ValidationError
from merakidash.domain.models.http import ApiRequest, HttpMethod, PreparedRequest

logger = logging.getLogger(__name__)

QueryPairs = List[Tuple[str, str]]


def validate_options(options: Any) -> Optional[Mapping]:
    """Enforces the single options precondition shared by every call site.

    Raises:
        ValidationError: If options were supplied but are not a mapping.
    """
    if options is None:
        return None
    if not isinstance(options, Mapping):
        raise ValidationError(
            f"Options were not passed as a mapping (got {type(options).__name__})"
        )
    return options


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_params(options: Mapping, prefix: str = "") -> QueryPairs:
    """Flattens nested options into ordered (key, value) query pairs."""
    pairs: QueryPairs = []
    for key, value in options.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        pairs.extend(_flatten_value(name, value))
    return pairs


def _flatten_value(name: str, value: Any) -> QueryPairs:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return flatten_params(value, prefix=name)
    if isinstance(value, (list, tuple, set, frozenset)):
        pairs: QueryPairs = []
        for item in value:
            if isinstance(item, Mapping):
                pairs.extend(flatten_params(item, prefix=f"{name}[]"))
            elif item is not None:
                pairs.append((f"{name}[]", _scalar(item)))
        return pairs
    return [(name, _scalar(value))]


def _json_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(options: Mapping) -> bytes:
    """Encodes POST/PUT options as strict JSON.

    Raises:
        ValidationError: If a value has no JSON representation (dates,
            arbitrary objects, NaN or infinity).
    """
    try:
        return json.dumps(dict(options), default=_json_default, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Request body is not JSON serializable: {e}") from e


def join_url(base_url: str, path: str) -> str:
    """Joins the API base URL and a path; absolute URLs pass through."""
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_url.rstrip('/')}{path}"


def build_request(
    base_url: str,
    path: str,
    method: Any,
    options: Any = None,
) -> PreparedRequest:
    """Builds a PreparedRequest.

    Args:
        base_url: API root, e.g. 'https://api.meraki.com/api/v1'.
        path: Resource path, optionally with a query string, or an absolute URL.
        method: HttpMethod or verb name.
        options: Optional mapping of query parameters (GET/DELETE) or body (POST/PUT).

    Returns:
        The transport-ready request.

    Raises:
        ValidationError: On a non-mapping options value, a body that is not
            JSON serializable, an empty path or an unsupported method.
    """
    http_method = HttpMethod.parse(method)
    options = validate_options(options)
    if not path or not str(path).strip():
        raise ValidationError("A request path is required")

    # Query pairs already embedded in the path keep their position.
    scheme, netloc, url_path, query, fragment = urlsplit(join_url(base_url, str(path)))
    params: QueryPairs = parse_qsl(query, keep_blank_values=True)
    url = urlunsplit((scheme, netloc, url_path, "", fragment))

    json_body = None
    body = None
    if options:
        if http_method.sends_body:
            body = encode_body(options)
            json_body = dict(options)
        else:
            params.extend(flatten_params(options))

    logger.debug(f"Built {http_method.value} {url} params={len(params)} body={'yes' if json_body is not None else 'no'}")
    return PreparedRequest(method=http_method, url=url, params=params, json_body=json_body, body=body)


def prepare(base_url: str, request: ApiRequest) -> PreparedRequest:
    return build_request(base_url, request.path, request.method, request.options)
