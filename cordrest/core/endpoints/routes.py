"""Path and query-string helpers shared by the endpoint functions."""

from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode


class Paths:
    """Path segments used by the catalog."""
    APPLICATIONS = "applications"
    CHANNELS = "channels"
    GUILDS = "guilds"
    ME = "@me"
    MESSAGES = "messages"
    OAUTH2 = "oauth2"
    REACTIONS = "reactions"
    TOKEN = "token"
    TYPING = "typing"
    USERS = "users"


def join_path(*parts: Any) -> str:
    """Joins path segments with '/'. No leading slash; the API base ends with one."""
    return "/".join(str(part) for part in parts)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    """Returns '?k=v&...' for the non-None params, or '' when there are none."""
    if not params:
        return ""
    pairs = {k: _query_value(v) for k, v in params.items() if v is not None}
    if not pairs:
        return ""
    return "?" + urlencode(pairs)


def quote_segment(value: str) -> str:
    """Percent-encodes a single path segment (e.g. a unicode emoji or 'name:id')."""
    return quote(value, safe="")
