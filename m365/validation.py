"""Option validators shared by the Microsoft 365 commands."""
from __future__ import annotations

import json
import re
from typing import Any, Optional
from urllib.parse import quote

from core.cli_errors import UsageError

from .errors import MalformedJsonPayloadError

_GUID_RE = re.compile(r"^[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}$")


def is_valid_guid(value: Optional[str]) -> bool:
    return bool(value) and bool(_GUID_RE.match(str(value)))


def require_guid(value: Optional[str], message: Optional[str] = None) -> str:
    if not is_valid_guid(value):
        raise UsageError(message or f"{value} is not a valid GUID")
    return str(value)


def require_sharepoint_url(url: Optional[str]) -> str:
    """Accept only https URLs on a SharePoint Online host."""
    if not url or not url.startswith("https://") or ".sharepoint." not in url:
        raise UsageError(
            f"{url} is not a valid SharePoint Online site URL",
            hint="Use the absolute site URL, e.g. https://contoso.sharepoint.com/sites/team-a",
        )
    return url.rstrip("/")


def require_positive(name: str, value: Optional[int]) -> Optional[int]:
    """None passes through; anything below 1 is rejected."""
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise UsageError(f"The value of parameter {name} must be 1 or higher")
    return value


def parse_json_option(option: str, raw: Optional[str]) -> Any:
    """Parse a JSON option value; None when the option was not given."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise MalformedJsonPayloadError(option, raw, e) from e


def encode_uri_component(value: Any) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(str(value), safe="!~*'()")
