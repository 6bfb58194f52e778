"""Microsoft Graph team guest settings."""

from __future__ import annotations

from typing import Any, Dict

from core.constants import GRAPH_API_URL, GRAPH_NOMETADATA

from ..validation import encode_uri_component


def get_guest_settings(client: Any, team_id: str) -> Dict[str, Any]:
    res = client.get(
        f"{GRAPH_API_URL}/teams/{encode_uri_component(team_id)}?$select=guestSettings",
        accept=GRAPH_NOMETADATA,
    ) or {}
    return res.get("guestSettings") or {}
