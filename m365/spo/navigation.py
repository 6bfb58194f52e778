"""SharePoint navigation REST operations."""

from __future__ import annotations

from typing import Any

NAVIGATION_LOCATIONS = ("QuickLaunch", "TopNavigationBar")


def navigation_node_url(web_url: str, location: str, node_id: int) -> str:
    return f"{web_url}/_api/web/navigation/{location.lower()}/getbyid({node_id})"


def remove_navigation_node(client: Any, web_url: str, location: str, node_id: int) -> None:
    digest = client.request_digest(web_url)
    client.delete(
        navigation_node_url(web_url, location, node_id),
        headers={"X-RequestDigest": digest},
    )
