"""SharePoint modern page REST operations used by the page commands."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from core.constants import ODATA_NOMETADATA

from ..validation import encode_uri_component
from .canvas import Layout, default_layout
from .webparts import find_component, template_from_component

LOG = logging.getLogger(__name__)


@dataclass
class PageState:
    """Canvas layout of a page plus its checkout state."""

    layout: Layout
    checked_out: bool = False


def page_full_name(page_name: str) -> str:
    if ".aspx" not in page_name:
        return f"{page_name}.aspx"
    return page_name


def page_url(web_url: str, page_name: str) -> str:
    name = encode_uri_component(page_full_name(page_name))
    return f"{web_url}/_api/sitepages/pages/GetByUrl('sitepages/{name}')"


def fetch_layout(client: Any, web_url: str, page_name: str) -> PageState:
    res = client.get(f"{page_url(web_url, page_name)}?$select=CanvasContent1,IsPageCheckedOutToCurrentUser") or {}
    raw = res.get("CanvasContent1")
    layout = json.loads(raw) if raw else default_layout()
    return PageState(layout=layout, checked_out=bool(res.get("IsPageCheckedOutToCurrentUser")))


def checkout_page(client: Any, web_url: str, page_name: str) -> None:
    client.post(f"{page_url(web_url, page_name)}/checkoutpage")


def list_client_side_components(client: Any, web_url: str) -> List[Dict[str, Any]]:
    res = client.get(f"{web_url}/_api/web/getclientsidewebparts()") or {}
    return list(res.get("value") or [])


def resolve_web_part_template(client: Any, web_url: str, web_part_id: str) -> Dict[str, Any]:
    """Look the web part up in the site's catalog and build its template."""
    component = find_component(list_client_side_components(client, web_url), web_part_id)
    LOG.debug("WebPart definition: %s", component)
    return template_from_component(component)


def persist_layout(client: Any, web_url: str, page_name: str, layout: Layout) -> None:
    """Save the whole layout back to the page (full replace)."""
    client.post(
        f"{page_url(web_url, page_name)}/savepage",
        {"CanvasContent1": json.dumps(layout)},
        headers={"content-type": ODATA_NOMETADATA},
    )
