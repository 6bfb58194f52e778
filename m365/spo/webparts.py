"""Client-side web part catalog.

Maps the out-of-the-box web part names to their component ids and turns a
component from the site's catalog (``_api/web/getclientsidewebparts()``)
into the template the canvas editor inserts.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Iterable, List, Optional

from core.cli_errors import UsageError

from ..errors import MalformedJsonPayloadError, UnknownWebPartError
from ..validation import parse_json_option
from .canvas import extend

STANDARD_WEB_PARTS: Dict[str, str] = {
    "ContentRollup": "daf0b71c-6de8-4ef7-b511-faae7c388708",
    "BingMap": "e377ea37-9047-43b9-8cdb-a761be2f8e09",
    "ContentEmbed": "490d7c76-1824-45b2-9de3-676421c997fa",
    "DocumentEmbed": "b7dd04e1-19ce-4b24-9132-b60a1c2b910d",
    "Image": "d1d91016-032f-456d-98a4-721247c305e8",
    "ImageGallery": "af8be689-990e-492a-81f7-ba3e4cd3ed9c",
    "LinkPreview": "6410b3b6-d440-4663-8744-378976dc041e",
    "NewsFeed": "0ef418ba-5d19-4ade-9db0-b339873291d0",
    "NewsReel": "a5df8fdf-b508-4b66-98a6-d83bc2597f63",
    "PowerBIReportEmbed": "58fcd18b-e1af-4b0a-b23b-422c2c52d5a2",
    "QuickChart": "91a50c94-865f-4f5c-8b4e-e49659e69772",
    "SiteActivity": "eb95c819-ab8f-4689-bd03-0c2d65d47b1f",
    "VideoEmbed": "275c0095-a77e-4f6d-a2a0-6a7626911518",
    "YammerEmbed": "31e9537e-f9dc-40a4-8834-0e3b7df418bc",
    "Events": "20745d7d-8581-4a6c-bf26-68279bc123fc",
    "GroupCalendar": "6676088b-e28e-4a90-b9cb-d0d0303cd2eb",
    "Hero": "c4bd7b2f-7b6e-4599-8485-16504575f590",
    "List": "f92bf067-bc19-489e-a556-7fe95f508720",
    "PageTitle": "cbe7b0a9-3504-44dd-a3a3-0e5cacd07788",
    "People": "7f718435-ee4d-431c-bdbf-9c4ff326f46e",
    "QuickLinks": "c70391ea-0b10-4ee9-b2b4-006d3fcad0cd",
    "Divider": "2161a1c6-db61-4731-b97c-3cdb303f7cbb",
    "MicrosoftForms": "b19b3b9e-8d13-4fec-a93c-401a091c0707",
    "Spacer": "8654b779-4886-46d4-8ffb-b5ed960ee986",
}


def standard_web_part_id(name: str) -> str:
    try:
        return STANDARD_WEB_PARTS[name]
    except KeyError:
        raise UsageError(
            f"{name} is not a valid standard web part type",
            hint="Valid types: " + ", ".join(sorted(STANDARD_WEB_PARTS)),
        ) from None


def _normalize_id(component_id: str) -> str:
    return component_id.strip("{}").lower()


def find_component(components: Iterable[Dict[str, Any]], web_part_id: str) -> Dict[str, Any]:
    """Return the catalog component whose Id matches, braces optional."""
    wanted = web_part_id.lower()
    for component in components:
        cid = str(component.get("Id", "")).lower()
        if cid == wanted or cid == f"{{{wanted}}}":
            return component
    raise UnknownWebPartError(web_part_id)


def template_from_component(component: Dict[str, Any], instance_id: Optional[str] = None) -> Dict[str, Any]:
    """Build a web part template from the component's first preconfigured entry."""
    instance_id = instance_id or str(uuid.uuid4())
    component_id = _normalize_id(str(component["Id"]))
    manifest = component.get("Manifest") or "{}"
    if isinstance(manifest, str):
        manifest = json.loads(manifest)
    entries: List[Dict[str, Any]] = manifest.get("preconfiguredEntries") or [{}]
    entry = entries[0]
    return {
        "id": instance_id,
        "webPartData": {
            "dataVersion": "1.0",
            "description": (entry.get("description") or {}).get("default"),
            "id": component_id,
            "instanceId": instance_id,
            "properties": entry.get("properties"),
            "title": (entry.get("title") or {}).get("default"),
        },
        "webPartId": component_id,
    }


def apply_web_part_options(
    template: Dict[str, Any],
    properties: Optional[str] = None,
    data: Optional[str] = None,
) -> Dict[str, Any]:
    """Overlay caller-supplied JSON on a template, caller wins key by key.

    ``properties`` merges into ``webPartData.properties``; ``data`` merges
    into ``webPartData`` and its ``instanceId`` becomes the control id.
    """
    parsed_properties = parse_json_option("webPartProperties", properties)
    parsed_data = parse_json_option("webPartData", data)
    for option, raw, parsed in (
        ("webPartProperties", properties, parsed_properties),
        ("webPartData", data, parsed_data),
    ):
        if parsed is not None and not isinstance(parsed, dict):
            raise MalformedJsonPayloadError(option, raw, "expected a JSON object")

    web_part_data = template.setdefault("webPartData", {})
    if parsed_properties is not None:
        web_part_data["properties"] = extend(dict(web_part_data.get("properties") or {}), parsed_properties)
    if parsed_data is not None:
        template["webPartData"] = extend(web_part_data, parsed_data)
        template["id"] = template["webPartData"].get("instanceId")
    return template
