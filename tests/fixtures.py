"""Shared test fixtures and utilities.

This module provides common helpers to simplify testing the m365 commands.
"""

from __future__ import annotations

import io
import json
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from core.cli_output import OutputConfig, OutputFormat, OutputWriter

REPO_ROOT = Path(__file__).resolve().parents[1]

WEB_URL = "https://contoso.sharepoint.com/sites/team-a"
TEAM_ID = "00000000-0000-0000-0000-000000000000"
IMAGE_WEB_PART_ID = "d1d91016-032f-456d-98a4-721247c305e8"


# -----------------------------------------------------------------------------
# Path helpers
# -----------------------------------------------------------------------------


def repo_root() -> Path:
    return REPO_ROOT


def bin_path(name: str) -> Path:
    return REPO_ROOT / "bin" / name


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_stdout():
    """Context manager that captures stdout and yields a StringIO buffer."""
    buf = io.StringIO()
    with redirect_stdout(buf):
        yield buf


@contextmanager
def capture_stderr():
    buf = io.StringIO()
    with redirect_stderr(buf):
        yield buf


def make_writer(fmt: str = "text", quiet: bool = False) -> OutputWriter:
    """OutputWriter bound to sys.stdout at call time (works with capture_stdout)."""
    return OutputWriter(OutputConfig(format=OutputFormat(fmt), quiet=quiet))


def make_args(**kwargs) -> SimpleNamespace:
    """Create a SimpleNamespace with the global CLI defaults merged with kwargs."""
    defaults = {
        "profile": None,
        "client_id": None,
        "tenant": None,
        "token": None,
        "verbose": False,
        "debug": False,
        "quiet": False,
        "dry_run": False,
        "output": "text",
    }
    defaults.update(kwargs)
    args = SimpleNamespace(**defaults)
    args._output = make_writer(args.output, args.quiet)
    return args


# -----------------------------------------------------------------------------
# Canvas and catalog builders
# -----------------------------------------------------------------------------


def settings_marker() -> Dict[str, Any]:
    return {"controlType": 0, "pageSettingsSlice": {"isDefaultDescription": True, "isDefaultThumbnail": True}}


def placeholder(zone: int, column: int = 1, factor: int = 12) -> Dict[str, Any]:
    """Empty column placeholder (no controlType)."""
    return {
        "position": {
            "zoneIndex": zone,
            "sectionIndex": column,
            "sectionFactor": factor,
            "layoutIndex": 1,
            "controlIndex": 1,
        },
        "emphasis": {},
        "displayMode": 2,
    }


def text_control(zone: int, column: int, index: int, control_id: str, factor: int = 12) -> Dict[str, Any]:
    return {
        "controlType": 4,
        "id": control_id,
        "position": {
            "zoneIndex": zone,
            "sectionIndex": column,
            "sectionFactor": factor,
            "layoutIndex": 1,
            "controlIndex": index,
        },
        "innerHTML": f"<p>{control_id}</p>",
    }


def web_part_template(instance_id: str = "new-wp", web_part_id: str = IMAGE_WEB_PART_ID) -> Dict[str, Any]:
    return {
        "id": instance_id,
        "webPartId": web_part_id,
        "webPartData": {
            "dataVersion": "1.0",
            "description": "Add an image",
            "id": web_part_id,
            "instanceId": instance_id,
            "properties": {"imageSourceType": 2},
            "title": "Image",
        },
    }


def catalog_component(
    web_part_id: str = IMAGE_WEB_PART_ID,
    title: str = "Image",
    properties: Optional[Dict[str, Any]] = None,
    braces: bool = True,
) -> Dict[str, Any]:
    """A getclientsidewebparts() entry; Manifest is a JSON string as served."""
    manifest = {
        "id": web_part_id,
        "preconfiguredEntries": [
            {
                "title": {"default": title},
                "description": {"default": f"Add a {title.lower()}"},
                "properties": properties if properties is not None else {"imageSourceType": 2},
            }
        ],
    }
    return {
        "Id": f"{{{web_part_id}}}" if braces else web_part_id,
        "Name": web_part_id,
        "Manifest": json.dumps(manifest),
        "Status": 0,
    }


def positions(layout: List[Dict[str, Any]]) -> List[tuple]:
    """(zoneIndex, sectionIndex, controlIndex, id) of positioned controls, in list order."""
    out = []
    for c in layout:
        p = c.get("position")
        if p:
            out.append((p.get("zoneIndex"), p.get("sectionIndex"), p.get("controlIndex"), c.get("id")))
    return out
