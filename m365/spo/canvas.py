"""Web part placement inside a modern page's canvas layout.

A layout is the decoded ``CanvasContent1`` array of a SharePoint page: an
ordered list of controls. Positioned controls carry
``position = {zoneIndex, sectionIndex, sectionFactor, layoutIndex, controlIndex}``.

- Sections are numbered 1..n by the ascending rank of their distinct
  ``zoneIndex``. The numbering is derived from the layout on every call.
- ``sectionIndex`` is the column inside a section.
- ``controlIndex`` runs 1..k inside each (zoneIndex, sectionIndex) pair.

A control without ``controlType`` is an empty column placeholder. Adding a
web part to such a column replaces the placeholder; adding to an occupied
column inserts before the requested order (or appends) and renumbers the
column.

The helpers below mutate the list they are given; add_web_part() works on
a deep copy so a failure leaves the caller's layout untouched.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from ..errors import InvalidColumnError, InvalidSectionError

Control = Dict[str, Any]
Layout = List[Control]

PAGE_SETTINGS_CONTROL_TYPE = 0
WEB_PART_CONTROL_TYPE = 3
EDIT_DISPLAY_MODE = 2
FULL_WIDTH_SECTION_FACTOR = 12


def default_layout() -> Layout:
    """Layout of a page that has never been edited: only the settings marker."""
    return [
        {
            "controlType": PAGE_SETTINGS_CONTROL_TYPE,
            "pageSettingsSlice": {"isDefaultDescription": True, "isDefaultThumbnail": True},
        }
    ]


def default_section() -> Control:
    """Placeholder for section 1, column 1 of an otherwise empty page."""
    return {
        "position": {
            "controlIndex": 1,
            "sectionIndex": 1,
            "zoneIndex": 1,
            "sectionFactor": FULL_WIDTH_SECTION_FACTOR,
            "layoutIndex": 1,
        },
        "emphasis": {},
        "displayMode": EDIT_DISPLAY_MODE,
    }


def extend(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge: copy every key of ``source`` onto ``target``."""
    for key, value in source.items():
        target[key] = value
    return target


def _in_column(control: Control, zone_index: int, column: int) -> bool:
    position = control.get("position")
    return bool(position) and position.get("zoneIndex") == zone_index and position.get("sectionIndex") == column


def _control_index(control: Control) -> int:
    return control["position"].get("controlIndex") or 0


def ensure_default_section(layout: Layout) -> Layout:
    """Give a section-less page (settings marker only) one empty section."""
    if len(layout) == 1:
        layout.insert(0, default_section())
    return layout


def zone_indices(layout: Layout) -> List[int]:
    """Distinct zoneIndex values of positioned controls, ascending."""
    return sorted({
        c["position"]["zoneIndex"]
        for c in layout
        if c.get("position") and c["position"].get("zoneIndex") is not None
    })


def resolve_section(layout: Layout, requested_section: Optional[int] = None) -> int:
    """Return the zoneIndex of a 1-based section number (default: last section)."""
    zones = zone_indices(layout)
    section = requested_section or len(zones)
    if not zones or section > len(zones):
        raise InvalidSectionError(section)
    return zones[section - 1]


def resolve_column(layout: Layout, zone_index: int, requested_column: Optional[int] = None) -> int:
    """Return the list index of the first control in the given column."""
    column = requested_column or 1
    for i, control in enumerate(layout):
        if _in_column(control, zone_index, column):
            return i
    raise InvalidColumnError(column)


def build_control(anchor: Control, web_part: Dict[str, Any]) -> Control:
    """Create the web part control placed at the anchor's position.

    Keys of ``web_part`` (id, webPartId, webPartData, ...) win over the
    defaults.
    """
    control: Control = {
        "controlType": WEB_PART_CONTROL_TYPE,
        "displayMode": EDIT_DISPLAY_MODE,
        "id": web_part.get("id"),
        "position": dict(anchor.get("position") or {}),
        "webPartId": web_part.get("webPartId"),
        "emphasis": {},
    }
    return extend(control, web_part)


def insert_control(
    layout: Layout,
    zone_index: int,
    column: Optional[int],
    order: Optional[int],
    web_part: Dict[str, Any],
) -> Control:
    """Place a web part in (zone_index, column) and return the new control.

    ``order`` ranks only the controls already in the column; when it is
    unset or beyond them the web part is appended.
    """
    column = column or 1
    anchor_index = resolve_column(layout, zone_index, column)
    anchor = layout[anchor_index]
    control = build_control(anchor, web_part)

    if not anchor.get("controlType"):
        # Empty column: the placeholder is replaced and order is irrelevant
        control["position"]["controlIndex"] = 1
        layout[anchor_index] = control
        return control

    in_column = [c for c in layout if _in_column(c, zone_index, column)]
    indices = sorted(_control_index(c) for c in in_column)

    if not order or order > len(indices):
        target = indices[-1]
        offset = 1
    else:
        target = indices[order - 1]
        offset = 0
    target_pos = next(
        i for i, c in enumerate(layout)
        if _in_column(c, zone_index, column) and _control_index(c) == target
    )
    layout.insert(target_pos + offset, control)

    # Close gaps and count the new member
    for i, c in enumerate((c for c in layout if _in_column(c, zone_index, column)), start=1):
        c["position"]["controlIndex"] = i
    return control


def add_web_part(
    layout: Layout,
    web_part: Dict[str, Any],
    section: Optional[int] = None,
    column: Optional[int] = None,
    order: Optional[int] = None,
) -> Layout:
    """Return a copy of ``layout`` with ``web_part`` inserted.

    Args:
        layout: Decoded CanvasContent1 array; not modified.
        web_part: Template with ``id``, ``webPartId`` and ``webPartData``.
        section: 1-based section number, default the last section.
        column: 1-based column number, default 1.
        order: 1-based position among the column's controls, default append.

    Raises:
        InvalidSectionError: section is beyond the sections on the page.
        InvalidColumnError: the section has no such column.
    """
    result = copy.deepcopy(layout)
    ensure_default_section(result)
    zone_index = resolve_section(result, section)
    insert_control(result, zone_index, column, order, copy.deepcopy(web_part))
    return result
