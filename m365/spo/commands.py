"""Command handlers for SharePoint Online."""
from __future__ import annotations

import logging

from core.cli_errors import UsageError
from core.pipeline import run_pipeline

from ..helpers import build_client, confirm
from ..validation import (
    is_valid_guid,
    parse_json_option,
    require_positive,
    require_sharepoint_url,
)
from .navigation import NAVIGATION_LOCATIONS
from .pipeline import (
    NavigationNodeRemoveProcessor,
    NavigationNodeRemoveProducer,
    NavigationNodeRemoveRequest,
    WebPartAddProcessor,
    WebPartAddProducer,
    WebPartAddRequest,
)
from .webparts import standard_web_part_id

LOG = logging.getLogger(__name__)


def _resolve_web_part_id(args) -> str:
    standard = getattr(args, "standard_web_part", None)
    custom = getattr(args, "web_part_id", None)
    if not standard and not custom:
        raise UsageError("Specify either the standardWebPart or the webPartId option")
    if standard and custom:
        raise UsageError("Specify either the standardWebPart or the webPartId option but not both")
    if custom:
        if not is_valid_guid(custom):
            raise UsageError(f"The webPartId '{custom}' is not a valid GUID")
        return custom
    return standard_web_part_id(standard)


def run_spo_page_clientsidewebpart_add(args) -> int:
    web_part_id = _resolve_web_part_id(args)
    if args.web_part_properties and args.web_part_data:
        raise UsageError("Specify webPartProperties or webPartData but not both")
    parse_json_option("webPartProperties", args.web_part_properties)
    parse_json_option("webPartData", args.web_part_data)
    section = require_positive("section", args.section)
    column = require_positive("column", args.column)
    order = require_positive("order", args.order)
    web_url = require_sharepoint_url(args.web_url)

    LOG.debug("WebPartId: %s", web_part_id)
    request = WebPartAddRequest(
        client=build_client(args),
        web_url=web_url,
        page_name=args.page_name,
        web_part_id=web_part_id,
        web_part_properties=args.web_part_properties,
        web_part_data=args.web_part_data,
        section=section,
        column=column,
        order=order,
        dry_run=getattr(args, "dry_run", False),
    )
    return run_pipeline(request, WebPartAddProcessor(), WebPartAddProducer(args._output))


def _parse_node_id(value) -> int:
    try:
        return int(str(value))
    except ValueError:
        raise UsageError(f"{value} is not a number") from None


def run_spo_navigation_node_remove(args) -> int:
    web_url = require_sharepoint_url(args.web_url)
    if args.location not in NAVIGATION_LOCATIONS:
        raise UsageError(
            f"{args.location} is not a valid value for the location option. "
            f"Allowed values are {'|'.join(NAVIGATION_LOCATIONS)}"
        )
    node_id = _parse_node_id(args.id)
    dry_run = getattr(args, "dry_run", False)

    if not args.confirm and not dry_run:
        if not confirm(f"Are you sure you want to remove the node {node_id} from the navigation?"):
            LOG.info("Aborted")
            return 0

    request = NavigationNodeRemoveRequest(
        client=build_client(args),
        web_url=web_url,
        location=args.location,
        node_id=node_id,
        dry_run=dry_run,
    )
    return run_pipeline(request, NavigationNodeRemoveProcessor(), NavigationNodeRemoveProducer(args._output))
