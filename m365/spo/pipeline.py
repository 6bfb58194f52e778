"""Pipelines for SharePoint Online commands."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.pipeline import BaseProducer, SafeProcessor

from .canvas import Layout, add_web_part
from .navigation import remove_navigation_node
from .pages import (
    checkout_page,
    fetch_layout,
    page_full_name,
    persist_layout,
    resolve_web_part_template,
)
from .webparts import apply_web_part_options

LOG = logging.getLogger(__name__)


# -------------------- Page web part add --------------------

@dataclass
class WebPartAddRequest:
    """Validated options of `spo page clientsidewebpart add`."""
    client: Any
    web_url: str
    page_name: str
    web_part_id: str
    web_part_properties: Optional[str] = None
    web_part_data: Optional[str] = None
    section: Optional[int] = None
    column: Optional[int] = None
    order: Optional[int] = None
    dry_run: bool = False


@dataclass
class WebPartAddResult:
    page_name: str
    layout: Layout
    web_part: Dict[str, Any]
    persisted: bool = True


class WebPartAddProcessor(SafeProcessor[WebPartAddRequest, WebPartAddResult]):
    """Fetch the page layout, insert the web part and save the page."""

    def _process_safe(self, payload: WebPartAddRequest) -> WebPartAddResult:
        client = payload.client

        LOG.info("Retrieving page information...")
        state = fetch_layout(client, payload.web_url, payload.page_name)
        if not state.checked_out and not payload.dry_run:
            checkout_page(client, payload.web_url, payload.page_name)

        LOG.info("Retrieving definition for web part %s...", payload.web_part_id)
        web_part = resolve_web_part_template(client, payload.web_url, payload.web_part_id)

        LOG.info("Setting client-side web part layout and properties...")
        apply_web_part_options(web_part, payload.web_part_properties, payload.web_part_data)
        layout = add_web_part(
            state.layout,
            web_part,
            section=payload.section,
            column=payload.column,
            order=payload.order,
        )

        page = page_full_name(payload.page_name)
        if payload.dry_run:
            return WebPartAddResult(page_name=page, layout=layout, web_part=web_part, persisted=False)
        persist_layout(client, payload.web_url, payload.page_name, layout)
        return WebPartAddResult(page_name=page, layout=layout, web_part=web_part)


class WebPartAddProducer(BaseProducer):
    def _produce_success(self, payload: WebPartAddResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        if not payload.persisted:
            self.writer.print_dry_run(
                f"Would add web part {payload.web_part.get('webPartId')} to {payload.page_name}; resulting layout:"
            )
            self.writer.print_data(payload.layout)
            return
        LOG.info("DONE")


# -------------------- Navigation node remove --------------------

@dataclass
class NavigationNodeRemoveRequest:
    client: Any
    web_url: str
    location: str
    node_id: int
    dry_run: bool = False


@dataclass
class NavigationNodeRemoveResult:
    location: str
    node_id: int
    removed: bool = True


class NavigationNodeRemoveProcessor(SafeProcessor[NavigationNodeRemoveRequest, NavigationNodeRemoveResult]):
    def _process_safe(self, payload: NavigationNodeRemoveRequest) -> NavigationNodeRemoveResult:
        if payload.dry_run:
            return NavigationNodeRemoveResult(payload.location, payload.node_id, removed=False)
        LOG.info("Removing navigation node %s from %s...", payload.node_id, payload.location)
        remove_navigation_node(payload.client, payload.web_url, payload.location, payload.node_id)
        return NavigationNodeRemoveResult(payload.location, payload.node_id)


class NavigationNodeRemoveProducer(BaseProducer):
    def _produce_success(self, payload: NavigationNodeRemoveResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        if not payload.removed:
            self.writer.print_dry_run(f"Would remove navigation node {payload.node_id} from {payload.location}")
            return
        LOG.info("DONE")
