"""Pipelines for Power Automate (Flow) commands."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.pipeline import BaseProducer, SafeProcessor

from .runs import list_flow_runs, summarize_run

LOG = logging.getLogger(__name__)

RUN_COLUMNS = ["name", "startTime", "status"]


@dataclass
class FlowRunListRequest:
    client: Any
    environment: str
    flow: str


class FlowRunListProcessor(SafeProcessor[FlowRunListRequest, List[Dict[str, Any]]]):
    def _process_safe(self, payload: FlowRunListRequest) -> List[Dict[str, Any]]:
        LOG.info("Retrieving list of runs for Microsoft Flow %s...", payload.flow)
        return list_flow_runs(payload.client, payload.environment, payload.flow)


class FlowRunListProducer(BaseProducer):
    """JSON output keeps the raw runs; other formats get name/startTime/status."""

    def _produce_success(self, payload: List[Dict[str, Any]], diagnostics: Optional[Dict[str, Any]]) -> None:
        if not payload:
            LOG.info("No runs found")
            return
        if self.writer.is_json:
            self.writer.print_data(payload)
        else:
            self.writer.print_data([summarize_run(r) for r in payload], headers=RUN_COLUMNS)
