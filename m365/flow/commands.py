"""Command handlers for Power Automate (Flow)."""
from __future__ import annotations

from core.pipeline import run_pipeline

from ..helpers import build_client
from .pipeline import FlowRunListProcessor, FlowRunListProducer, FlowRunListRequest


def run_flow_run_list(args) -> int:
    request = FlowRunListRequest(
        client=build_client(args),
        environment=args.environment,
        flow=args.flow,
    )
    return run_pipeline(request, FlowRunListProcessor(), FlowRunListProducer(args._output))
