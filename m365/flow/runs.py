"""Power Automate flow runs via the Azure management endpoint."""

from __future__ import annotations

from typing import Any, Dict, List

from core.constants import AZURE_MGMT_RESOURCE, FLOW_API_VERSION

from ..validation import encode_uri_component


def flow_runs_url(environment: str, flow: str) -> str:
    return (
        f"{AZURE_MGMT_RESOURCE}/providers/Microsoft.ProcessSimple/environments/"
        f"{encode_uri_component(environment)}/flows/{encode_uri_component(flow)}/runs"
        f"?api-version={FLOW_API_VERSION}"
    )


def list_flow_runs(client: Any, environment: str, flow: str) -> List[Dict[str, Any]]:
    res = client.get(flow_runs_url(environment, flow), accept="application/json") or {}
    return list(res.get("value") or [])


def summarize_run(run: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a run to the columns shown in text output."""
    props = run.get("properties") or {}
    return {
        "name": run.get("name"),
        "startTime": props.get("startTime"),
        "status": props.get("status"),
    }
