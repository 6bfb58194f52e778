"""Command handlers for Microsoft Teams."""
from __future__ import annotations

from core.pipeline import run_pipeline

from ..helpers import build_client
from ..validation import require_guid
from .pipeline import (
    GuestSettingsListProcessor,
    GuestSettingsListProducer,
    GuestSettingsListRequest,
)


def run_teams_guestsettings_list(args) -> int:
    team_id = require_guid(args.team_id)
    request = GuestSettingsListRequest(client=build_client(args), team_id=team_id)
    return run_pipeline(request, GuestSettingsListProcessor(), GuestSettingsListProducer(args._output))
