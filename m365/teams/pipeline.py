"""Pipelines for Microsoft Teams commands."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.pipeline import BaseProducer, SafeProcessor

from .guestsettings import get_guest_settings

LOG = logging.getLogger(__name__)


@dataclass
class GuestSettingsListRequest:
    client: Any
    team_id: str


class GuestSettingsListProcessor(SafeProcessor[GuestSettingsListRequest, Dict[str, Any]]):
    def _process_safe(self, payload: GuestSettingsListRequest) -> Dict[str, Any]:
        LOG.info("Retrieving guest settings for team %s...", payload.team_id)
        return get_guest_settings(payload.client, payload.team_id)


class GuestSettingsListProducer(BaseProducer):
    def _produce_success(self, payload: Dict[str, Any], diagnostics: Optional[Dict[str, Any]]) -> None:
        self.writer.print_data(payload)
        LOG.info("DONE")
