"""Helpers shared by the command handlers."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .client import M365Client
from .config_resolver import resolve_settings_from_args

LOG = logging.getLogger(__name__)


def build_client(args) -> M365Client:
    """Create a client from the global --profile/--client-id/--tenant/--token flags."""
    settings = resolve_settings_from_args(args)
    LOG.debug(
        "client_id=%s tenant=%s token=%s profile=%s",
        settings.client_id, settings.tenant, settings.token_path or "<memory>", settings.profile or "",
    )
    return M365Client.from_settings(settings)


def confirm(message: str, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Ask a yes/no question on the terminal; anything but y/yes is a no."""
    ask = input_fn or input
    try:
        answer = ask(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")
