from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from typing import Dict, Optional

from core.constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_TENANT,
    DEFAULT_TOKEN_CACHE,
    credential_ini_paths,
)

_SECTION = "m365"

ENV_CLIENT_ID = "M365_CLI_CLIENT_ID"
ENV_TENANT = "M365_CLI_TENANT"
ENV_TOKEN = "M365_CLI_TOKEN"  # noqa: S105 - env var name, not a secret


def expand_path(path: Optional[str]) -> Optional[str]:
    if not path:
        return path
    return os.path.expanduser(path)


def default_token_path() -> str:
    return DEFAULT_TOKEN_CACHE


@dataclass
class ConnectionSettings:
    """Resolved settings used to build an M365Client."""

    client_id: str
    tenant: str
    token_path: Optional[str]
    profile: Optional[str] = None


def _read_ini() -> Dict[str, Dict[str, str]]:
    merged_sections: Dict[str, Dict[str, str]] = {}
    # Earlier paths win; later files only fill missing keys
    for p in credential_ini_paths():
        if not os.path.exists(p):
            continue
        cp = configparser.ConfigParser()
        try:
            cp.read(p)
        except configparser.Error:  # nosec B112 - skip unreadable file
            continue
        for section in cp.sections():
            sec = merged_sections.setdefault(section, {})
            for k, v in cp.items(section):
                sec.setdefault(k, v)
    return merged_sections


def _get_ini_section(profile: Optional[str]) -> Dict[str, str]:
    ini = _read_ini()
    if profile:
        sec = ini.get(f"{_SECTION}.{profile}")
        if sec:
            return sec
    return ini.get(_SECTION, {})


def resolve_settings(
    profile: Optional[str] = None,
    client_id: Optional[str] = None,
    tenant: Optional[str] = None,
    token_path: Optional[str] = None,
) -> ConnectionSettings:
    """Fold CLI flags over environment, INI profile and built-in defaults.

    Resolution order: CLI arg > environment > INI profile > default.
    """
    sec = _get_ini_section(profile)
    resolved_client = (
        client_id
        or os.environ.get(ENV_CLIENT_ID)
        or sec.get("client_id")
        or DEFAULT_CLIENT_ID
    )
    resolved_tenant = (
        tenant
        or os.environ.get(ENV_TENANT)
        or sec.get("tenant")
        or DEFAULT_TENANT
    )
    resolved_token = (
        token_path
        or os.environ.get(ENV_TOKEN)
        or sec.get("token")
        or default_token_path()
    )
    return ConnectionSettings(
        client_id=resolved_client,
        tenant=resolved_tenant,
        token_path=expand_path(resolved_token),
        profile=profile,
    )


def resolve_settings_from_args(args) -> ConnectionSettings:
    """Resolve settings from an argparse namespace carrying the global options."""
    return resolve_settings(
        profile=getattr(args, "profile", None),
        client_id=getattr(args, "client_id", None),
        tenant=getattr(args, "tenant", None),
        token_path=getattr(args, "token", None),
    )
