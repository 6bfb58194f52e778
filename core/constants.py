"""Shared constants: config locations, service endpoints, HTTP defaults."""

from __future__ import annotations

import os
from typing import List, Tuple

APP_DIR = "m365-cli"

# -----------------------------------------------------------------------------
# Config locations
# -----------------------------------------------------------------------------


def _config_roots() -> List[str]:
    """Directories searched for config, most specific first.

    $CREDENTIALS (its directory), then $XDG_CONFIG_HOME, then ~/.config.
    """
    candidates = [
        os.path.dirname(os.environ.get("CREDENTIALS", "")),
        os.environ.get("XDG_CONFIG_HOME", ""),
        "~/.config",
    ]
    return [os.path.expanduser(c) for c in candidates if c]


def credential_ini_paths() -> List[str]:
    """credentials.ini candidates in lookup order, without duplicates."""
    paths = [os.environ.get("CREDENTIALS", "")]
    for root in _config_roots():
        paths += [os.path.join(root, "credentials.ini"), os.path.join(root, APP_DIR, "credentials.ini")]
    return list(dict.fromkeys(os.path.expanduser(p) for p in paths if p))


# -----------------------------------------------------------------------------
# Service endpoints
# -----------------------------------------------------------------------------

GRAPH_RESOURCE = "https://graph.microsoft.com"
GRAPH_API_URL = f"{GRAPH_RESOURCE}/v1.0"

# Power Automate (Flow) management API
AZURE_MGMT_RESOURCE = "https://management.azure.com"
FLOW_API_VERSION = "2016-11-01"

LOGIN_AUTHORITY = "https://login.microsoftonline.com"

# PnP Management Shell, the multi-tenant public client used when no app is configured
DEFAULT_CLIENT_ID = "31359c7f-bd7e-475c-86db-fdb8c937548e"
DEFAULT_TENANT = "common"

DEFAULT_TOKEN_CACHE = os.path.join(_config_roots()[0], APP_DIR, "msal_token.json")


# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------

# (connect_seconds, read_seconds)
DEFAULT_REQUEST_TIMEOUT: Tuple[int, int] = (10, 30)

ODATA_NOMETADATA = "application/json;odata=nometadata"
GRAPH_NOMETADATA = "application/json;odata.metadata=none"
