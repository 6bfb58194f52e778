"""Authenticated REST client for Microsoft 365 services.

One client talks to Microsoft Graph, SharePoint Online and the Azure
management endpoint. Tokens come from an MSAL public client whose cache is
persisted to ``token_path``; each service gets its own ``<resource>/.default``
token, acquired silently once an account is in the cache.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import msal
import requests

from core.cli_errors import AuthError, NetworkError
from core.constants import DEFAULT_REQUEST_TIMEOUT, LOGIN_AUTHORITY, ODATA_NOMETADATA

from .config_resolver import ConnectionSettings
from .errors import ApiError

LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT = DEFAULT_REQUEST_TIMEOUT

# Refresh tokens this many seconds before they expire
_EXPIRY_SKEW = 60


class _TimeoutRequestsWrapper:
    """Wraps the requests module so every call carries a default timeout."""

    def __init__(self, requests_mod: Any, timeout: Any) -> None:
        self._requests = requests_mod
        self._timeout = timeout

    def _call(self, method: str, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("timeout", self._timeout)
        return getattr(self._requests, method)(url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> Any:
        return self._call("get", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        return self._call("post", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Any:
        return self._call("patch", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Any:
        return self._call("put", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Any:
        return self._call("delete", url, **kwargs)


def _requests() -> _TimeoutRequestsWrapper:
    return _TimeoutRequestsWrapper(requests, DEFAULT_TIMEOUT)


def _msal():
    return msal


def resource_for(url: str) -> str:
    """Return the token resource (scheme://host) a request URL belongs to."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def odata_error_message(resp: Any) -> str:
    """Pull the human-readable message out of an OData or Graph error body."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("odata.error") or body.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, dict):
                msg = msg.get("value")
            if msg:
                return str(msg)
        elif isinstance(err, str):
            return str(body.get("error_description") or err)
        if body.get("message"):
            return str(body["message"])
    return resp.text or f"HTTP {resp.status_code}"


class M365Client:
    """REST client with per-resource bearer tokens."""

    def __init__(
        self,
        client_id: str,
        tenant: str = "common",
        token_path: Optional[str] = None,
    ) -> None:
        self.client_id = client_id
        self.tenant = tenant
        self.token_path = token_path
        self._cache = None
        self._app = None
        self._tokens: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "M365Client":
        return cls(client_id=settings.client_id, tenant=settings.tenant, token_path=settings.token_path)

    # -------------------- Authentication --------------------
    def authenticate(self) -> None:
        """Load the token cache and build the MSAL application."""
        lib = _msal()
        cache = lib.SerializableTokenCache()
        if self.token_path and os.path.exists(self.token_path):
            with open(self.token_path, "r", encoding="utf-8") as fh:
                cache.deserialize(fh.read())
        self._cache = cache
        self._app = lib.PublicClientApplication(
            self.client_id,
            authority=f"{LOGIN_AUTHORITY}/{self.tenant}",
            token_cache=cache,
        )

    def access_token(self, resource: str) -> str:
        """Return a bearer token for ``resource``, acquiring one if needed."""
        cached = self._tokens.get(resource)
        if cached and cached.get("expires_at", 0) > time.time() + _EXPIRY_SKEW:
            return cached["access_token"]

        if self._app is None:
            self.authenticate()
        app = self._app
        scopes = [f"{resource}/.default"]

        result = None
        accounts = app.get_accounts()
        if accounts:
            result = app.acquire_token_silent(scopes, account=accounts[0])
        if not result:
            result = self._device_flow(app, scopes)
        if "access_token" not in result:
            raise AuthError(
                f"Could not acquire a token for {resource}: {result.get('error_description') or result.get('error')}",
            )

        self._tokens[resource] = {
            "access_token": result["access_token"],
            "expires_at": time.time() + int(result.get("expires_in", 3600)),
        }
        self._save_cache()
        return result["access_token"]

    def _device_flow(self, app: Any, scopes: list) -> Dict[str, Any]:
        flow = app.initiate_device_flow(scopes=scopes)
        if "user_code" not in flow:
            raise AuthError("Failed to start device flow.", hint=str(flow.get("error_description") or ""))
        msg = flow.get("message") or (
            f"To sign in, visit {flow.get('verification_uri')} and enter code: {flow.get('user_code')}"
        )
        print(msg, file=sys.stderr)
        result = app.acquire_token_by_device_flow(flow)
        if "access_token" not in result:
            raise AuthError(f"Device flow failed: {result.get('error_description') or result.get('error')}")
        return result

    def _save_cache(self) -> None:
        if self._cache is None or not self.token_path:
            return
        if not getattr(self._cache, "has_state_changed", True):
            return
        os.makedirs(os.path.dirname(self.token_path) or ".", exist_ok=True)
        with open(self.token_path, "w", encoding="utf-8") as fh:
            fh.write(self._cache.serialize())

    # -------------------- Requests --------------------
    def _headers(self, url: str, accept: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.access_token(resource_for(url))}",
            "accept": accept,
        }
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        accept: str = ODATA_NOMETADATA,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        method = method.lower()
        hdrs = self._headers(url, accept, headers)
        LOG.debug("%s %s", method.upper(), url)
        kwargs: Dict[str, Any] = {"headers": hdrs}
        if json_body is not None:
            kwargs["json"] = json_body
            LOG.debug("payload: %s", json_body)
        try:
            resp = getattr(_requests(), method)(url, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"{method.upper()} {url} failed: {e}") from e
        if resp.status_code >= 400:
            raise ApiError(odata_error_message(resp), status_code=resp.status_code)
        if not resp.text:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def get(self, url: str, *, accept: str = ODATA_NOMETADATA) -> Any:
        return self.request("get", url, accept=accept)

    def post(
        self,
        url: str,
        json_body: Any = None,
        *,
        headers: Optional[Dict[str, str]] = None,
        accept: str = ODATA_NOMETADATA,
    ) -> Any:
        return self.request("post", url, json_body=json_body, headers=headers, accept=accept)

    def delete(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        accept: str = ODATA_NOMETADATA,
    ) -> Any:
        return self.request("delete", url, headers=headers, accept=accept)

    def request_digest(self, web_url: str) -> str:
        """Return a form digest for write requests against a SharePoint site."""
        res = self.post(f"{web_url}/_api/contextinfo") or {}
        digest = res.get("FormDigestValue")
        if not digest:
            raise ApiError(f"No request digest returned for {web_url}")
        return digest
