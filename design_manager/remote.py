"""HTTP gateway to the recruitment site's backend.

The backend wraps every response as ``{"success": bool, "data": ...}`` and
scopes requests to a store with a bearer token. A 404 or an empty ``data``
means "nothing stored" and fetches return None. Transport failures and
malformed envelopes raise ``RemoteLoadError`` for design documents so the
session can tell the user; profile fetches log them and return None, which
renders the fallback profile. Pushes raise ``RemoteSaveError``.
"""

from __future__ import annotations

from typing import Any

import requests

from design_manager.config import api_base, api_token
from design_manager.logger import _log_warning
from design_manager.models import DesignDocument

_FETCH_TIMEOUT = 10
_PUSH_TIMEOUT = 30


class RemoteLoadError(RuntimeError):
    """The backend could not be reached or sent an unusable response."""


class RemoteSaveError(RuntimeError):
    """The backend refused or failed to store a design document."""


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/json"}
    token = api_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _unwrap(resp: requests.Response) -> dict | None:
    try:
        body = resp.json()
    except ValueError as exc:
        raise RemoteLoadError(f"{resp.url} returned non-JSON content") from exc
    if not isinstance(body, dict):
        raise RemoteLoadError(f"{resp.url} returned a {type(body).__name__}, not an envelope")
    if not body.get("success", False):
        raise RemoteLoadError(body.get("message") or f"{resp.url} reported failure")
    data = body.get("data")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise RemoteLoadError(f"{resp.url} returned {type(data).__name__} data")
    return data


def _get(path: str, entity_id: str) -> dict | None:
    try:
        resp = requests.get(
            f"{api_base()}{path}",
            params={"store_id": entity_id},
            headers=_headers(),
            timeout=_FETCH_TIMEOUT,
        )
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise RemoteLoadError(f"GET {path} for store {entity_id} failed: {exc}") from exc
    return _unwrap(resp)


def fetch_design_document(entity_id: str) -> dict | None:
    """Return the store's stored design document mapping, or None if absent.

    Raises ``RemoteLoadError`` when the backend is unreachable or answers
    with something other than a successful object envelope.
    """
    return _get("/api/design", entity_id)


def fetch_profile(entity_id: str) -> dict | None:
    """Return the store's raw profile payload, or None."""
    try:
        return _get("/api/store/profile", entity_id)
    except RemoteLoadError as exc:
        _log_warning(str(exc))
        return None


def push_design_document(entity_id: str, doc: DesignDocument) -> dict[str, Any]:
    """Send the full document. Raises ``RemoteSaveError`` on any failure."""
    try:
        resp = requests.post(
            f"{api_base()}/api/design",
            params={"store_id": entity_id},
            json={"settings": doc.to_dict()},
            headers=_headers(),
            timeout=_PUSH_TIMEOUT,
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise RemoteSaveError(f"Could not save design: {exc}") from exc

    try:
        body = resp.json()
    except ValueError as exc:
        raise RemoteSaveError("Backend returned a non-JSON response") from exc
    if not isinstance(body, dict) or not body.get("success", False):
        message = body.get("message") if isinstance(body, dict) else None
        raise RemoteSaveError(message or "Backend rejected the design document")
    return body
