"""Validator avatars looked up through the Keybase APIs."""

from __future__ import annotations

import json
import urllib.request
from typing import Any, Mapping

API_URL = "https://keybase.io/_/api/1.0"
MIN_IDENTITY_LENGTH = 16
_TIMEOUT = 30


class KeybaseError(Exception):
    """Raised when the Keybase APIs cannot be queried or report an error."""


def avatar_url_from_response(response: Mapping[str, Any]) -> str:
    """Return the primary picture URL of an identity lookup response, or ""."""
    status = response.get("status") or {}
    if int(status.get("code") or 0) != 0:
        raise KeybaseError(f"response code not valid: {status.get('desc', '')}")

    objects = response.get("them") or []
    if not objects:
        return ""

    pictures = (objects[0] or {}).get("pictures")
    if not pictures:
        return ""
    primary = pictures.get("primary")
    if not primary:
        return ""
    return str(primary.get("url") or "")


def _query(endpoint: str) -> Any:
    try:
        with urllib.request.urlopen(API_URL + endpoint, timeout=_TIMEOUT) as response:
            body = response.read()
    except OSError as err:
        raise KeybaseError(f"error while querying keybase APIs: {err}") from err

    try:
        return json.loads(body)
    except ValueError as err:
        raise KeybaseError(f"error while unmarshaling response body: {err}") from err


def get_avatar_url(identity: str) -> str:
    """Return the avatar URL of the given identity, or "" when there is none."""
    if len(identity) < MIN_IDENTITY_LENGTH:
        return ""

    endpoint = f"/user/lookup.json?key_suffix={identity}&fields=basics&fields=pictures"
    try:
        response = _query(endpoint)
    except KeybaseError as err:
        raise KeybaseError(f"error while querying keybase: {err}") from err
    if not isinstance(response, dict):
        raise KeybaseError("error while querying keybase: unexpected response")
    return avatar_url_from_response(response)