import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from bdjuno.keybase import KeybaseError, avatar_url_from_response, get_avatar_url

IDENTITY = "5A24B3C9E0F1D2A7"
PICTURE = "https://example.com/avatar.png"


def _response(url=PICTURE):
    return {
        "status": {"code": 0, "name": "OK"},
        "them": [{"id": "abc", "pictures": {"primary": {"url": url}}}],
    }


def test_primary_picture_url():
    assert avatar_url_from_response(_response()) == PICTURE


def test_error_status_raises():
    with pytest.raises(KeybaseError, match="response code not valid: bad input"):
        avatar_url_from_response({"status": {"code": 100, "desc": "bad input"}})


@pytest.mark.parametrize(
    "response",
    [
        {"status": {"code": 0}, "them": []},
        {"status": {"code": 0}, "them": None},
        {"status": {"code": 0}, "them": [{"id": "a", "pictures": None}]},
        {"status": {"code": 0}, "them": [{"id": "a", "pictures": {"primary": None}}]},
        {"status": {"code": 0}, "them": [{"id": "a", "pictures": {"primary": {"url": ""}}}]},
    ],
)
def test_missing_pictures_give_empty_url(response):
    assert avatar_url_from_response(response) == ""


def test_short_identity_skips_query():
    with patch("urllib.request.urlopen") as opener:
        assert get_avatar_url("short") == ""
    assert opener.call_count == 0


def test_get_avatar_url_queries_identity():
    body = json.dumps(_response()).encode()
    with patch("urllib.request.urlopen", return_value=io.BytesIO(body)) as opener:
        assert get_avatar_url(IDENTITY) == PICTURE
    assert f"key_suffix={IDENTITY}" in opener.call_args.args[0]


def test_network_error_raises():
    with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
        with pytest.raises(KeybaseError, match="error while querying keybase"):
            get_avatar_url(IDENTITY)