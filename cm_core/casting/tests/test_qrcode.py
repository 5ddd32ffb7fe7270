# cm_core/casting/tests/test_qrcode.py
import base64
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.django_db

URL = "/api/studio/casting-codes/qrcode/"
PNG_PREFIX = "data:image/png;base64,"


def test_returns_png_data_url_and_application_url(studio_client, casting_code):
    res = studio_client.get(URL, {"code": "AB12CD"})
    assert res.status_code == 200

    body = res.json()
    assert body["applicationUrl"] == "https://casting.test/apply/AB12CD"
    assert body["qrCode"].startswith(PNG_PREFIX)
    assert base64.b64decode(body["qrCode"][len(PNG_PREFIX):]).startswith(b"\x89PNG")


def test_larger_size_gives_larger_image(studio_client, casting_code):
    small = studio_client.get(URL, {"code": "AB12CD", "size": "50"}).json()["qrCode"]
    large = studio_client.get(URL, {"code": "AB12CD", "size": "1000"}).json()["qrCode"]
    assert len(large) > len(small)


def test_missing_code_is_400(studio_client):
    res = studio_client.get(URL)
    assert res.status_code == 400
    assert "code" in res.json()["error"]["details"]


@pytest.mark.parametrize("size", ["0", "-5", "abc", "2001"])
def test_invalid_size_is_400(studio_client, casting_code, size):
    res = studio_client.get(URL, {"code": "AB12CD", "size": size})
    assert res.status_code == 400
    assert "size" in res.json()["error"]["details"]


def test_code_of_other_studio_is_404(other_studio_client, casting_code):
    res = other_studio_client.get(URL, {"code": "AB12CD"})
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Casting code not found or not owned by this studio"


def test_non_studio_user_is_403(talent_client, casting_code):
    assert talent_client.get(URL, {"code": "AB12CD"}).status_code == 403


def test_render_failure_is_500(studio_client, casting_code):
    with patch("cm_core.casting.qr.segno.make", side_effect=ValueError("boom")):
        res = studio_client.get(URL, {"code": "AB12CD"})

    assert res.status_code == 500
    assert res.json()["error"]["message"] == "Failed to generate QR code."
