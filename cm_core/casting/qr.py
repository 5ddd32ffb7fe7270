# cm_core/casting/qr.py
from __future__ import annotations

import logging

import segno
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)

QR_BORDER = 1


class QRCodeRenderError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to generate QR code."
    default_code = "server_error"


def build_application_url(code: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/apply/{code}"


def render_qr_data_url(text: str, *, size: int) -> str:
    """
    PNG data URL whose width is as close to `size` pixels as whole modules allow.
    """
    try:
        qr = segno.make(text, error="m")
        modules, _ = qr.symbol_size(scale=1, border=QR_BORDER)
        scale = max(1, size // modules)
        return qr.png_data_uri(scale=scale, border=QR_BORDER, dark="#000000", light="#ffffff")
    except Exception as exc:
        logger.exception("QR rendering failed for %s", text)
        raise QRCodeRenderError() from exc
