from __future__ import annotations

import re

from django.utils.deprecation import MiddlewareMixin

from cm_core.common.api.exceptions import ensure_request_id

REQUEST_ID_HEADER = "X-Request-Id"

_VALID_RID = re.compile(r"^[A-Za-z0-9._-]{8,128}$")


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches request.request_id for every request and echoes it back as X-Request-Id.

    - An incoming X-Request-Id is reused when it looks sane (proxy/load balancer correlation).
    - Otherwise a fresh hex id is generated.
    - The same id is what error envelopes report as error.request_id.
    """

    def process_request(self, request):
        incoming = request.META.get("HTTP_X_REQUEST_ID", "")
        if incoming and _VALID_RID.match(incoming):
            request.request_id = incoming
        else:
            request.request_id = None
        ensure_request_id(request)
        return None

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid and not response.has_header(REQUEST_ID_HEADER):
            response[REQUEST_ID_HEADER] = rid
        return response
