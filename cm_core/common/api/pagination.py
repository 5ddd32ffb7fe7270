# cm_core/common/api/pagination.py
from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    """
    Studio rosters (external actors, submissions) can run long; clients may ask
    for up to max_page_size rows per page.
    """
    page_size = getattr(settings, "API_PAGE_SIZE", 20)
    page_size_query_param = "page_size"
    max_page_size = 200


def paginate(request, queryset, serializer_class, *, context: dict | None = None) -> Response:
    """
    List contract for every studio/admin collection:
      { count, next, previous, results }

    The DRF request is passed to the serializer context so nested links can be absolute.
    """
    paginator = DefaultPagination()
    ctx = {"request": request, **(context or {})}

    page = paginator.paginate_queryset(queryset, request)
    if page is None:
        return Response(serializer_class(queryset, many=True, context=ctx).data)
    return paginator.get_paginated_response(serializer_class(page, many=True, context=ctx).data)
