# cm_core/tenants/api/views.py
from __future__ import annotations

from uuid import UUID

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from cm_core.common.permissions import IsPlatformAdmin
from cm_core.tenants.api.filters import TenantFilter
from cm_core.tenants.api.serializers import (
    TenantCreateSerializer,
    TenantSerializer,
    TenantStatusUpdateSerializer,
)
from cm_core.tenants.models import Tenant
from cm_core.tenants.selectors import get_tenant_or_none, tenant_qs
from cm_core.tenants.services import TenantService


def _tenant_or_404(pk) -> Tenant:
    try:
        tenant_id = UUID(str(pk))
    except ValueError:
        raise NotFound("Tenant not found.")
    t = get_tenant_or_none(tenant_id=tenant_id)
    if t is None:
        raise NotFound("Tenant not found.")
    return t


@extend_schema_view(
    list=extend_schema(tags=["Tenants"], operation_id="v1_tenants_list"),
    retrieve=extend_schema(tags=["Tenants"], operation_id="v1_tenants_retrieve", responses={200: TenantSerializer}),
    create=extend_schema(tags=["Tenants"], operation_id="v1_tenants_create", request=TenantCreateSerializer, responses={201: TenantSerializer}),
    set_status=extend_schema(tags=["Tenants"], operation_id="v1_tenants_set_status", request=TenantStatusUpdateSerializer, responses={200: TenantSerializer}),
)
class TenantViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Admin-only tenant management.
    Routing is centralized in cm_core/api/urls.py.
    """

    permission_classes = [IsPlatformAdmin]

    serializer_class = TenantSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TenantFilter

    def get_queryset(self):
        return tenant_qs().order_by("-created_at")

    def retrieve(self, request, pk=None):
        return Response(TenantSerializer(_tenant_or_404(pk)).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = TenantCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.create(
            name=ser.validated_data["name"],
            type=ser.validated_data["type"],
            status=ser.validated_data.get("status"),
            metadata=ser.validated_data.get("metadata") or {},
        )
        return Response(TenantSerializer(t).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="set-status")
    def set_status(self, request, pk=None):
        ser = TenantStatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.set_status(
            tenant_id=_tenant_or_404(pk).id,
            status=ser.validated_data["status"],
            actor_user_id=request.user.id,
        )
        return Response(TenantSerializer(t).data, status=status.HTTP_200_OK)
