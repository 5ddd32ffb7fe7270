# cm_core/flags/api/views.py
from __future__ import annotations

from dataclasses import asdict

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from cm_core.common.permissions import IsPlatformAdmin
from cm_core.flags.api.serializers import (
    FeatureFlagCreateSerializer,
    FeatureFlagSerializer,
    FeatureFlagUpdateSerializer,
)
from cm_core.flags.models import FeatureFlag
from cm_core.flags.selectors import get_flag, list_flags
from cm_core.flags.services import FeatureFlagService


@extend_schema_view(
    list=extend_schema(tags=["Admin"], responses={200: FeatureFlagSerializer(many=True)}),
    retrieve=extend_schema(tags=["Admin"], responses={200: FeatureFlagSerializer}),
    create=extend_schema(tags=["Admin"], request=FeatureFlagCreateSerializer, responses={201: FeatureFlagSerializer}),
    partial_update=extend_schema(tags=["Admin"], request=FeatureFlagUpdateSerializer, responses={200: FeatureFlagSerializer}),
)
class FeatureFlagViewSet(viewsets.ViewSet):
    permission_classes = [IsPlatformAdmin]
    lookup_field = "key"
    lookup_value_regex = r"[-a-zA-Z0-9_]+"

    serializer_class = FeatureFlagSerializer
    queryset = FeatureFlag.objects.none()

    def list(self, request):
        return Response(FeatureFlagSerializer([asdict(f) for f in list_flags()], many=True).data)

    def retrieve(self, request, key=None):
        flag = get_flag(key=key)
        if flag is None:
            raise NotFound("Feature flag not found")
        return Response(FeatureFlagSerializer(asdict(flag)).data)

    def create(self, request):
        ser = FeatureFlagCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        flag = FeatureFlagService.create(**ser.validated_data)
        return Response(FeatureFlagSerializer(asdict(flag)).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, key=None):
        ser = FeatureFlagUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        flag = FeatureFlagService.update(key=key, **ser.validated_data)
        return Response(FeatureFlagSerializer(asdict(flag)).data)
