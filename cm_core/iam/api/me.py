# cm_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cm_core.iam.api.schema_serializers import MeResponseSerializer
from cm_core.iam.services.profiles import get_profile_or_none
from cm_core.studios.selectors import studio_for_tenant_or_none


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], responses={200: MeResponseSerializer})
    def get(self, request):
        """
        Returns user info + profile/tenant.
        `studio` is set only for users acting for a studio.
        """
        user = request.user
        profile = get_profile_or_none(user_id=user.id)

        profile_data = None
        studio_data = None
        if profile is not None:
            tenant = profile.tenant
            profile_data = {
                "id": str(profile.id),
                "phone_number": profile.phone_number,
                "tenant": {"id": str(tenant.id), "name": tenant.name, "type": tenant.type},
            }
            studio = studio_for_tenant_or_none(tenant_id=tenant.id)
            if studio is not None:
                studio_data = {"id": str(studio.id), "name": studio.name}

        return Response(
            {
                "user": {
                    "id": user.id,
                    "username": getattr(user, "username", None),
                    "email": getattr(user, "email", None),
                    "is_superuser": bool(getattr(user, "is_superuser", False)),
                },
                "profile": profile_data,
                "studio": studio_data,
            },
            status=status.HTTP_200_OK,
        )
