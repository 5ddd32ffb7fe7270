# cm_core/audit/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from cm_core.audit.api.serializers import AuditEventSerializer
from cm_core.audit.models import AuditEvent
from cm_core.audit.selectors import list_audit_events
from cm_core.common.api.pagination import paginate
from cm_core.common.permissions import IsPlatformAdmin


def _optional_uuid(raw, field_name: str) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        raise ValidationError({field_name: "Invalid UUID"})


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    List audit events across tenants (platform admins only).
    """
    permission_classes = [IsPlatformAdmin]

    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        parameters=[
            OpenApiParameter(name="tenant_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="entity_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity type (e.g. CastingCode, ExternalActor).",
            ),
            OpenApiParameter(name="entity_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="event_code",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by event code (e.g. external_actor.converted).",
            ),
            OpenApiParameter(name="actor_user_id", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        params = request.query_params

        actor_user_id = None
        actor_raw = params.get("actor_user_id")
        if actor_raw not in (None, ""):
            try:
                actor_user_id = int(actor_raw)
            except ValueError:
                raise ValidationError({"actor_user_id": "Invalid actor_user_id (int expected)"})

        qs = list_audit_events(
            tenant_id=_optional_uuid(params.get("tenant_id"), "tenant_id"),
            entity_type=params.get("entity_type") or None,
            entity_id=_optional_uuid(params.get("entity_id"), "entity_id"),
            event_code=params.get("event_code") or None,
            actor_user_id=actor_user_id,
        )
        return paginate(request, qs, AuditEventSerializer)
