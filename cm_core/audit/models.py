# cm_core/audit/models.py
import uuid

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditEvent(models.Model):
    """
    Immutable audit record, owned by the tenant whose data changed.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    event_code = models.CharField(max_length=128, db_index=True)  # e.g. "casting_submission.created"
    entity_type = models.CharField(max_length=128, db_index=True)  # e.g. "CastingSubmission"
    entity_id = models.UUIDField(db_index=True)

    # null for public, unauthenticated actions (casting-code applications)
    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    # UUIDs and datetimes are allowed in metadata
    metadata = models.JSONField(default=dict, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["tenant_id", "occurred_at"]),
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["tenant_id", "event_code"]),
        ]
