# cm_core/tenants/models.py
import uuid
from django.db import models


class TenantType(models.TextChoices):
    TALENT = "TALENT", "Talent"
    STUDIO = "STUDIO", "Studio"
    ADMIN = "ADMIN", "Admin"


class TenantStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    SUSPENDED = "SUSPENDED", "Suspended"


class Tenant(models.Model):
    """
    Top-level account: a talent, a studio, or the platform administration.
    Root of all ownership in the system.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)

    type = models.CharField(
        max_length=16,
        choices=TenantType.choices,
        db_index=True,
    )

    status = models.CharField(
        max_length=16,
        choices=TenantStatus.choices,
        default=TenantStatus.ACTIVE,
        db_index=True,
    )

    # flexible, avoids schema churn (onboarding state, internal notes, etc.)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants_tenant"
        indexes = [
            models.Index(fields=["type", "status"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"
