# cm_core/iam/models.py
import uuid
from django.conf import settings
from django.db import models
from cm_core.tenants.models import Tenant


class UserProfile(models.Model):
    """
    Platform profile anchored to Django's AUTH_USER_MODEL.
    Binds a login to exactly one tenant (talent, studio or admin).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="user_profiles")

    # used by external-actor conversion as the secondary identity signal
    phone_number = models.CharField(max_length=32, blank=True, db_index=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["tenant", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.get_username()} ({self.tenant.type})"
