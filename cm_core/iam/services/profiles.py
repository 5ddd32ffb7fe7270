# cm_core/iam/services/profiles.py
from __future__ import annotations

from typing import Optional

from django.db import transaction

from cm_core.iam.models import UserProfile
from cm_core.tenants.models import Tenant


def get_profile_or_none(*, user_id: int) -> Optional[UserProfile]:
    """
    Canonical identity graph:
      auth_user -> UserProfile -> Tenant
    """
    return (
        UserProfile.objects.select_related("tenant", "user")
        .filter(user_id=user_id)
        .first()
    )


class ProfileService:
    @staticmethod
    @transaction.atomic
    def create(*, user, tenant: Tenant, phone_number: str = "") -> UserProfile:
        return UserProfile.objects.create(
            user=user,
            tenant=tenant,
            phone_number=(phone_number or "").strip(),
            is_active=True,
        )
