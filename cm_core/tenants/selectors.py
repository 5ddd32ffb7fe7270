# cm_core/tenants/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from cm_core.tenants.models import Tenant


def tenant_qs() -> QuerySet[Tenant]:
    return Tenant.objects.all()


def get_tenant_or_none(*, tenant_id: UUID) -> Optional[Tenant]:
    return Tenant.objects.filter(id=tenant_id).first()
