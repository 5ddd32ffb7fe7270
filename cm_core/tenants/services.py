# cm_core/tenants/services.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from cm_core.audit.services import AuditService
from cm_core.tenants.models import Tenant, TenantStatus, TenantType

logger = logging.getLogger(__name__)


class TenantService:
    """
    All Tenant mutations live here (write-model boundary).
    Studio tenants are normally created through StudioService, talent tenants
    through registration; this is the admin path.
    """

    @staticmethod
    @transaction.atomic
    def create(
        *,
        name: str,
        type: str,
        metadata: Optional[dict] = None,
        status: str = TenantStatus.ACTIVE,
    ) -> Tenant:
        name = (name or "").strip()

        if not name:
            raise ValidationError({"name": "This field is required."})

        if type not in TenantType.values:
            raise ValidationError({"type": f"Invalid type. Allowed: {list(TenantType.values)}"})

        if status not in TenantStatus.values:
            raise ValidationError({"status": f"Invalid status. Allowed: {list(TenantStatus.values)}"})

        tenant = Tenant.objects.create(
            name=name,
            type=type,
            status=status,
            metadata=metadata or {},
        )
        logger.info("Tenant %s created (%s)", tenant.id, type)
        return tenant

    @staticmethod
    @transaction.atomic
    def set_status(*, tenant_id: UUID, status: str, actor_user_id: int | None = None) -> Tenant:
        """
        Suspending a tenant locks out every profile bound to it
        (see cm_core.common.permissions.tenant_type_of).
        """
        if status not in TenantStatus.values:
            raise ValidationError({"status": f"Invalid status. Allowed: {list(TenantStatus.values)}"})

        tenant = Tenant.objects.select_for_update().filter(id=tenant_id).first()
        if tenant is None:
            raise NotFound("Tenant not found.")

        # idempotent no-op
        if tenant.status == status:
            return tenant

        previous = tenant.status
        tenant.status = status
        tenant.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="tenant.status_changed",
            entity_type="Tenant",
            entity_id=tenant.id,
            tenant_id=tenant.id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status},
        )
        logger.info("Tenant %s status %s -> %s", tenant.id, previous, status)
        return tenant
