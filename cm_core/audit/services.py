# cm_core/audit/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction

from cm_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


class AuditService:
    """
    Central audit writer. Rows are append-only.

    tenant_id is the owner of the changed data (the studio's tenant for casting
    records), not the tenant of the acting user. Public applicants act anonymously,
    so actor_user_id is None for intake events.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: UUID,
        tenant_id: UUID,
        actor_user_id: int | None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        event = AuditEvent.objects.create(
            tenant_id=tenant_id,
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata=metadata or {},
        )
        logger.debug("audit %s %s:%s tenant=%s", event_code, entity_type, entity_id, tenant_id)
        return event
