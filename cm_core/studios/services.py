# cm_core/studios/services.py
from __future__ import annotations

from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from cm_core.audit.services import AuditService
from cm_core.studios.models import Project, Studio
from cm_core.tenants.models import TenantType
from cm_core.tenants.services import TenantService


class StudioService:
    @staticmethod
    @transaction.atomic
    def create_studio(
        *,
        name: str,
        description: str = "",
        contact_name: str = "",
        contact_email: str = "",
        website: str = "",
    ) -> Studio:
        """
        Creates the STUDIO tenant and its Studio row together.
        """
        tenant = TenantService.create(name=name, type=TenantType.STUDIO)
        return Studio.objects.create(
            tenant=tenant,
            name=tenant.name,
            description=description or "",
            contact_name=contact_name or "",
            contact_email=contact_email or "",
            website=website or "",
        )


class ProjectService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        studio: Studio,
        actor_user_id: int | None,
        title: str,
        description: str = "",
    ) -> Project:
        title = (title or "").strip()
        if not title:
            raise ValidationError({"title": "This field is required."})

        project = Project.objects.create(studio=studio, title=title, description=description or "")

        AuditService.log(
            event_code="project.created",
            entity_type="Project",
            entity_id=project.id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"title": title},
        )
        return project

    @staticmethod
    @transaction.atomic
    def set_archived(*, studio: Studio, project_id: UUID, archived: bool) -> Project:
        project = Project.objects.select_for_update().get(id=project_id, studio=studio)
        if project.is_archived == archived:
            return project
        project.is_archived = archived
        project.save(update_fields=["is_archived", "updated_at"])
        return project
