# cm_core/studios/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from cm_core.studios.models import Project, ProjectMember, Studio


def studio_for_tenant_or_none(*, tenant_id: UUID) -> Optional[Studio]:
    return Studio.objects.filter(tenant_id=tenant_id).first()


def projects_for_studio(*, studio_id: UUID, include_archived: bool = False) -> QuerySet[Project]:
    qs = Project.objects.filter(studio_id=studio_id)
    if not include_archived:
        qs = qs.filter(is_archived=False)
    return qs.order_by("-created_at")


def get_project_or_none(*, studio_id: UUID, project_id: UUID) -> Optional[Project]:
    return Project.objects.filter(id=project_id, studio_id=studio_id).first()


def is_project_member(*, project_id: UUID, profile_id: UUID) -> bool:
    return ProjectMember.objects.filter(project_id=project_id, profile_id=profile_id).exists()
