# cm_core/casting/services/codes.py
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound

from cm_core.audit.services import AuditService
from cm_core.casting.models import CastingCode, default_survey_fields
from cm_core.common.api.exceptions import ConflictError
from cm_core.studios.models import Project, Studio
from cm_core.studios.selectors import get_project_or_none

logger = logging.getLogger(__name__)

PROJECT_NOT_OWNED_MSG = "Project not found or not owned by this studio"
MAX_CODE_ATTEMPTS = 20

_UNSET: Any = object()


def generate_code(*, length: int | None = None, alphabet: str | None = None) -> str:
    length = length or settings.CASTING_CODE_LENGTH
    alphabet = alphabet or settings.CASTING_CODE_ALPHABET
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _generate_unique_code() -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        candidate = generate_code()
        if not CastingCode.objects.filter(code=candidate).exists():
            return candidate
    raise ConflictError("Could not allocate a unique casting code. Try again.")


def _resolve_project(*, studio: Studio, project_id: Optional[UUID]) -> Optional[Project]:
    if project_id is None:
        return None
    project = get_project_or_none(studio_id=studio.id, project_id=project_id)
    if project is None:
        raise NotFound(PROJECT_NOT_OWNED_MSG)
    return project


@dataclass
class CastingCodeUpdate:
    """
    Partial update. Fields left as _UNSET are not touched.
    """
    name: Any = _UNSET
    description: Any = _UNSET
    project_id: Any = _UNSET
    is_active: Any = _UNSET
    expires_at: Any = _UNSET
    survey_fields: Any = _UNSET

    changed: list[str] = field(default_factory=list, init=False)

    @classmethod
    def from_validated(cls, data: dict) -> "CastingCodeUpdate":
        known = {"name", "description", "project_id", "is_active", "expires_at", "survey_fields"}
        return cls(**{k: v for k, v in data.items() if k in known})

    def provided(self) -> dict[str, Any]:
        names = ("name", "description", "project_id", "is_active", "expires_at", "survey_fields")
        return {n: getattr(self, n) for n in names if getattr(self, n) is not _UNSET}


class CastingCodeService:
    @staticmethod
    def create(
        *,
        studio: Studio,
        actor_user_id: int | None,
        name: str,
        description: str = "",
        project_id: Optional[UUID] = None,
        expires_at: Optional[datetime] = None,
        survey_fields: Optional[dict] = None,
    ) -> CastingCode:
        project = _resolve_project(studio=studio, project_id=project_id)

        # a concurrent insert can still win the race between the exists() check and ours
        for _ in range(MAX_CODE_ATTEMPTS):
            code = _generate_unique_code()
            try:
                with transaction.atomic():
                    casting_code = CastingCode.objects.create(
                        code=code,
                        name=name,
                        description=description or "",
                        studio=studio,
                        project=project,
                        expires_at=expires_at,
                        survey_fields=survey_fields or default_survey_fields(),
                        is_active=True,
                    )
                    AuditService.log(
                        event_code="casting_code.created",
                        entity_type="CastingCode",
                        entity_id=casting_code.id,
                        tenant_id=studio.tenant_id,
                        actor_user_id=actor_user_id,
                        metadata={"code": code, "project_id": str(project.id) if project else None},
                    )
            except IntegrityError:
                logger.info("Casting code %s collided on insert, retrying", code)
                continue

            logger.info("Casting code %s created for studio %s", code, studio.id)
            return casting_code

        raise ConflictError("Could not allocate a unique casting code. Try again.")

    @staticmethod
    @transaction.atomic
    def update(
        *,
        studio: Studio,
        casting_code_id: UUID,
        actor_user_id: int | None,
        changes: CastingCodeUpdate,
    ) -> CastingCode:
        casting_code = CastingCode.objects.select_for_update().filter(id=casting_code_id, studio=studio).first()
        if casting_code is None:
            raise NotFound("Casting code not found")

        provided = changes.provided()
        if "project_id" in provided:
            casting_code.project = _resolve_project(studio=studio, project_id=provided.pop("project_id"))
            changes.changed.append("project")

        for field_name, value in provided.items():
            if field_name == "description":
                value = value or ""
            if field_name == "survey_fields" and value is None:
                value = default_survey_fields()
            setattr(casting_code, field_name, value)
            changes.changed.append(field_name)

        if not changes.changed:
            return casting_code

        casting_code.save(update_fields=[*changes.changed, "updated_at"])

        AuditService.log(
            event_code="casting_code.updated",
            entity_type="CastingCode",
            entity_id=casting_code.id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"fields": sorted(changes.changed)},
        )
        return casting_code

    @staticmethod
    @transaction.atomic
    def delete(*, studio: Studio, casting_code_id: UUID, actor_user_id: int | None) -> None:
        casting_code = CastingCode.objects.filter(id=casting_code_id, studio=studio).first()
        if casting_code is None:
            raise NotFound("Casting code not found")

        code = casting_code.code
        casting_code.delete()

        AuditService.log(
            event_code="casting_code.deleted",
            entity_type="CastingCode",
            entity_id=casting_code_id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"code": code},
        )
