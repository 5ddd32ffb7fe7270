# cm_core/casting/services/conversion.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from cm_core.audit.services import AuditService
from cm_core.casting.models import (
    CastingSubmission,
    ExternalActor,
    ExternalActorStatus,
    SubmissionStatus,
)
from cm_core.casting.selectors import unconverted_actors_matching
from cm_core.common.api.exceptions import DetailValidationError
from cm_core.iam.models import UserProfile
from cm_core.iam.services.profiles import get_profile_or_none
from cm_core.studios.models import ProjectMember
from cm_core.studios.selectors import is_project_member

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionEntry:
    id: str
    studio: str
    projects: int


@dataclass(frozen=True)
class ConversionReport:
    converted: bool
    message: str
    conversions: list[ConversionEntry] = field(default_factory=list)

    def as_dict(self) -> dict:
        data = {"converted": self.converted, "message": self.message}
        if self.converted:
            data["conversions"] = [
                {"id": c.id, "studio": c.studio, "projects": c.projects} for c in self.conversions
            ]
        return data


class AccountConversionService:
    """
    Promote a registered user's matching external-actor records (any studio) to CONVERTED
    and carry their project links over as project memberships.
    """

    @staticmethod
    def convert_for_user(*, user) -> ConversionReport:
        email = (getattr(user, "email", "") or "").strip()
        if not email:
            raise DetailValidationError("User email not found")

        profile = get_profile_or_none(user_id=user.id)
        if profile is None:
            raise NotFound("User profile not found")

        phone_number = (profile.phone_number or "").strip()
        actors = unconverted_actors_matching(email=email, phone_number=phone_number)

        if not actors:
            message = (
                "No external actor records found matching your email or phone number"
                if phone_number
                else "No external actor records found matching your email"
            )
            return ConversionReport(converted=False, message=message)

        entries = [AccountConversionService._convert_one(actor=a, profile=profile, user_id=user.id) for a in actors]

        logger.info("Converted %d external actor records for user %s", len(entries), user.id)
        return ConversionReport(
            converted=True,
            message=f"Successfully converted {len(entries)} external actor records",
            conversions=entries,
        )

    @staticmethod
    @transaction.atomic
    def _convert_one(*, actor: ExternalActor, profile: UserProfile, user_id: int) -> ConversionEntry:
        now = timezone.now()

        actor.status = ExternalActorStatus.CONVERTED
        actor.converted_at = now
        actor.converted_profile = profile
        actor.save(update_fields=["status", "converted_at", "converted_profile", "updated_at"])

        (
            CastingSubmission.objects.filter(external_actor=actor)
            .exclude(status=SubmissionStatus.REJECTED)
            .update(status=SubmissionStatus.CONVERTED, converted_profile=profile, updated_at=now)
        )

        links = list(actor.project_links.all())
        for link in links:
            if is_project_member(project_id=link.project_id, profile_id=profile.id):
                continue
            ProjectMember.objects.create(
                project_id=link.project_id,
                profile=profile,
                role=link.role or "Talent",
                notes=f"Converted from external actor: {actor.email}",
            )

        AuditService.log(
            event_code="external_actor.converted",
            entity_type="ExternalActor",
            entity_id=actor.id,
            tenant_id=actor.studio.tenant_id,
            actor_user_id=user_id,
            metadata={"profile_id": str(profile.id), "projects": len(links)},
        )

        return ConversionEntry(id=str(actor.id), studio=actor.studio.name, projects=len(links))
