# cm_core/casting/services/intake.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from cm_core.audit.services import AuditService
from cm_core.casting.matching import IdentityCandidate
from cm_core.casting.models import (
    CastingCode,
    CastingSubmission,
    CastingSubmissionSurvey,
    SubmissionStatus,
)
from cm_core.casting.selectors import get_casting_code_by_code
from cm_core.casting.services.actors import ExternalActorService, ProjectAssociator
from cm_core.common.api.exceptions import DetailValidationError

logger = logging.getLogger(__name__)

INVALID_CODE_MSG = "Invalid casting code"
INACTIVE_CODE_MSG = "This casting code is no longer active"
EXPIRED_CODE_MSG = "This casting code has expired"


class CastingCodeInactive(DetailValidationError):
    def __init__(self):
        super().__init__(INACTIVE_CODE_MSG)


class CastingCodeExpired(DetailValidationError):
    def __init__(self):
        super().__init__(EXPIRED_CODE_MSG)


@dataclass(frozen=True)
class SubmissionInput:
    code: str
    first_name: str
    last_name: str
    email: str = ""
    phone_number: str = ""
    message: str = ""
    create_account: bool = False
    survey_responses: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class SubmissionOutcome:
    submission: CastingSubmission
    actor_created: bool
    survey_saved: bool
    project_linked: bool
    create_account: bool
    user_data: dict[str, str] = field(default_factory=dict)


def _open_code_or_raise(code: str) -> CastingCode:
    casting_code = get_casting_code_by_code(code=code)
    if casting_code is None:
        raise NotFound(INVALID_CODE_MSG)
    if not casting_code.is_active:
        raise CastingCodeInactive()
    if casting_code.is_expired(now=timezone.now()):
        raise CastingCodeExpired()
    return casting_code


class SubmissionIntakeService:
    """
    Public application through a casting code.

    1) validate the code (no writes on failure)
    2) one transaction: external actor upsert, submission, optional survey, audit
    3) after commit: best-effort project association
    """

    @staticmethod
    def submit(data: SubmissionInput) -> SubmissionOutcome:
        casting_code = _open_code_or_raise(data.code)
        studio = casting_code.studio

        with transaction.atomic():
            upsert = ExternalActorService.upsert_from_submission(
                studio=studio,
                candidate=IdentityCandidate(
                    studio_id=studio.id,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    email=data.email,
                    phone_number=data.phone_number,
                ),
            )
            actor = upsert.actor

            submission = CastingSubmission.objects.create(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone_number=data.phone_number,
                message=data.message,
                casting_code=casting_code,
                external_actor=actor,
                status=SubmissionStatus.PENDING,
            )

            survey_saved = False
            if casting_code.has_survey_fields() and data.survey_responses:
                CastingSubmissionSurvey.objects.create(submission=submission, responses=data.survey_responses)
                survey_saved = True

            AuditService.log(
                event_code="casting_submission.created",
                entity_type="CastingSubmission",
                entity_id=submission.id,
                tenant_id=studio.tenant_id,
                actor_user_id=None,
                metadata={
                    "casting_code": casting_code.code,
                    "external_actor_id": str(actor.id),
                    "actor_created": upsert.created,
                    "survey": survey_saved,
                },
            )

        logger.info(
            "Casting submission %s recorded for code %s (external actor %s)",
            submission.id,
            casting_code.code,
            actor.id,
        )

        project_linked = ProjectAssociator.associate(actor_id=actor.id, project_id=casting_code.project_id)

        return SubmissionOutcome(
            submission=submission,
            actor_created=upsert.created,
            survey_saved=survey_saved,
            project_linked=project_linked,
            create_account=data.create_account,
            user_data={
                "firstName": data.first_name,
                "lastName": data.last_name,
                "email": data.email or "",
                "phoneNumber": data.phone_number or "",
            },
        )
