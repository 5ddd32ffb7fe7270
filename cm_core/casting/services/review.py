# cm_core/casting/services/review.py
from __future__ import annotations

from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import NotFound

from cm_core.audit.services import AuditService
from cm_core.casting.models import CastingSubmission, SubmissionStatus
from cm_core.common.api.exceptions import DetailValidationError
from cm_core.studios.models import Studio

REVIEWABLE_STATUSES = frozenset({SubmissionStatus.PENDING, SubmissionStatus.APPROVED, SubmissionStatus.REJECTED})


class SubmissionReviewService:
    @staticmethod
    @transaction.atomic
    def set_status(
        *,
        studio: Studio,
        submission_id: UUID,
        status: str,
        actor_user_id: int | None,
    ) -> CastingSubmission:
        submission = (
            CastingSubmission.objects.select_for_update()
            .filter(id=submission_id, casting_code__studio=studio)
            .first()
        )
        if submission is None:
            raise NotFound("Submission not found")

        if submission.status == SubmissionStatus.CONVERTED:
            raise DetailValidationError("Converted submissions cannot be changed")
        if status not in REVIEWABLE_STATUSES:
            raise DetailValidationError("Status must be one of PENDING, APPROVED, REJECTED")

        previous = submission.status
        if previous == status:
            return submission

        submission.status = status
        submission.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="casting_submission.status_changed",
            entity_type="CastingSubmission",
            entity_id=submission.id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status},
        )
        return submission
