# cm_core/casting/models.py
from __future__ import annotations

from django.db import models
from django.utils import timezone

from cm_core.common.models import UUIDModel
from cm_core.iam.models import UserProfile
from cm_core.studios.models import Project, Studio


def default_survey_fields() -> dict:
    return {"fields": []}


class CastingCode(UUIDModel):
    """
    Studio-issued shareable code. Applicants reach it through {APP_BASE_URL}/apply/{code}.
    """
    code = models.CharField(max_length=16, unique=True)

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    studio = models.ForeignKey(Studio, on_delete=models.CASCADE, related_name="casting_codes")
    project = models.ForeignKey(
        Project,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="casting_codes",
    )

    is_active = models.BooleanField(default=True, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    # {"fields": [{"id": ..., "label": ..., "type": ..., "required": ...}, ...]}
    survey_fields = models.JSONField(default=default_survey_fields, blank=True)

    class Meta:
        db_table = "casting_casting_code"
        indexes = [
            models.Index(fields=["studio", "is_active"]),
            models.Index(fields=["studio", "project"]),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.name})"

    def is_expired(self, *, now=None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or timezone.now())

    def has_survey_fields(self) -> bool:
        fields = (self.survey_fields or {}).get("fields") if isinstance(self.survey_fields, dict) else None
        return bool(fields)


class ExternalActorStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    CONVERTED = "CONVERTED", "Converted"


class ExternalActor(UUIDModel):
    """
    Person known to one studio without a platform account.

    Identity is soft: (email, studio) or (first_name, last_name, studio).
    No unique constraint, duplicates are possible.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, db_index=True)
    phone_number = models.CharField(max_length=32, blank=True, db_index=True)
    notes = models.TextField(blank=True)

    studio = models.ForeignKey(Studio, on_delete=models.CASCADE, related_name="external_actors")

    status = models.CharField(
        max_length=16,
        choices=ExternalActorStatus.choices,
        default=ExternalActorStatus.ACTIVE,
        db_index=True,
    )
    converted_profile = models.ForeignKey(
        UserProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="converted_external_actors",
    )
    converted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "casting_external_actor"
        indexes = [
            models.Index(fields=["studio", "email"]),
            models.Index(fields=["studio", "first_name", "last_name"]),
            models.Index(fields=["studio", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ExternalActorProject(UUIDModel):
    external_actor = models.ForeignKey(ExternalActor, on_delete=models.CASCADE, related_name="project_links")
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="external_actor_links")

    role = models.CharField(max_length=64, blank=True)

    class Meta:
        db_table = "casting_external_actor_project"
        constraints = [
            models.UniqueConstraint(fields=["external_actor", "project"], name="uq_external_actor_project"),
        ]


class SubmissionStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    CONVERTED = "CONVERTED", "Converted"


class CastingSubmission(UUIDModel):
    """
    One application made through a casting code.
    Contact fields are a snapshot of what the applicant typed.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=32, blank=True)
    message = models.TextField(blank=True)

    casting_code = models.ForeignKey(CastingCode, on_delete=models.CASCADE, related_name="submissions")
    external_actor = models.ForeignKey(ExternalActor, on_delete=models.CASCADE, related_name="submissions")

    status = models.CharField(
        max_length=16,
        choices=SubmissionStatus.choices,
        default=SubmissionStatus.PENDING,
        db_index=True,
    )
    converted_profile = models.ForeignKey(
        UserProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="converted_submissions",
    )

    class Meta:
        db_table = "casting_submission"
        indexes = [
            models.Index(fields=["casting_code", "created_at"]),
            models.Index(fields=["external_actor", "status"]),
        ]


class CastingSubmissionSurvey(UUIDModel):
    submission = models.OneToOneField(CastingSubmission, on_delete=models.CASCADE, related_name="survey")
    responses = models.JSONField(default=dict)

    class Meta:
        db_table = "casting_submission_survey"
