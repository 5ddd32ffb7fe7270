# cm_core/casting/services/actors.py
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from cm_core.audit.services import AuditService
from cm_core.casting.matching import IdentityCandidate, match_external_actor
from cm_core.casting.models import ExternalActor, ExternalActorProject, ExternalActorStatus
from cm_core.common.api.exceptions import ConflictError
from cm_core.iam.models import UserProfile
from cm_core.studios.models import Studio
from cm_core.studios.selectors import get_project_or_none

logger = logging.getLogger(__name__)

# field -> accepted CSV header names
CSV_COLUMNS = {
    "first_name": ("firstName", "first_name"),
    "last_name": ("lastName", "last_name"),
    "email": ("email",),
    "phone_number": ("phoneNumber", "phone_number", "phone"),
    "notes": ("notes",),
}
IDENTITY_FIELDS = ("first_name", "last_name", "email", "phone_number")
NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 32


@dataclass(frozen=True)
class UpsertResult:
    actor: ExternalActor
    created: bool


@dataclass(frozen=True)
class CsvRowError:
    row: int
    email: str
    error: str


@dataclass
class CsvImportReport:
    success: int = 0
    errors: list[CsvRowError] = field(default_factory=list)
    duplicates: int = 0

    def as_dict(self) -> dict:
        return {
            "success": self.success,
            "errors": [{"row": e.row, "email": e.email, "error": e.error} for e in self.errors],
            "duplicates": self.duplicates,
        }


def _csv_cell(row: dict, *headers: str) -> str:
    for header in headers:
        value = row.get(header)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _csv_row_problem(values: dict[str, str]) -> str | None:
    missing = []
    if not values["first_name"]:
        missing.append("First Name")
    if not values["last_name"]:
        missing.append("Last Name")
    if not values["email"] and not values["phone_number"]:
        missing.append("Email or Phone Number")
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    problems = []
    if values["email"]:
        try:
            validate_email(values["email"])
        except DjangoValidationError:
            problems.append("email: Invalid email format")
    if len(values["first_name"]) > NAME_MAX_LENGTH:
        problems.append(f"firstName: Ensure this field has no more than {NAME_MAX_LENGTH} characters")
    if len(values["last_name"]) > NAME_MAX_LENGTH:
        problems.append(f"lastName: Ensure this field has no more than {NAME_MAX_LENGTH} characters")
    if len(values["phone_number"]) > PHONE_MAX_LENGTH:
        problems.append(f"phoneNumber: Ensure this field has no more than {PHONE_MAX_LENGTH} characters")
    return "; ".join(problems) or None


def _registered_profile_for_email(email: str) -> UserProfile | None:
    if not email:
        return None
    User = get_user_model()
    user = User.objects.filter(email__iexact=email).select_related("profile").first()
    if user is None:
        return None
    return getattr(user, "profile", None)


class ExternalActorService:
    @staticmethod
    def upsert_from_submission(*, studio: Studio, candidate: IdentityCandidate) -> UpsertResult:
        """
        Match the applicant against the studio's external actors and refresh or create one.
        Runs inside the caller's transaction.
        """
        match = match_external_actor(candidate)

        if match is not None:
            actor = match.actor
            actor.first_name = candidate.first_name
            actor.last_name = candidate.last_name
            # keep known contact details unless a new non-empty value is supplied
            if candidate.email:
                actor.email = candidate.email
            if candidate.phone_number:
                actor.phone_number = candidate.phone_number
            actor.save(update_fields=["first_name", "last_name", "email", "phone_number", "updated_at"])

            logger.info("External actor %s refreshed (matched by %s)", actor.id, match.strategy)
            return UpsertResult(actor=actor, created=False)

        actor = ExternalActor.objects.create(
            studio=studio,
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            email=candidate.email,
            phone_number=candidate.phone_number,
            status=ExternalActorStatus.ACTIVE,
        )
        AuditService.log(
            event_code="external_actor.created",
            entity_type="ExternalActor",
            entity_id=actor.id,
            tenant_id=studio.tenant_id,
            actor_user_id=None,
            metadata={"source": "casting_code"},
        )

        logger.info("External actor %s created for studio %s", actor.id, studio.id)
        return UpsertResult(actor=actor, created=True)

    @staticmethod
    def _duplicate_exists(*, studio: Studio, first_name: str, last_name: str, email: str, phone_number: str) -> bool:
        existing = ExternalActor.objects.filter(studio=studio)
        if email:
            existing = existing.filter(email=email)
        else:
            existing = existing.filter(first_name=first_name, last_name=last_name, phone_number=phone_number)
        return existing.exists()

    @staticmethod
    def _create_listed(
        *,
        studio: Studio,
        actor_user_id: int | None,
        source: str,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        notes: str,
    ) -> ExternalActor:
        profile = _registered_profile_for_email(email)

        actor = ExternalActor.objects.create(
            studio=studio,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            notes=notes or "",
            status=ExternalActorStatus.CONVERTED if profile else ExternalActorStatus.ACTIVE,
            converted_profile=profile,
            converted_at=timezone.now() if profile else None,
        )
        AuditService.log(
            event_code="external_actor.created",
            entity_type="ExternalActor",
            entity_id=actor.id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"source": source, "already_registered": profile is not None},
        )
        return actor

    @staticmethod
    @transaction.atomic
    def create_manual(
        *,
        studio: Studio,
        actor_user_id: int | None,
        first_name: str,
        last_name: str,
        email: str = "",
        phone_number: str = "",
        notes: str = "",
    ) -> ExternalActor:
        """
        Studio adds a person by hand. Duplicate check is by email when given,
        otherwise by name and phone. A person who already has a platform account
        is stored as converted right away.
        """
        email = (email or "").strip()
        phone_number = (phone_number or "").strip()
        if not email and not phone_number:
            raise ValidationError({"email": ["Either email or phone number must be provided"]})

        if ExternalActorService._duplicate_exists(
            studio=studio, first_name=first_name, last_name=last_name, email=email, phone_number=phone_number
        ):
            raise ConflictError("External actor with the same details already exists")

        return ExternalActorService._create_listed(
            studio=studio,
            actor_user_id=actor_user_id,
            source="manual",
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            notes=notes,
        )

    @staticmethod
    def import_csv(*, studio: Studio, actor_user_id: int | None, csv_data: str) -> CsvImportReport:
        """
        Bulk-add external actors from CSV text with a header row
        (firstName, lastName, email, phoneNumber, notes).

        Rows are independent: a bad row is reported and skipped, a known person
        is counted as a duplicate, everything else is created like a manual add.
        """
        try:
            rows = list(csv.DictReader(io.StringIO(csv_data), skipinitialspace=True))
        except csv.Error as e:
            raise ValidationError({"csvData": [f"Failed to parse CSV data: {e}"]})

        report = CsvImportReport()
        for row_number, row in enumerate(rows, start=1):
            values = {name: _csv_cell(row, *headers) for name, headers in CSV_COLUMNS.items()}
            if not any(values.values()):
                continue

            problem = _csv_row_problem(values)
            if problem is not None:
                report.errors.append(
                    CsvRowError(row=row_number, email=values["email"] or "Missing", error=problem)
                )
                continue

            if ExternalActorService._duplicate_exists(studio=studio, **{k: values[k] for k in IDENTITY_FIELDS}):
                report.duplicates += 1
                continue

            try:
                with transaction.atomic():
                    ExternalActorService._create_listed(
                        studio=studio, actor_user_id=actor_user_id, source="csv_import", **values
                    )
            except DatabaseError as e:
                logger.warning("CSV import row %s failed for studio %s", row_number, studio.id, exc_info=True)
                report.errors.append(CsvRowError(row=row_number, email=values["email"] or "Unknown", error=str(e)))
                continue

            report.success += 1

        logger.info(
            "CSV import for studio %s: %s created, %s duplicates, %s errors",
            studio.id,
            report.success,
            report.duplicates,
            len(report.errors),
        )
        return report

    @staticmethod
    @transaction.atomic
    def delete(*, studio: Studio, actor_id: UUID, actor_user_id: int | None) -> None:
        actor = ExternalActor.objects.filter(id=actor_id, studio=studio).first()
        if actor is None:
            raise NotFound("External actor not found")

        email = actor.email
        actor.delete()

        AuditService.log(
            event_code="external_actor.deleted",
            entity_type="ExternalActor",
            entity_id=actor_id,
            tenant_id=studio.tenant_id,
            actor_user_id=actor_user_id,
            metadata={"email": email},
        )

    @staticmethod
    @transaction.atomic
    def assign_to_project(
        *,
        studio: Studio,
        actor_id: UUID,
        project_id: UUID,
        role: str = "",
    ) -> tuple[ExternalActorProject, bool]:
        actor = ExternalActor.objects.filter(id=actor_id, studio=studio).first()
        if actor is None:
            raise NotFound("External actor not found")
        project = get_project_or_none(studio_id=studio.id, project_id=project_id)
        if project is None:
            raise NotFound("Project not found or not owned by this studio")

        link, created = ExternalActorProject.objects.get_or_create(
            external_actor=actor,
            project=project,
            defaults={"role": role or ""},
        )
        if not created and role and link.role != role:
            link.role = role
            link.save(update_fields=["role", "updated_at"])
        return link, created


class ProjectAssociator:
    """
    Best-effort link between an external actor and a casting code's project.

    Runs after the submission has committed. Failures are logged and never
    propagate, so the applicant's submission stands regardless.
    """

    @staticmethod
    def _link(*, actor_id: UUID, project_id: UUID) -> bool:
        with transaction.atomic():
            if ExternalActorProject.objects.filter(external_actor_id=actor_id, project_id=project_id).exists():
                return False
            ExternalActorProject.objects.create(external_actor_id=actor_id, project_id=project_id)
            return True

    @classmethod
    def associate(cls, *, actor_id: UUID, project_id: UUID | None) -> bool:
        if project_id is None:
            return False

        try:
            created = cls._link(actor_id=actor_id, project_id=project_id)
        except Exception:
            logger.warning(
                "Could not link external actor %s to project %s",
                actor_id,
                project_id,
                exc_info=True,
            )
            return False

        if created:
            logger.info("External actor %s added to project %s", actor_id, project_id)
        else:
            logger.debug("External actor %s already in project %s", actor_id, project_id)
        return created
