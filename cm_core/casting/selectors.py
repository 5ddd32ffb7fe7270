# cm_core/casting/selectors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.db.models import Count, Prefetch, Q, QuerySet
from django.utils import timezone

from cm_core.casting.models import (
    CastingCode,
    CastingSubmission,
    ExternalActor,
    ExternalActorProject,
    ExternalActorStatus,
)


@dataclass(frozen=True)
class CastingCodeCriteria:
    project_id: UUID | None = None
    is_active: bool | None = None

    def to_q(self) -> Q:
        q = Q()
        if self.project_id is not None:
            q &= Q(project_id=self.project_id)
        if self.is_active is not None:
            q &= Q(is_active=self.is_active)
        return q


@dataclass(frozen=True)
class ExternalActorCriteria:
    status: str | None = None
    project_id: UUID | None = None
    email: str | None = None
    phone: str | None = None
    search: str | None = None

    def to_q(self) -> Q:
        q = Q()
        if self.status:
            q &= Q(status=self.status)
        if self.project_id is not None:
            q &= Q(project_links__project_id=self.project_id)
        if self.email:
            q &= Q(email__iexact=self.email)
        if self.phone:
            q &= Q(phone_number=self.phone)
        if self.search:
            term = self.search
            q &= (
                Q(email__icontains=term)
                | Q(first_name__icontains=term)
                | Q(last_name__icontains=term)
                | Q(phone_number__icontains=term)
            )
        return q


def normalize_code(raw: str | None) -> str:
    return (raw or "").strip().upper()


def get_casting_code_by_code(*, code: str) -> Optional[CastingCode]:
    return (
        CastingCode.objects.select_related("studio", "project")
        .filter(code=normalize_code(code))
        .first()
    )


def get_studio_casting_code_by_code(*, studio_id: UUID, code: str) -> Optional[CastingCode]:
    return CastingCode.objects.filter(studio_id=studio_id, code=normalize_code(code)).first()


def casting_codes_for_studio(*, studio_id: UUID, criteria: CastingCodeCriteria | None = None) -> QuerySet[CastingCode]:
    criteria = criteria or CastingCodeCriteria()
    return (
        CastingCode.objects.filter(criteria.to_q(), studio_id=studio_id)
        .select_related("project")
        .annotate(submission_count=Count("submissions"))
        .order_by("-created_at")
    )


def get_studio_casting_code(*, studio_id: UUID, casting_code_id: UUID) -> Optional[CastingCode]:
    submissions = CastingSubmission.objects.select_related("external_actor", "survey").order_by("-created_at")
    return (
        CastingCode.objects.select_related("project")
        .prefetch_related(Prefetch("submissions", queryset=submissions))
        .filter(id=casting_code_id, studio_id=studio_id)
        .first()
    )


def get_open_casting_code(*, code: str) -> Optional[CastingCode]:
    """
    Public read for the apply page: active and not expired, else None.
    """
    casting_code = get_casting_code_by_code(code=code)
    if casting_code is None or not casting_code.is_active or casting_code.is_expired(now=timezone.now()):
        return None
    return casting_code


def get_studio_submission(*, studio_id: UUID, submission_id: UUID) -> Optional[CastingSubmission]:
    return (
        CastingSubmission.objects.select_related("casting_code", "external_actor")
        .filter(id=submission_id, casting_code__studio_id=studio_id)
        .first()
    )


def external_actors_for_studio(
    *, studio_id: UUID, criteria: ExternalActorCriteria | None = None
) -> QuerySet[ExternalActor]:
    criteria = criteria or ExternalActorCriteria()
    links = ExternalActorProject.objects.select_related("project")
    return (
        ExternalActor.objects.filter(criteria.to_q(), studio_id=studio_id)
        .prefetch_related(Prefetch("project_links", queryset=links))
        .distinct()
        .order_by("-created_at")
    )


def get_studio_external_actor(*, studio_id: UUID, actor_id: UUID) -> Optional[ExternalActor]:
    links = ExternalActorProject.objects.select_related("project")
    return (
        ExternalActor.objects.prefetch_related(
            Prefetch("project_links", queryset=links),
            "submissions",
        )
        .filter(id=actor_id, studio_id=studio_id)
        .first()
    )


def unconverted_actors_matching(*, email: str, phone_number: str = "") -> list[ExternalActor]:
    """
    Non-converted actors across all studios whose email or phone matches.
    Email and phone are separate lookups; the union is deduplicated by id.
    """
    base = ExternalActor.objects.select_related("studio").exclude(status=ExternalActorStatus.CONVERTED)

    found: dict[UUID, ExternalActor] = {}
    for actor in base.filter(email=email).order_by("created_at"):
        found[actor.id] = actor
    if phone_number:
        for actor in base.filter(phone_number=phone_number).order_by("created_at"):
            found.setdefault(actor.id, actor)
    return list(found.values())
