# cm_core/casting/tests/test_casting_codes_api.py
from unittest.mock import patch

import pytest
from django.conf import settings

from cm_core.audit.models import AuditEvent
from cm_core.casting.models import CastingCode, CastingSubmission, ExternalActor
from cm_core.casting.services import codes as code_services

pytestmark = pytest.mark.django_db

URL = "/api/studio/casting-codes/"


def test_requires_studio_tenant(talent_client):
    res = talent_client.get(URL)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"


def test_studio_tenant_without_studio_row_is_404(studio_user, studio):
    from rest_framework.test import APIClient

    studio.delete()
    c = APIClient()
    c.force_authenticate(user=studio_user)

    res = c.get(URL)
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Studio not found"


def test_create_generates_code_from_alphabet(studio_client, studio):
    res = studio_client.post(URL, {"name": "Spring open call", "description": "Extras"}, format="json")
    assert res.status_code == 201

    body = res.json()
    code = body["code"]
    assert len(code) == settings.CASTING_CODE_LENGTH
    assert set(code) <= set(settings.CASTING_CODE_ALPHABET)
    assert body["is_active"] is True
    assert body["survey_fields"] == {"fields": []}
    assert body["application_url"] == f"https://casting.test/apply/{code}"

    cc = CastingCode.objects.get(id=body["id"])
    assert cc.studio_id == studio.id
    assert AuditEvent.objects.filter(event_code="casting_code.created", entity_id=cc.id).exists()


def test_create_retries_on_collision(studio_client, casting_code):
    with patch.object(code_services, "generate_code", side_effect=["AB12CD", "AB12CD", "XY34ZW"]):
        res = studio_client.post(URL, {"name": "Second"}, format="json")

    assert res.status_code == 201
    assert res.json()["code"] == "XY34ZW"


def test_create_gives_up_after_bounded_attempts(studio_client, casting_code):
    with patch.object(code_services, "generate_code", return_value="AB12CD"):
        res = studio_client.post(URL, {"name": "Doomed"}, format="json")

    assert res.status_code == 409
    assert CastingCode.objects.count() == 1


def test_create_with_foreign_project_is_404(studio_client, other_studio):
    from cm_core.studios.models import Project

    foreign = Project.objects.create(studio=other_studio, title="Not yours")

    res = studio_client.post(URL, {"name": "x", "project_id": str(foreign.id)}, format="json")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Project not found or not owned by this studio"


def test_create_rejects_malformed_survey_fields(studio_client):
    res = studio_client.post(URL, {"name": "x", "survey_fields": {"fields": "nope"}}, format="json")
    assert res.status_code == 400
    assert "survey_fields" in res.json()["error"]["details"]


def test_list_is_scoped_and_filterable(studio_client, casting_code, project_casting_code, other_studio, project):
    CastingCode.objects.create(code="OTH777", name="theirs", studio=other_studio)
    CastingCode.objects.create(code="OFF888", name="off", studio=casting_code.studio, is_active=False)

    res = studio_client.get(URL)
    assert res.status_code == 200
    assert {r["code"] for r in res.json()["results"]} == {"AB12CD", "PRJ234", "OFF888"}

    res = studio_client.get(URL, {"project_id": str(project.id)})
    assert [r["code"] for r in res.json()["results"]] == ["PRJ234"]

    res = studio_client.get(URL, {"is_active": "false"})
    assert [r["code"] for r in res.json()["results"]] == ["OFF888"]


def test_list_rejects_bad_filters(studio_client):
    assert studio_client.get(URL, {"project_id": "nope"}).status_code == 400
    assert studio_client.get(URL, {"is_active": "maybe"}).status_code == 400


def test_retrieve_includes_submissions(studio_client, casting_code):
    actor = ExternalActor.objects.create(studio=casting_code.studio, first_name="Ann", last_name="Lee")
    CastingSubmission.objects.create(first_name="Ann", last_name="Lee", casting_code=casting_code, external_actor=actor)

    res = studio_client.get(f"{URL}{casting_code.id}/")
    assert res.status_code == 200

    body = res.json()
    assert body["submission_count"] == 1
    assert body["submissions"][0]["external_actor"]["id"] == str(actor.id)
    assert body["submissions"][0]["survey"] is None


def test_other_studio_cannot_see_code(other_studio_client, casting_code):
    assert other_studio_client.get(f"{URL}{casting_code.id}/").status_code == 404
    assert other_studio_client.patch(f"{URL}{casting_code.id}/", {"is_active": False}, format="json").status_code == 404
    assert other_studio_client.delete(f"{URL}{casting_code.id}/").status_code == 404


def test_patch_updates_only_supplied_fields(studio_client, casting_code, project):
    res = studio_client.patch(
        f"{URL}{casting_code.id}/",
        {"is_active": False, "project_id": str(project.id)},
        format="json",
    )
    assert res.status_code == 200

    casting_code.refresh_from_db()
    assert casting_code.is_active is False
    assert casting_code.project_id == project.id
    assert casting_code.name == "Open call"

    event = AuditEvent.objects.get(event_code="casting_code.updated", entity_id=casting_code.id)
    assert event.metadata["fields"] == ["is_active", "project"]


def test_patch_can_clear_expiry(studio_client, casting_code):
    from django.utils import timezone

    casting_code.expires_at = timezone.now()
    casting_code.save(update_fields=["expires_at"])

    res = studio_client.patch(f"{URL}{casting_code.id}/", {"expires_at": None}, format="json")
    assert res.status_code == 200
    casting_code.refresh_from_db()
    assert casting_code.expires_at is None


def test_delete_cascades_submissions(studio_client, casting_code):
    actor = ExternalActor.objects.create(studio=casting_code.studio, first_name="Ann", last_name="Lee")
    CastingSubmission.objects.create(first_name="Ann", last_name="Lee", casting_code=casting_code, external_actor=actor)

    res = studio_client.delete(f"{URL}{casting_code.id}/")
    assert res.status_code == 204
    assert not CastingCode.objects.filter(id=casting_code.id).exists()
    assert CastingSubmission.objects.count() == 0
    assert ExternalActor.objects.filter(id=actor.id).exists()
