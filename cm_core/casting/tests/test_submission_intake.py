# cm_core/casting/tests/test_submission_intake.py
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from cm_core.audit.models import AuditEvent
from cm_core.casting.models import (
    CastingSubmission,
    CastingSubmissionSurvey,
    ExternalActor,
    ExternalActorProject,
    ExternalActorStatus,
    SubmissionStatus,
)
from cm_core.casting.services.actors import ProjectAssociator

pytestmark = pytest.mark.django_db

URL = "/api/casting-submissions/"


def _payload(code="AB12CD", **overrides):
    body = {"firstName": "Ann", "lastName": "Lee", "email": "ann@example.com", "code": code}
    body.update(overrides)
    return body


def test_ann_lee_example_creates_pending_submission_and_active_actor(anon_client, casting_code):
    res = anon_client.post(URL, _payload(), format="json")
    assert res.status_code == 200

    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Your submission has been received successfully!"
    assert body["createAccount"] is False
    assert body["userData"] == {
        "firstName": "Ann",
        "lastName": "Lee",
        "email": "ann@example.com",
        "phoneNumber": "",
    }

    submission = CastingSubmission.objects.get(id=body["submissionId"])
    assert submission.status == SubmissionStatus.PENDING
    assert submission.casting_code_id == casting_code.id

    actors = ExternalActor.objects.filter(studio=casting_code.studio, email="ann@example.com")
    assert actors.count() == 1
    assert actors.get().status == ExternalActorStatus.ACTIVE
    assert submission.external_actor_id == actors.get().id


def test_v1_prefix_and_submit_alias_route_to_same_handler(anon_client, casting_code):
    assert anon_client.post("/api/v1/casting-submissions/", _payload(), format="json").status_code == 200
    assert anon_client.post("/api/casting-codes/submit/", _payload(), format="json").status_code == 200
    assert CastingSubmission.objects.count() == 2
    assert ExternalActor.objects.count() == 1


def test_code_lookup_ignores_case_and_surrounding_whitespace(anon_client, casting_code):
    res = anon_client.post(URL, _payload(code="  ab12cd "), format="json")
    assert res.status_code == 200


def test_unseen_email_creates_exactly_one_actor_per_submission(anon_client, casting_code, other_studio):
    from cm_core.casting.models import CastingCode

    # same person already known to a different studio
    ExternalActor.objects.create(studio=other_studio, first_name="Ann", last_name="Lee", email="ann@example.com")
    CastingCode.objects.create(code="ZZ99ZZ", name="Other", studio=other_studio)

    res = anon_client.post(URL, _payload(), format="json")
    assert res.status_code == 200

    assert ExternalActor.objects.filter(studio=casting_code.studio).count() == 1
    assert ExternalActor.objects.filter(studio=other_studio).count() == 1


def test_email_match_reuses_actor_and_refreshes_only_non_empty_fields(anon_client, casting_code):
    actor = ExternalActor.objects.create(
        studio=casting_code.studio,
        first_name="Annie",
        last_name="Lee",
        email="ann@example.com",
        phone_number="+15550100",
    )
    before = actor.updated_at

    res = anon_client.post(URL, _payload(phoneNumber=""), format="json")
    assert res.status_code == 200

    assert ExternalActor.objects.count() == 1
    actor.refresh_from_db()
    assert actor.first_name == "Ann"
    assert actor.phone_number == "+15550100"
    assert actor.updated_at >= before


def test_email_match_overwrites_phone_when_supplied(anon_client, casting_code):
    actor = ExternalActor.objects.create(
        studio=casting_code.studio, first_name="Ann", last_name="Lee", email="ann@example.com", phone_number="+1"
    )

    anon_client.post(URL, _payload(phoneNumber="+15550199"), format="json")

    actor.refresh_from_db()
    assert actor.phone_number == "+15550199"


def test_name_match_without_email_keeps_stored_email(anon_client, casting_code):
    actor = ExternalActor.objects.create(
        studio=casting_code.studio, first_name="Ann", last_name="Lee", email="ann@example.com"
    )

    res = anon_client.post(URL, {"firstName": "Ann", "lastName": "Lee", "code": "AB12CD"}, format="json")
    assert res.status_code == 200

    assert ExternalActor.objects.count() == 1
    actor.refresh_from_db()
    assert actor.email == "ann@example.com"
    assert res.json()["userData"]["email"] == ""


def test_new_email_on_known_name_reuses_actor_and_takes_the_new_email(anon_client, casting_code):
    # name fallback wins over "unseen email means new actor"
    actor = ExternalActor.objects.create(
        studio=casting_code.studio, first_name="Ann", last_name="Lee", email="ann.old@example.com"
    )

    res = anon_client.post(URL, _payload(email="ann@example.com"), format="json")
    assert res.status_code == 200

    assert list(ExternalActor.objects.filter(studio=casting_code.studio).values_list("email", flat=True)) == [
        "ann@example.com"
    ]
    submission = CastingSubmission.objects.get(id=res.json()["submissionId"])
    assert submission.external_actor_id == actor.id


def test_intake_path_without_trailing_slash_accepts_post(anon_client, casting_code):
    res = anon_client.post(URL.rstrip("/"), _payload(), format="json")
    assert res.status_code == 200
    assert CastingSubmission.objects.count() == 1


def test_unknown_code_is_404_without_writes(anon_client, casting_code):
    res = anon_client.post(URL, _payload(code="NOPE42"), format="json")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Invalid casting code"
    assert res.json()["error"]["code"] == "not_found"
    assert CastingSubmission.objects.count() == 0
    assert ExternalActor.objects.count() == 0


def test_inactive_code_is_400_without_writes(anon_client, casting_code):
    casting_code.is_active = False
    casting_code.save(update_fields=["is_active"])

    res = anon_client.post(URL, _payload(), format="json")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "This casting code is no longer active"
    assert CastingSubmission.objects.count() == 0
    assert ExternalActor.objects.count() == 0


def test_expired_code_is_400_without_writes(anon_client, casting_code):
    casting_code.expires_at = timezone.now() - timedelta(minutes=1)
    casting_code.save(update_fields=["expires_at"])

    res = anon_client.post(URL, _payload(), format="json")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "This casting code has expired"
    assert CastingSubmission.objects.count() == 0


def test_future_expiry_still_accepts(anon_client, casting_code):
    casting_code.expires_at = timezone.now() + timedelta(days=3)
    casting_code.save(update_fields=["expires_at"])

    assert anon_client.post(URL, _payload(), format="json").status_code == 200


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"firstName": ""}, "firstName"),
        ({"lastName": "   "}, "lastName"),
        ({"email": "not-an-email"}, "email"),
        ({"message": "x" * 5001}, "message"),
        ({"code": ""}, "code"),
    ],
)
def test_payload_validation_is_400_with_field_details(anon_client, casting_code, overrides, field):
    res = anon_client.post(URL, _payload(**overrides), format="json")
    assert res.status_code == 400

    err = res.json()["error"]
    assert err["code"] == "validation_error"
    assert field in err["details"]
    assert CastingSubmission.objects.count() == 0


def test_code_without_project_skips_association(anon_client, casting_code):
    with patch.object(ProjectAssociator, "_link") as link:
        res = anon_client.post(URL, _payload(), format="json")

    assert res.status_code == 200
    link.assert_not_called()
    assert ExternalActorProject.objects.count() == 0


def test_project_code_links_actor_once(anon_client, project_casting_code, project):
    for _ in range(2):
        res = anon_client.post(URL, _payload(code="PRJ234"), format="json")
        assert res.status_code == 200

    actor = ExternalActor.objects.get(email="ann@example.com")
    assert ExternalActorProject.objects.filter(external_actor=actor, project=project).count() == 1
    assert CastingSubmission.objects.filter(external_actor=actor).count() == 2


def test_association_failure_does_not_fail_submission(anon_client, project_casting_code, caplog):
    with patch.object(ProjectAssociator, "_link", side_effect=RuntimeError("db down")):
        res = anon_client.post(URL, _payload(code="PRJ234"), format="json")

    assert res.status_code == 200
    assert CastingSubmission.objects.filter(id=res.json()["submissionId"]).exists()
    assert ExternalActorProject.objects.count() == 0
    assert "Could not link external actor" in caplog.text


def test_survey_saved_when_code_defines_fields_and_responses_given(anon_client, project_casting_code):
    res = anon_client.post(URL, _payload(code="PRJ234", surveyResponses={"height": "170cm"}), format="json")
    assert res.status_code == 200

    survey = CastingSubmissionSurvey.objects.get(submission_id=res.json()["submissionId"])
    assert survey.responses == {"height": "170cm"}


@pytest.mark.parametrize("responses", [None, {}])
def test_survey_skipped_without_responses(anon_client, project_casting_code, responses):
    body = _payload(code="PRJ234")
    if responses is not None:
        body["surveyResponses"] = responses

    assert anon_client.post(URL, body, format="json").status_code == 200
    assert CastingSubmissionSurvey.objects.count() == 0


def test_survey_skipped_when_code_has_no_fields(anon_client, casting_code):
    res = anon_client.post(URL, _payload(surveyResponses={"height": "170cm"}), format="json")
    assert res.status_code == 200
    assert CastingSubmissionSurvey.objects.count() == 0


def test_create_account_flag_is_echoed(anon_client, casting_code):
    res = anon_client.post(URL, _payload(createAccount=True, phoneNumber="+15550100"), format="json")
    assert res.status_code == 200
    assert res.json()["createAccount"] is True
    assert res.json()["userData"]["phoneNumber"] == "+15550100"


def test_submission_and_new_actor_are_audited(anon_client, casting_code):
    anon_client.post(URL, _payload(), format="json")

    codes = set(AuditEvent.objects.filter(tenant_id=casting_code.studio.tenant_id).values_list("event_code", flat=True))
    assert {"external_actor.created", "casting_submission.created"} <= codes
    assert AuditEvent.objects.filter(actor_user__isnull=False).count() == 0
