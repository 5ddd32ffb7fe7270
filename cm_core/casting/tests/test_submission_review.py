# cm_core/casting/tests/test_submission_review.py
import pytest

from cm_core.audit.models import AuditEvent
from cm_core.casting.models import CastingSubmission, ExternalActor, SubmissionStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def submission(casting_code):
    actor = ExternalActor.objects.create(studio=casting_code.studio, first_name="Ann", last_name="Lee")
    return CastingSubmission.objects.create(
        first_name="Ann", last_name="Lee", casting_code=casting_code, external_actor=actor
    )


def _url(submission):
    return f"/api/studio/casting-codes/submissions/{submission.id}/"


def test_studio_approves_submission(studio_client, studio_user, submission):
    res = studio_client.patch(_url(submission), {"status": "APPROVED"}, format="json")
    assert res.status_code == 200
    assert res.json()["status"] == "APPROVED"

    submission.refresh_from_db()
    assert submission.status == SubmissionStatus.APPROVED

    event = AuditEvent.objects.get(event_code="casting_submission.status_changed")
    assert event.actor_user_id == studio_user.id
    assert event.metadata == {"from": "PENDING", "to": "APPROVED"}


def test_converted_cannot_be_set_manually(studio_client, submission):
    res = studio_client.patch(_url(submission), {"status": "CONVERTED"}, format="json")
    assert res.status_code == 400
    submission.refresh_from_db()
    assert submission.status == SubmissionStatus.PENDING


def test_converted_submission_is_frozen(studio_client, submission):
    submission.status = SubmissionStatus.CONVERTED
    submission.save(update_fields=["status"])

    res = studio_client.patch(_url(submission), {"status": "REJECTED"}, format="json")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Converted submissions cannot be changed"


def test_unknown_status_is_400(studio_client, submission):
    assert studio_client.patch(_url(submission), {"status": "MAYBE"}, format="json").status_code == 400


def test_other_studio_gets_404(other_studio_client, submission):
    res = other_studio_client.patch(_url(submission), {"status": "REJECTED"}, format="json")
    assert res.status_code == 404
