# cm_core/casting/tests/test_identity_matching.py
from datetime import timedelta

import pytest
from django.db.models import Q
from django.utils import timezone

from cm_core.casting.matching import (
    DEFAULT_STRATEGIES,
    IdentityCandidate,
    MatchStrategy,
    match_external_actor,
)
from cm_core.casting.models import ExternalActor

pytestmark = pytest.mark.django_db


def _candidate(studio, **kw):
    data = {"studio_id": studio.id, "first_name": "Ann", "last_name": "Lee"}
    data.update(kw)
    return IdentityCandidate(**data)


def test_strategy_order_is_email_then_name():
    assert [s.name for s in DEFAULT_STRATEGIES] == ["email", "name"]


def test_email_beats_name(studio):
    by_name = ExternalActor.objects.create(studio=studio, first_name="Ann", last_name="Lee")
    by_email = ExternalActor.objects.create(
        studio=studio, first_name="Someone", last_name="Else", email="ann@example.com"
    )

    result = match_external_actor(_candidate(studio, email="ann@example.com"))

    assert result.actor.id == by_email.id
    assert result.strategy == "email"
    assert result.actor.id != by_name.id


def test_falls_back_to_exact_name(studio):
    actor = ExternalActor.objects.create(studio=studio, first_name="Ann", last_name="Lee", email="old@example.com")

    result = match_external_actor(_candidate(studio, email="new@example.com"))

    assert result.actor.id == actor.id
    assert result.strategy == "name"


def test_no_fuzzy_matching(studio):
    ExternalActor.objects.create(studio=studio, first_name="Anne", last_name="Lee")
    ExternalActor.objects.create(studio=studio, first_name="ann", last_name="lee")

    assert match_external_actor(_candidate(studio)) is None


def test_matching_is_scoped_to_studio(studio, other_studio):
    ExternalActor.objects.create(studio=other_studio, first_name="Ann", last_name="Lee", email="ann@example.com")

    assert match_external_actor(_candidate(studio, email="ann@example.com")) is None


def test_oldest_row_wins_on_ambiguous_match(studio):
    older = ExternalActor.objects.create(studio=studio, first_name="Ann", last_name="Lee")
    newer = ExternalActor.objects.create(studio=studio, first_name="Ann", last_name="Lee")
    ExternalActor.objects.filter(id=older.id).update(created_at=timezone.now() - timedelta(days=30))

    result = match_external_actor(_candidate(studio))

    assert result.actor.id == older.id
    assert result.actor.id != newer.id


def test_custom_strategy_list(studio):
    actor = ExternalActor.objects.create(studio=studio, first_name="X", last_name="Y", phone_number="+1555")
    by_phone = MatchStrategy(
        name="phone",
        build_filter=lambda c: Q(phone_number=c.phone_number) if c.phone_number else None,
    )

    result = match_external_actor(_candidate(studio, phone_number="+1555"), strategies=[by_phone])

    assert result.actor.id == actor.id
    assert result.strategy == "phone"
