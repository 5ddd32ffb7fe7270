# cm_core/casting/matching.py
"""
Identity matching for external actors.

Strategies are evaluated in order; the first one that finds a row wins.
Email is a stronger identity signal than name, so it goes first.
Matching is exact and always scoped to one studio.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from uuid import UUID

from django.db.models import Q

from cm_core.casting.models import ExternalActor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityCandidate:
    studio_id: UUID
    first_name: str
    last_name: str
    email: str = ""
    phone_number: str = ""


@dataclass(frozen=True)
class MatchStrategy:
    name: str
    # returns None when the candidate lacks the data this strategy needs
    build_filter: Callable[[IdentityCandidate], Optional[Q]]


def _by_email(candidate: IdentityCandidate) -> Optional[Q]:
    if not candidate.email:
        return None
    return Q(email=candidate.email)


def _by_name(candidate: IdentityCandidate) -> Optional[Q]:
    return Q(first_name=candidate.first_name, last_name=candidate.last_name)


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    MatchStrategy(name="email", build_filter=_by_email),
    MatchStrategy(name="name", build_filter=_by_name),
)


@dataclass(frozen=True)
class MatchResult:
    actor: ExternalActor
    strategy: str


def match_external_actor(
    candidate: IdentityCandidate,
    *,
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> Optional[MatchResult]:
    for strategy in strategies:
        predicate = strategy.build_filter(candidate)
        if predicate is None:
            continue

        # several rows can satisfy a strategy; the oldest one is the canonical record
        actor = (
            ExternalActor.objects.filter(predicate, studio_id=candidate.studio_id)
            .order_by("created_at", "id")
            .first()
        )
        if actor is not None:
            logger.debug("External actor %s matched by %s", actor.id, strategy.name)
            return MatchResult(actor=actor, strategy=strategy.name)

    return None
