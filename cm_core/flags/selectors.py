# cm_core/flags/selectors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from cm_core.flags.models import FeatureFlag

SOURCE_STORED = "stored"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class FlagState:
    key: str
    name: str
    description: str
    enabled: bool
    source: str


def default_flags() -> dict[str, dict]:
    return dict(getattr(settings, "DEFAULT_FEATURE_FLAGS", {}) or {})


def flag_state_from_row(row: FeatureFlag) -> FlagState:
    return FlagState(
        key=row.key,
        name=row.name,
        description=row.description,
        enabled=row.enabled,
        source=SOURCE_STORED,
    )


def _from_default(key: str, definition: dict) -> FlagState:
    return FlagState(
        key=key,
        name=definition.get("name") or key,
        description=definition.get("description") or "",
        enabled=bool(definition.get("enabled", False)),
        source=SOURCE_DEFAULT,
    )


def list_flags() -> list[FlagState]:
    stored = {row.key: flag_state_from_row(row) for row in FeatureFlag.objects.all()}
    merged = dict(stored)
    for key, definition in default_flags().items():
        merged.setdefault(key, _from_default(key, definition))
    return [merged[k] for k in sorted(merged)]


def get_flag(*, key: str) -> Optional[FlagState]:
    row = FeatureFlag.objects.filter(key=key).first()
    if row is not None:
        return flag_state_from_row(row)
    definition = default_flags().get(key)
    if definition is None:
        return None
    return _from_default(key, definition)


def is_enabled(key: str) -> bool:
    flag = get_flag(key=key)
    return bool(flag and flag.enabled)
