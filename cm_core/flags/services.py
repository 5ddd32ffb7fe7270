# cm_core/flags/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound

from cm_core.common.api.exceptions import ConflictError
from cm_core.flags.models import FeatureFlag
from cm_core.flags.selectors import FlagState, flag_state_from_row, default_flags

logger = logging.getLogger(__name__)


class FeatureFlagService:
    @staticmethod
    @transaction.atomic
    def create(*, key: str, name: str, description: str = "", enabled: bool = False) -> FlagState:
        if FeatureFlag.objects.filter(key=key).exists():
            raise ConflictError(f"Feature flag '{key}' already exists")
        row = FeatureFlag.objects.create(key=key, name=name, description=description or "", enabled=enabled)
        logger.info("Feature flag %s created (enabled=%s)", key, enabled)
        return flag_state_from_row(row)

    @staticmethod
    @transaction.atomic
    def update(
        *,
        key: str,
        enabled: Optional[bool] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> FlagState:
        """
        Update a flag. A key known only from the defaults is persisted first.
        """
        row = FeatureFlag.objects.select_for_update().filter(key=key).first()
        if row is None:
            definition = default_flags().get(key)
            if definition is None:
                raise NotFound("Feature flag not found")
            row = FeatureFlag.objects.create(
                key=key,
                name=definition.get("name") or key,
                description=definition.get("description") or "",
                enabled=bool(definition.get("enabled", False)),
            )

        if enabled is not None:
            row.enabled = enabled
        if name is not None:
            row.name = name
        if description is not None:
            row.description = description
        row.save()

        logger.info("Feature flag %s updated (enabled=%s)", key, row.enabled)
        return flag_state_from_row(row)
