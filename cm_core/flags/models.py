# cm_core/flags/models.py
from django.db import models

from cm_core.common.models import UUIDModel


class FeatureFlag(UUIDModel):
    """
    Durable flag state. Keys without a row fall back to settings.DEFAULT_FEATURE_FLAGS.
    """
    key = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    enabled = models.BooleanField(default=False)

    class Meta:
        db_table = "flags_feature_flag"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={'on' if self.enabled else 'off'}"
