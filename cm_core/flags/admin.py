from django.contrib import admin

from cm_core.flags.models import FeatureFlag


@admin.register(FeatureFlag)
class FeatureFlagAdmin(admin.ModelAdmin):
    list_display = ("key", "name", "enabled", "updated_at")
    list_filter = ("enabled",)
    search_fields = ("key", "name")
