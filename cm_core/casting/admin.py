from django.contrib import admin

from cm_core.casting.models import (
    CastingCode,
    CastingSubmission,
    CastingSubmissionSurvey,
    ExternalActor,
    ExternalActorProject,
)


@admin.register(CastingCode)
class CastingCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "studio", "project", "is_active", "expires_at", "created_at")
    list_filter = ("is_active",)
    search_fields = ("code", "name")


class ExternalActorProjectInline(admin.TabularInline):
    model = ExternalActorProject
    extra = 0


@admin.register(ExternalActor)
class ExternalActorAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "email", "phone_number", "studio", "status", "converted_at")
    list_filter = ("status",)
    search_fields = ("first_name", "last_name", "email", "phone_number")
    inlines = [ExternalActorProjectInline]


class CastingSubmissionSurveyInline(admin.StackedInline):
    model = CastingSubmissionSurvey
    extra = 0


@admin.register(CastingSubmission)
class CastingSubmissionAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "email", "casting_code", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("first_name", "last_name", "email")
    inlines = [CastingSubmissionSurveyInline]
