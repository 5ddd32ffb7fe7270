from django.contrib import admin

from cm_core.studios.models import Project, ProjectMember, Studio


@admin.register(Studio)
class StudioAdmin(admin.ModelAdmin):
    list_display = ("name", "contact_email", "created_at")
    search_fields = ("name", "contact_email")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "studio", "is_archived", "created_at")
    list_filter = ("is_archived",)
    search_fields = ("title",)
    raw_id_fields = ("studio",)


@admin.register(ProjectMember)
class ProjectMemberAdmin(admin.ModelAdmin):
    list_display = ("project", "profile", "role", "created_at")
    raw_id_fields = ("project", "profile")
