from django.contrib import admin

from cm_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "tenant", "phone_number", "is_active", "created_at")
    list_filter = ("is_active", "tenant__type")
    search_fields = ("user__username", "user__email", "phone_number")
    raw_id_fields = ("user", "tenant")
    readonly_fields = ("id", "created_at", "updated_at")
