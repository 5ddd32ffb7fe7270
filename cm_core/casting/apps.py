from django.apps import AppConfig


class CastingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cm_core.casting"
    verbose_name = "Casting codes & external actors"
