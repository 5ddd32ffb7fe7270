# cm_core/studios/models.py
from django.db import models

from cm_core.common.models import UUIDModel
from cm_core.iam.models import UserProfile
from cm_core.tenants.models import Tenant


class Studio(UUIDModel):
    """
    Studio account details. One per STUDIO tenant.
    Owns projects, casting codes and external actors.
    """
    tenant = models.OneToOneField(Tenant, on_delete=models.PROTECT, related_name="studio")

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    contact_name = models.CharField(max_length=255, blank=True)
    contact_email = models.EmailField(blank=True)
    website = models.URLField(blank=True)

    class Meta:
        db_table = "studios_studio"

    def __str__(self) -> str:
        return self.name


class Project(UUIDModel):
    studio = models.ForeignKey(Studio, on_delete=models.CASCADE, related_name="projects")

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    is_archived = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = "studios_project"
        indexes = [
            models.Index(fields=["studio", "is_archived"]),
        ]

    def __str__(self) -> str:
        return self.title


class ProjectMember(UUIDModel):
    """
    Registered platform profile participating in a project.
    """
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="members")
    profile = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="project_memberships")

    role = models.CharField(max_length=64, default="Talent")
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "studios_project_member"
        constraints = [
            models.UniqueConstraint(fields=["project", "profile"], name="uq_project_member_profile"),
        ]
