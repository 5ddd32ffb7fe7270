# cm_core/api/urls.py
from __future__ import annotations

from django.urls import path, re_path
from rest_framework.routers import DefaultRouter

from cm_core.audit.api.views import AuditEventViewSet
from cm_core.casting.api.views import (
    ApplyView,
    CastingCodeViewSet,
    CastingSubmissionView,
    ConvertExternalActorView,
    ExternalActorViewSet,
    SubmissionReviewView,
)
from cm_core.flags.api.views import FeatureFlagViewSet
from cm_core.iam.api.auth import LoginView, LogoutView, RefreshView, RegisterView
from cm_core.iam.api.me import MeView
from cm_core.studios.api.views import ProjectViewSet
from cm_core.tenants.api.views import TenantViewSet

router = DefaultRouter()

# Admin
router.register(r"tenants", TenantViewSet, basename="tenants")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")
router.register(r"admin/feature-flags", FeatureFlagViewSet, basename="feature-flags")

# Studio
router.register(r"studio/projects", ProjectViewSet, basename="studio-projects")
router.register(r"studio/casting-codes", CastingCodeViewSet, basename="studio-casting-codes")
router.register(r"studio/external-actors", ExternalActorViewSet, basename="studio-external-actors")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/register/", RegisterView.as_view(), name="register"),
    re_path(r"^auth/convert-external-actor/?$", ConvertExternalActorView.as_view(), name="convert-external-actor"),
    path("me/", MeView.as_view(), name="me"),

    # Public casting-code intake (trailing slash optional so POST bodies survive)
    re_path(r"^casting-submissions/?$", CastingSubmissionView.as_view(), name="casting-submissions"),
    re_path(r"^casting-codes/submit/?$", CastingSubmissionView.as_view(), name="casting-codes-submit"),
    path("apply/<str:code>/", ApplyView.as_view(), name="apply"),

    # Studio submission review (non-ViewSet endpoint)
    path(
        "studio/casting-codes/submissions/<uuid:submission_id>/",
        SubmissionReviewView.as_view(),
        name="studio-submission-review",
    ),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
