# cm_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission

from cm_core.tenants.models import TenantStatus, TenantType


def tenant_type_of(user) -> str | None:
    """
    Resolve the tenant type of an authenticated user via auth_user -> UserProfile -> Tenant.

    Returns None when the user is anonymous, has no profile, the profile is inactive,
    or the tenant is suspended.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None

    # reverse one-to-one raises when missing
    try:
        profile = user.profile
    except Exception:
        return None

    if not profile.is_active:
        return None

    tenant = profile.tenant
    if tenant.status != TenantStatus.ACTIVE:
        return None
    return tenant.type


class BaseTenantTypePermission(BasePermission):
    """
    Tenant-type gate (TALENT / STUDIO / ADMIN).

    - Requires authentication (global IsAuthenticated already does this).
    - Superusers are treated as platform admins.
    - Subclasses set allowed_tenant_types.
    """
    message = "Not authorized"

    allowed_tenant_types: frozenset[str] = frozenset()

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        if getattr(user, "is_superuser", False) and TenantType.ADMIN in self.allowed_tenant_types:
            return True

        return tenant_type_of(user) in self.allowed_tenant_types

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class IsStudioUser(BaseTenantTypePermission):
    """Studio-side screens: casting codes, submissions review, external actors, projects."""
    allowed_tenant_types = frozenset({TenantType.STUDIO})


class IsPlatformAdmin(BaseTenantTypePermission):
    """Tenants, feature flags, audit log."""
    message = "Unauthorized"
    allowed_tenant_types = frozenset({TenantType.ADMIN})
