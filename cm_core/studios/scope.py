# cm_core/studios/scope.py
from __future__ import annotations

from rest_framework.exceptions import NotFound, PermissionDenied

from cm_core.iam.services.profiles import get_profile_or_none
from cm_core.studios.models import Studio
from cm_core.studios.selectors import studio_for_tenant_or_none
from cm_core.tenants.models import TenantType

NOT_STUDIO_MSG = "Not authorized"
STUDIO_NOT_FOUND_MSG = "Studio not found"


def require_studio(request) -> Studio:
    """
    Resolve the studio the current user acts for.

    Graph: auth_user -> UserProfile -> Tenant(type=STUDIO) -> Studio

    - 403 if the user's tenant is not a studio
    - 404 if the studio tenant has no Studio row yet
    - caches the result on request.studio
    """
    cached = getattr(request, "studio", None)
    if isinstance(cached, Studio):
        return cached

    user = getattr(request, "user", None)
    profile = get_profile_or_none(user_id=user.id) if user and user.is_authenticated else None

    if profile is None or profile.tenant.type != TenantType.STUDIO:
        raise PermissionDenied(NOT_STUDIO_MSG)

    studio = studio_for_tenant_or_none(tenant_id=profile.tenant_id)
    if studio is None:
        raise NotFound(STUDIO_NOT_FOUND_MSG)

    request.studio = studio
    return studio
