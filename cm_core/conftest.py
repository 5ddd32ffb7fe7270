# cm_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from cm_core.iam.models import UserProfile
from cm_core.tenants.models import Tenant, TenantType


def _make_user(*, username, tenant, email="", phone_number="", password="testpass"):
    User = get_user_model()
    user = User.objects.create_user(username=username, email=email, password=password, is_active=True)
    UserProfile.objects.create(user=user, tenant=tenant, phone_number=phone_number, is_active=True)
    return user


def _client_for(user) -> APIClient:
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def anon_client():
    """
    Fresh unauthenticated client. Never share with force_authenticate'd clients.
    """
    return APIClient()


# ---------------------------------------------------------------------------
# Studio side
# ---------------------------------------------------------------------------

@pytest.fixture
def studio(db):
    from cm_core.studios.services import StudioService

    return StudioService.create_studio(name="Northlight Pictures", contact_email="casting@northlight.test")


@pytest.fixture
def other_studio(db):
    from cm_core.studios.services import StudioService

    return StudioService.create_studio(name="Harbor Films")


@pytest.fixture
def studio_user(studio):
    return _make_user(username="studio-user", tenant=studio.tenant, email="owner@northlight.test")


@pytest.fixture
def studio_client(studio_user):
    return _client_for(studio_user)


@pytest.fixture
def other_studio_client(other_studio):
    return _client_for(_make_user(username="other-studio-user", tenant=other_studio.tenant))


@pytest.fixture
def project(studio):
    from cm_core.studios.models import Project

    return Project.objects.create(studio=studio, title="Harbor Lights", description="Feature film")


@pytest.fixture
def casting_code(studio):
    from cm_core.casting.models import CastingCode

    return CastingCode.objects.create(code="AB12CD", name="Open call", studio=studio, is_active=True)


@pytest.fixture
def project_casting_code(studio, project):
    from cm_core.casting.models import CastingCode

    return CastingCode.objects.create(
        code="PRJ234",
        name="Extras for Harbor Lights",
        studio=studio,
        project=project,
        is_active=True,
        survey_fields={"fields": [{"id": "height", "label": "Height", "type": "text"}]},
    )


# ---------------------------------------------------------------------------
# Talent / admin
# ---------------------------------------------------------------------------

@pytest.fixture
def talent_tenant(db):
    return Tenant.objects.create(name="Ann Lee", type=TenantType.TALENT)


@pytest.fixture
def talent_user(talent_tenant):
    return _make_user(
        username="ann@example.com",
        tenant=talent_tenant,
        email="ann@example.com",
        phone_number="+15550100",
    )


@pytest.fixture
def talent_client(talent_user):
    return _client_for(talent_user)


@pytest.fixture
def admin_tenant(db):
    return Tenant.objects.create(name="Platform", type=TenantType.ADMIN)


@pytest.fixture
def admin_user(admin_tenant):
    return _make_user(username="platform-admin", tenant=admin_tenant, email="admin@platform.test")


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)
