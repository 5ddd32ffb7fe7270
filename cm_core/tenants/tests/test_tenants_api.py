# cm_core/tenants/tests/test_tenants_api.py
import pytest

from cm_core.audit.models import AuditEvent
from cm_core.tenants.models import Tenant, TenantStatus, TenantType

pytestmark = pytest.mark.django_db

URL = "/api/v1/tenants/"


def test_admin_creates_and_filters_tenants(admin_client):
    res = admin_client.post(URL, {"name": "  Blue Door Studio ", "type": "STUDIO"}, format="json")
    assert res.status_code == 201
    assert res.json()["name"] == "Blue Door Studio"
    assert res.json()["status"] == "ACTIVE"

    res = admin_client.get(URL, {"type": "STUDIO", "name": "blue"})
    assert res.status_code == 200
    assert [t["name"] for t in res.json()["results"]] == ["Blue Door Studio"]


def test_admin_suspends_tenant(admin_client, studio):
    res = admin_client.post(f"{URL}{studio.tenant_id}/set-status/", {"status": "SUSPENDED"}, format="json")
    assert res.status_code == 200
    assert Tenant.objects.get(id=studio.tenant_id).status == TenantStatus.SUSPENDED

    event = AuditEvent.objects.get(event_code="tenant.status_changed", entity_id=studio.tenant_id)
    assert event.metadata == {"from": "ACTIVE", "to": "SUSPENDED"}


def test_suspended_studio_loses_studio_access(admin_client, studio_user, studio, django_user_model):
    from rest_framework.test import APIClient

    admin_client.post(f"{URL}{studio.tenant_id}/set-status/", {"status": "SUSPENDED"}, format="json")

    # fresh instance, the fixture user caches its profile and tenant
    c = APIClient()
    c.force_authenticate(user=django_user_model.objects.get(id=studio_user.id))
    assert c.get("/api/studio/projects/").status_code == 403


def test_unknown_tenant_is_404(admin_client):
    res = admin_client.get(f"{URL}00000000-0000-0000-0000-000000000000/")
    assert res.status_code == 404


def test_superuser_counts_as_platform_admin(django_user_model):
    from rest_framework.test import APIClient

    root = django_user_model.objects.create_superuser(username="root", email="root@x.test", password="x")
    c = APIClient()
    c.force_authenticate(user=root)
    assert c.get(URL).status_code == 200


@pytest.mark.parametrize("client_fixture", ["studio_client", "talent_client"])
def test_non_admins_are_refused(request, client_fixture):
    c = request.getfixturevalue(client_fixture)
    res = c.get(URL)
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "Unauthorized"


def test_invalid_type_is_400(admin_client):
    res = admin_client.post(URL, {"name": "x", "type": "HOSPITAL"}, format="json")
    assert res.status_code == 400
    assert "type" in res.json()["error"]["details"]
    assert not Tenant.objects.filter(name="x").exists()


def test_studio_service_creates_studio_tenant(studio):
    assert studio.tenant.type == TenantType.STUDIO
    assert studio.tenant.name == studio.name
