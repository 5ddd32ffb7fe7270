# cm_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from cm_core.iam.models import UserProfile
from cm_core.tenants.models import TenantType

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Use a fresh APIClient to guarantee an unauthenticated request.
    """
    res = APIClient().get("/api/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies(talent_user, settings):
    talent_user.set_password("Pass@12345")
    talent_user.save(update_fields=["password"])

    res = APIClient().post(
        "/api/auth/login/",
        {"username": talent_user.username, "password": "Pass@12345"},
        format="json",
    )
    assert res.status_code == 200

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies


def test_login_wrong_password_is_401(talent_user):
    res = APIClient().post(
        "/api/auth/login/",
        {"username": talent_user.username, "password": "wrong"},
        format="json",
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "authentication_failed"
    assert "WWW-Authenticate" in res


def test_login_ignores_stale_access_cookie(talent_user, settings):
    talent_user.set_password("Pass@12345")
    talent_user.save(update_fields=["password"])

    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = "expired-or-garbage"
    res = c.post(
        "/api/auth/login/",
        {"username": talent_user.username, "password": "Pass@12345"},
        format="json",
    )
    assert res.status_code == 200


def test_refresh_rotates_cookies(talent_user, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"]] = str(RefreshToken.for_user(talent_user))

    res = c.post("/api/auth/refresh/")
    assert res.status_code == 200
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies


def test_refresh_with_bad_cookie_is_401(settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"]] = "garbage"

    res = c.post("/api/auth/refresh/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "token_not_valid"


def test_cookie_authentication_reaches_me(talent_user, settings):
    """
    No force_authenticate: CookieOrHeaderJWTAuthentication must resolve the cookie.
    """
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(talent_user).access_token)

    res = c.get("/api/me/")
    assert res.status_code == 200
    assert res.json()["user"]["id"] == talent_user.id


def test_bearer_header_authentication(talent_user):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(talent_user).access_token}")
    assert c.get("/api/me/").status_code == 200


def test_me_for_talent(talent_client, talent_user):
    body = talent_client.get("/api/me/").json()
    assert body["user"]["email"] == "ann@example.com"
    assert body["profile"]["phone_number"] == "+15550100"
    assert body["profile"]["tenant"]["type"] == "TALENT"
    assert body["studio"] is None


def test_me_for_studio_user(studio_client, studio):
    body = studio_client.get("/api/me/").json()
    assert body["profile"]["tenant"]["type"] == "STUDIO"
    assert body["studio"] == {"id": str(studio.id), "name": studio.name}


def test_logout_clears_cookies(talent_client, settings):
    res = talent_client.post("/api/auth/logout/")
    assert res.status_code == 200
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""


def test_register_creates_talent_and_logs_in(settings, django_user_model):
    res = APIClient().post(
        "/api/auth/register/",
        {
            "email": "New.Person@example.com",
            "password": "Str0ng-Passw0rd!",
            "firstName": "New",
            "lastName": "Person",
            "phoneNumber": "+15550111",
        },
        format="json",
    )
    assert res.status_code == 201
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies

    user = django_user_model.objects.get(username="new.person@example.com")
    profile = UserProfile.objects.get(user=user)
    assert str(profile.id) == res.json()["profile_id"]
    assert profile.phone_number == "+15550111"
    assert profile.tenant.type == TenantType.TALENT


def test_register_duplicate_email_is_409(talent_user):
    res = APIClient().post(
        "/api/auth/register/",
        {"email": "ANN@example.com", "password": "Str0ng-Passw0rd!", "firstName": "A", "lastName": "L"},
        format="json",
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"


def test_register_weak_password_is_400(db):
    res = APIClient().post(
        "/api/auth/register/",
        {"email": "weak@example.com", "password": "password", "firstName": "W", "lastName": "K"},
        format="json",
    )
    assert res.status_code == 400
    assert "password" in res.json()["error"]["details"]


def test_register_then_convert_picks_up_casting_history(casting_code):
    """
    The apply page hands its userData to sign-up, then the client asks for conversion.
    """
    c = APIClient()
    submit = c.post(
        "/api/casting-submissions/",
        {"firstName": "Ann", "lastName": "Lee", "email": "ann@example.com", "code": "AB12CD", "createAccount": True},
        format="json",
    ).json()
    data = submit["userData"]

    reg = c.post(
        "/api/auth/register/",
        {**data, "password": "Str0ng-Passw0rd!"},
        format="json",
    )
    assert reg.status_code == 201

    # cookies from register authenticate the follow-up call
    res = c.get("/api/auth/convert-external-actor/")
    assert res.status_code == 200
    assert res.json()["converted"] is True
    assert res.json()["conversions"][0]["studio"] == casting_code.studio.name


def test_deactivated_profile_is_refused_with_valid_token(talent_user):
    UserProfile.objects.filter(user=talent_user).update(is_active=False)

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(talent_user).access_token}")
    res = c.get("/api/me/")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Profile is deactivated"
