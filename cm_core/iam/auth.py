# cm_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Authenticate using:
      1) Authorization: Bearer <access>
      2) HttpOnly cookie holding the access token (browser sessions)

    A user whose UserProfile was deactivated is refused even with a valid token.
    Users without a profile (e.g. bare superusers) pass through.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header:
            result = super().authenticate(request)
        else:
            result = self._authenticate_cookie(request)

        if result is None:
            return None

        user, token = result
        self._ensure_profile_active(user)
        return user, token

    def _authenticate_cookie(self, request):
        cookie_name = settings.SIMPLE_JWT.get("AUTH_COOKIE", "cm_access")
        raw_token = request.COOKIES.get(cookie_name)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    @staticmethod
    def _ensure_profile_active(user) -> None:
        profile = getattr(user, "profile", None)
        if profile is not None and not profile.is_active:
            raise AuthenticationFailed("Profile is deactivated", code="profile_inactive")
