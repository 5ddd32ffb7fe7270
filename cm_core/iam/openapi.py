# cm_core/iam/openapi.py
from django.conf import settings
from drf_spectacular.extensions import OpenApiAuthenticationExtension


class CookieOrHeaderJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "cm_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE", "cm_access")
        # Swagger "Authorize" only speaks Bearer; browsers use the cookie set by login/register
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token via `Authorization: Bearer <token>`, or the HttpOnly "
                f"`{cookie}` cookie issued by /auth/login/ and /auth/register/. "
                "Public casting-code endpoints ignore both."
            ),
        }
