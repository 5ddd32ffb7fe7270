# cm_core/iam/services/registration.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import ValidationError

from cm_core.common.api.exceptions import ConflictError
from cm_core.iam.models import UserProfile
from cm_core.iam.services.profiles import ProfileService
from cm_core.tenants.models import TenantType
from cm_core.tenants.services import TenantService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredAccount:
    user: object
    profile: UserProfile


class RegistrationService:
    """
    Self sign-up for talents.

    The casting-code application form hands firstName/lastName/email/phoneNumber
    to the client when createAccount=true; the client posts them here, then calls
    the external-actor conversion endpoint once authenticated.
    """

    @staticmethod
    @transaction.atomic
    def register_talent(
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone_number: str = "",
    ) -> RegisteredAccount:
        User = get_user_model()
        email = (email or "").strip()

        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("An account with this email already exists.")

        try:
            validate_password(password)
        except DjangoValidationError as e:
            raise ValidationError({"password": list(e.messages)})

        user = User.objects.create_user(
            username=email.lower(),
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )

        tenant = TenantService.create(
            name=f"{first_name} {last_name}".strip(),
            type=TenantType.TALENT,
        )
        profile = ProfileService.create(user=user, tenant=tenant, phone_number=phone_number)

        logger.info("Registered talent user_id=%s tenant_id=%s", user.id, tenant.id)
        return RegisteredAccount(user=user, profile=profile)
