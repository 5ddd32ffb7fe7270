# cm_core/casting/api/serializers.py
from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from cm_core.casting.models import (
    CastingCode,
    CastingSubmission,
    ExternalActor,
    ExternalActorProject,
    SubmissionStatus,
)
from cm_core.casting.qr import build_application_url
from cm_core.casting.selectors import normalize_code
from cm_core.casting.services.intake import SubmissionInput
from cm_core.studios.api.serializers import StudioSummarySerializer


def _validate_survey_fields(value):
    if value is None:
        return value
    if not isinstance(value, dict) or not isinstance(value.get("fields", []), list):
        raise serializers.ValidationError('Expected an object like {"fields": [...]}.')
    value.setdefault("fields", [])
    return value


# ---------------------------------------------------------------------------
# Public intake (camelCase contract shared with the apply page)
# ---------------------------------------------------------------------------

class CastingSubmissionCreateSerializer(serializers.Serializer):
    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True, default="")
    phoneNumber = serializers.CharField(
        source="phone_number", max_length=32, required=False, allow_blank=True, allow_null=True, default=""
    )
    message = serializers.CharField(
        max_length=5000, required=False, allow_blank=True, allow_null=True, default="", trim_whitespace=False
    )
    code = serializers.CharField(max_length=16)
    createAccount = serializers.BooleanField(source="create_account", required=False, default=False)
    surveyResponses = serializers.DictField(source="survey_responses", required=False, allow_null=True)

    def validate_code(self, value: str) -> str:
        code = normalize_code(value)
        if not code:
            raise serializers.ValidationError("Casting code is required")
        return code

    def to_input(self) -> SubmissionInput:
        d = self.validated_data
        return SubmissionInput(
            code=d["code"],
            first_name=d["first_name"],
            last_name=d["last_name"],
            email=(d.get("email") or "").strip(),
            phone_number=(d.get("phone_number") or "").strip(),
            message=d.get("message") or "",
            create_account=bool(d.get("create_account")),
            survey_responses=d.get("survey_responses") or None,
        )


class SubmissionUserDataSerializer(serializers.Serializer):
    firstName = serializers.CharField()
    lastName = serializers.CharField()
    email = serializers.CharField(allow_blank=True)
    phoneNumber = serializers.CharField(allow_blank=True)


class CastingSubmissionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    submissionId = serializers.UUIDField()
    createAccount = serializers.BooleanField()
    userData = SubmissionUserDataSerializer()


class ApplyProjectSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)


class ApplyCastingCodeSerializer(serializers.ModelSerializer):
    studio = StudioSummarySerializer(read_only=True)
    project = ApplyProjectSerializer(read_only=True, allow_null=True)
    application_url = serializers.SerializerMethodField()

    class Meta:
        model = CastingCode
        fields = [
            "code",
            "name",
            "description",
            "expires_at",
            "survey_fields",
            "studio",
            "project",
            "application_url",
        ]
        read_only_fields = fields

    def get_application_url(self, obj) -> str:
        return build_application_url(obj.code)


# ---------------------------------------------------------------------------
# Studio side
# ---------------------------------------------------------------------------

class SubmissionSurveySerializer(serializers.Serializer):
    responses = serializers.JSONField()
    created_at = serializers.DateTimeField()


class ExternalActorSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = ExternalActor
        fields = ["id", "status", "converted_profile"]
        read_only_fields = fields


class CastingSubmissionSerializer(serializers.ModelSerializer):
    external_actor = ExternalActorSummarySerializer(read_only=True)
    survey = serializers.SerializerMethodField()

    class Meta:
        model = CastingSubmission
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone_number",
            "message",
            "status",
            "casting_code",
            "external_actor",
            "converted_profile",
            "survey",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_survey(self, obj):
        # reverse one-to-one raises an AttributeError subclass when missing
        survey = getattr(obj, "survey", None)
        if survey is None:
            return None
        return SubmissionSurveySerializer(survey).data


class CastingCodeSerializer(serializers.ModelSerializer):
    project_title = serializers.CharField(source="project.title", read_only=True, default=None)
    submission_count = serializers.SerializerMethodField()
    application_url = serializers.SerializerMethodField()

    class Meta:
        model = CastingCode
        fields = [
            "id",
            "code",
            "name",
            "description",
            "studio",
            "project",
            "project_title",
            "is_active",
            "expires_at",
            "survey_fields",
            "submission_count",
            "application_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_submission_count(self, obj) -> int:
        annotated = getattr(obj, "submission_count", None)
        if annotated is not None:
            return annotated
        return obj.submissions.count()

    def get_application_url(self, obj) -> str:
        return build_application_url(obj.code)


class CastingCodeDetailSerializer(CastingCodeSerializer):
    submissions = CastingSubmissionSerializer(many=True, read_only=True)

    class Meta(CastingCodeSerializer.Meta):
        fields = [*CastingCodeSerializer.Meta.fields, "submissions"]
        read_only_fields = fields


class CastingCodeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    project_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    expires_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    survey_fields = serializers.JSONField(required=False, allow_null=True, default=None)

    def validate_survey_fields(self, value):
        return _validate_survey_fields(value)


class CastingCodeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    project_id = serializers.UUIDField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    survey_fields = serializers.JSONField(required=False, allow_null=True)

    def validate_survey_fields(self, value):
        return _validate_survey_fields(value)


class QRCodeQuerySerializer(serializers.Serializer):
    code = serializers.CharField(required=True, allow_blank=False, error_messages={"required": "Casting code is required"})
    size = serializers.IntegerField(required=False, min_value=1)

    def validate_size(self, value: int) -> int:
        if value > settings.CASTING_QR_MAX_SIZE:
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {settings.CASTING_QR_MAX_SIZE}.")
        return value


class QRCodeResponseSerializer(serializers.Serializer):
    qrCode = serializers.CharField()
    applicationUrl = serializers.CharField()


class SubmissionStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SubmissionStatus.choices)


class ExternalActorProjectSerializer(serializers.ModelSerializer):
    project_title = serializers.CharField(source="project.title", read_only=True)

    class Meta:
        model = ExternalActorProject
        fields = ["id", "project", "project_title", "role", "created_at"]
        read_only_fields = fields


class ExternalActorSerializer(serializers.ModelSerializer):
    projects = ExternalActorProjectSerializer(source="project_links", many=True, read_only=True)

    class Meta:
        model = ExternalActor
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone_number",
            "notes",
            "studio",
            "status",
            "converted_profile",
            "converted_at",
            "projects",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ExternalActorDetailSerializer(ExternalActorSerializer):
    submissions = serializers.SerializerMethodField()

    class Meta(ExternalActorSerializer.Meta):
        fields = [*ExternalActorSerializer.Meta.fields, "submissions"]
        read_only_fields = fields

    def get_submissions(self, obj):
        rows = obj.submissions.select_related("casting_code").order_by("-created_at")
        return [
            {
                "id": str(s.id),
                "casting_code": s.casting_code.code,
                "status": s.status,
                "created_at": s.created_at,
            }
            for s in rows
        ]


class ExternalActorCreateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone_number = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("email") and not (attrs.get("phone_number") or "").strip():
            raise serializers.ValidationError({"email": ["Either email or phone number must be provided"]})
        return attrs


class ExternalActorCsvImportSerializer(serializers.Serializer):
    csvData = serializers.CharField(source="csv_data", trim_whitespace=False)


class CsvRowErrorSerializer(serializers.Serializer):
    row = serializers.IntegerField()
    email = serializers.CharField()
    error = serializers.CharField()


class CsvImportReportSerializer(serializers.Serializer):
    success = serializers.IntegerField()
    errors = CsvRowErrorSerializer(many=True)
    duplicates = serializers.IntegerField()


class ExternalActorAssignProjectSerializer(serializers.Serializer):
    project_id = serializers.UUIDField()
    role = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
