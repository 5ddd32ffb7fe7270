# cm_core/casting/api/views.py
from __future__ import annotations

from uuid import UUID

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cm_core.casting.api.serializers import (
    ApplyCastingCodeSerializer,
    CastingCodeCreateSerializer,
    CastingCodeDetailSerializer,
    CastingCodeSerializer,
    CastingCodeUpdateSerializer,
    CastingSubmissionCreateSerializer,
    CastingSubmissionResponseSerializer,
    CastingSubmissionSerializer,
    CsvImportReportSerializer,
    ExternalActorAssignProjectSerializer,
    ExternalActorCreateSerializer,
    ExternalActorCsvImportSerializer,
    ExternalActorDetailSerializer,
    ExternalActorProjectSerializer,
    ExternalActorSerializer,
    QRCodeQuerySerializer,
    QRCodeResponseSerializer,
    SubmissionStatusUpdateSerializer,
)
from cm_core.casting.models import CastingCode, ExternalActor, ExternalActorStatus
from cm_core.casting.qr import build_application_url, render_qr_data_url
from cm_core.casting.selectors import (
    CastingCodeCriteria,
    ExternalActorCriteria,
    casting_codes_for_studio,
    external_actors_for_studio,
    get_open_casting_code,
    get_studio_casting_code,
    get_studio_casting_code_by_code,
    get_studio_external_actor,
)
from cm_core.casting.services import (
    AccountConversionService,
    CastingCodeService,
    CastingCodeUpdate,
    ExternalActorService,
    SubmissionIntakeService,
    SubmissionReviewService,
)
from cm_core.common.api.pagination import paginate
from cm_core.common.permissions import IsStudioUser
from cm_core.iam.api.schema_serializers import ConversionResponseSerializer
from cm_core.studios.scope import require_studio

SUBMISSION_RECEIVED_MSG = "Your submission has been received successfully!"
UUID_PATTERN = r"[0-9a-fA-F-]{36}"


def _uuid_param(raw: str | None, name: str) -> UUID | None:
    if raw in (None, ""):
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        raise ValidationError({name: ["Must be a valid UUID."]})


def _bool_param(raw: str | None, name: str) -> bool | None:
    if raw in (None, ""):
        return None
    value = raw.strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ValidationError({name: ["Must be true or false."]})


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

class CastingSubmissionView(APIView):
    """
    Apply through a casting code. No account needed.
    """
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Casting"],
        request=CastingSubmissionCreateSerializer,
        responses={200: CastingSubmissionResponseSerializer},
    )
    def post(self, request):
        ser = CastingSubmissionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        outcome = SubmissionIntakeService.submit(ser.to_input())

        return Response(
            {
                "success": True,
                "message": SUBMISSION_RECEIVED_MSG,
                "submissionId": str(outcome.submission.id),
                "createAccount": outcome.create_account,
                "userData": outcome.user_data,
            },
            status=status.HTTP_200_OK,
        )


class ApplyView(APIView):
    """
    Public read behind {APP_BASE_URL}/apply/{code}.
    """
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(tags=["Casting"], responses={200: ApplyCastingCodeSerializer})
    def get(self, request, code: str):
        casting_code = get_open_casting_code(code=code)
        if casting_code is None:
            raise NotFound("Casting code not found or no longer accepting applications")
        return Response(ApplyCastingCodeSerializer(casting_code).data)


# ---------------------------------------------------------------------------
# Authenticated
# ---------------------------------------------------------------------------

class ConvertExternalActorView(APIView):
    """
    Called after sign-up: fold the user's external-actor history into their account.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], responses={200: ConversionResponseSerializer})
    def get(self, request):
        report = AccountConversionService.convert_for_user(user=request.user)
        return Response(report.as_dict(), status=status.HTTP_200_OK)


# ---------------------------------------------------------------------------
# Studio
# ---------------------------------------------------------------------------

class CastingCodeViewSet(viewsets.ViewSet):
    permission_classes = [IsStudioUser]
    lookup_value_regex = UUID_PATTERN

    serializer_class = CastingCodeSerializer
    queryset = CastingCode.objects.none()

    @extend_schema(
        tags=["Studio casting codes"],
        parameters=[
            OpenApiParameter(name="project_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="is_active", type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        studio = require_studio(request)
        params = request.query_params
        criteria = CastingCodeCriteria(
            project_id=_uuid_param(params.get("project_id"), "project_id"),
            is_active=_bool_param(params.get("is_active"), "is_active"),
        )
        qs = casting_codes_for_studio(studio_id=studio.id, criteria=criteria)
        return paginate(request, qs, CastingCodeSerializer)

    @extend_schema(
        tags=["Studio casting codes"],
        request=CastingCodeCreateSerializer,
        responses={201: CastingCodeSerializer},
    )
    def create(self, request):
        studio = require_studio(request)

        ser = CastingCodeCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        casting_code = CastingCodeService.create(
            studio=studio,
            actor_user_id=request.user.id,
            **ser.validated_data,
        )
        return Response(CastingCodeSerializer(casting_code).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Studio casting codes"], responses={200: CastingCodeDetailSerializer})
    def retrieve(self, request, pk=None):
        studio = require_studio(request)
        casting_code = get_studio_casting_code(studio_id=studio.id, casting_code_id=UUID(str(pk)))
        if casting_code is None:
            raise NotFound("Casting code not found")
        return Response(CastingCodeDetailSerializer(casting_code).data)

    @extend_schema(
        tags=["Studio casting codes"],
        request=CastingCodeUpdateSerializer,
        responses={200: CastingCodeSerializer},
    )
    def partial_update(self, request, pk=None):
        studio = require_studio(request)

        ser = CastingCodeUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        casting_code = CastingCodeService.update(
            studio=studio,
            casting_code_id=UUID(str(pk)),
            actor_user_id=request.user.id,
            changes=CastingCodeUpdate.from_validated(ser.validated_data),
        )
        return Response(CastingCodeSerializer(casting_code).data)

    @extend_schema(tags=["Studio casting codes"], responses={204: None})
    def destroy(self, request, pk=None):
        studio = require_studio(request)
        CastingCodeService.delete(studio=studio, casting_code_id=UUID(str(pk)), actor_user_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Studio casting codes"],
        parameters=[
            OpenApiParameter(name="code", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=True),
            OpenApiParameter(name="size", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: QRCodeResponseSerializer},
    )
    @action(detail=False, methods=["get"], url_path="qrcode")
    def qrcode(self, request):
        studio = require_studio(request)

        ser = QRCodeQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        size = ser.validated_data.get("size") or settings.CASTING_QR_DEFAULT_SIZE

        casting_code = get_studio_casting_code_by_code(studio_id=studio.id, code=ser.validated_data["code"])
        if casting_code is None:
            raise NotFound("Casting code not found or not owned by this studio")

        application_url = build_application_url(casting_code.code)
        return Response(
            {
                "qrCode": render_qr_data_url(application_url, size=size),
                "applicationUrl": application_url,
            }
        )


class SubmissionReviewView(APIView):
    permission_classes = [IsStudioUser]

    @extend_schema(
        tags=["Studio casting codes"],
        request=SubmissionStatusUpdateSerializer,
        responses={200: CastingSubmissionSerializer},
    )
    def patch(self, request, submission_id: UUID):
        studio = require_studio(request)

        ser = SubmissionStatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        submission = SubmissionReviewService.set_status(
            studio=studio,
            submission_id=submission_id,
            status=ser.validated_data["status"],
            actor_user_id=request.user.id,
        )
        return Response(CastingSubmissionSerializer(submission).data)


class ExternalActorViewSet(viewsets.ViewSet):
    permission_classes = [IsStudioUser]
    lookup_value_regex = UUID_PATTERN

    serializer_class = ExternalActorSerializer
    queryset = ExternalActor.objects.none()

    @extend_schema(
        tags=["Studio external actors"],
        parameters=[
            OpenApiParameter(
                name="status",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=[c for c, _ in ExternalActorStatus.choices],
            ),
            OpenApiParameter(name="project_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="email", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="phone", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="q",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search name, email or phone.",
            ),
        ],
    )
    def list(self, request):
        studio = require_studio(request)
        params = request.query_params

        status_value = (params.get("status") or "").strip().upper() or None
        if status_value is not None and status_value not in ExternalActorStatus.values:
            raise ValidationError({"status": [f"Must be one of {', '.join(ExternalActorStatus.values)}."]})

        criteria = ExternalActorCriteria(
            status=status_value,
            project_id=_uuid_param(params.get("project_id"), "project_id"),
            email=(params.get("email") or "").strip() or None,
            phone=(params.get("phone") or "").strip() or None,
            search=(params.get("q") or "").strip() or None,
        )
        qs = external_actors_for_studio(studio_id=studio.id, criteria=criteria)
        return paginate(request, qs, ExternalActorSerializer)

    @extend_schema(
        tags=["Studio external actors"],
        request=ExternalActorCreateSerializer,
        responses={201: ExternalActorSerializer, 200: CsvImportReportSerializer},
        description="Add one external actor, or bulk-import a CSV sent as {\"csvData\": \"...\"}.",
    )
    def create(self, request):
        studio = require_studio(request)

        if request.data.get("csvData"):
            upload = ExternalActorCsvImportSerializer(data=request.data)
            upload.is_valid(raise_exception=True)
            report = ExternalActorService.import_csv(
                studio=studio,
                actor_user_id=request.user.id,
                csv_data=upload.validated_data["csv_data"],
            )
            return Response(CsvImportReportSerializer(report.as_dict()).data, status=status.HTTP_200_OK)

        ser = ExternalActorCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        actor = ExternalActorService.create_manual(
            studio=studio,
            actor_user_id=request.user.id,
            **ser.validated_data,
        )
        return Response(ExternalActorSerializer(actor).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Studio external actors"], responses={200: ExternalActorDetailSerializer})
    def retrieve(self, request, pk=None):
        studio = require_studio(request)
        actor = get_studio_external_actor(studio_id=studio.id, actor_id=UUID(str(pk)))
        if actor is None:
            raise NotFound("External actor not found")
        return Response(ExternalActorDetailSerializer(actor).data)

    @extend_schema(tags=["Studio external actors"], responses={204: None})
    def destroy(self, request, pk=None):
        studio = require_studio(request)
        ExternalActorService.delete(studio=studio, actor_id=UUID(str(pk)), actor_user_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Studio external actors"],
        request=ExternalActorAssignProjectSerializer,
        responses={200: ExternalActorProjectSerializer, 201: ExternalActorProjectSerializer},
    )
    @action(detail=True, methods=["post"], url_path="projects")
    def assign_project(self, request, pk=None):
        studio = require_studio(request)

        ser = ExternalActorAssignProjectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        link, created = ExternalActorService.assign_to_project(
            studio=studio,
            actor_id=UUID(str(pk)),
            project_id=ser.validated_data["project_id"],
            role=ser.validated_data["role"],
        )
        return Response(
            ExternalActorProjectSerializer(link).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
