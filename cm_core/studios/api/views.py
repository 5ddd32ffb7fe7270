# cm_core/studios/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from cm_core.common.api.pagination import paginate
from cm_core.common.permissions import IsStudioUser
from cm_core.studios.api.serializers import (
    ProjectArchiveSerializer,
    ProjectCreateSerializer,
    ProjectMemberSerializer,
    ProjectSerializer,
)
from cm_core.studios.models import Project
from cm_core.studios.scope import require_studio
from cm_core.studios.selectors import get_project_or_none, projects_for_studio
from cm_core.studios.services import ProjectService


class ProjectViewSet(viewsets.ViewSet):
    permission_classes = [IsStudioUser]

    lookup_value_regex = r"[0-9a-fA-F-]{36}"
    serializer_class = ProjectSerializer
    queryset = Project.objects.none()

    def _get_project(self, request, pk) -> Project:
        studio = require_studio(request)
        project = get_project_or_none(studio_id=studio.id, project_id=UUID(str(pk)))
        if project is None:
            raise NotFound("Project not found")
        return project

    @extend_schema(
        tags=["Studio"],
        parameters=[
            OpenApiParameter(
                name="include_archived",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
        ],
    )
    def list(self, request):
        studio = require_studio(request)
        include_archived = request.query_params.get("include_archived", "").lower() in ("1", "true", "yes")
        qs = projects_for_studio(studio_id=studio.id, include_archived=include_archived)
        return paginate(request, qs, ProjectSerializer)

    @extend_schema(tags=["Studio"], request=ProjectCreateSerializer, responses={201: ProjectSerializer})
    def create(self, request):
        studio = require_studio(request)

        ser = ProjectCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        project = ProjectService.create(
            studio=studio,
            actor_user_id=request.user.id,
            **ser.validated_data,
        )
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Studio"], responses={200: ProjectSerializer})
    def retrieve(self, request, pk=None):
        return Response(ProjectSerializer(self._get_project(request, pk)).data)

    @extend_schema(tags=["Studio"], request=ProjectArchiveSerializer, responses={200: ProjectSerializer})
    @action(detail=True, methods=["post"], url_path="archive")
    def archive(self, request, pk=None):
        project = self._get_project(request, pk)

        ser = ProjectArchiveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        project = ProjectService.set_archived(
            studio=request.studio,
            project_id=project.id,
            archived=ser.validated_data["is_archived"],
        )
        return Response(ProjectSerializer(project).data)

    @extend_schema(tags=["Studio"], responses={200: ProjectMemberSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="members")
    def members(self, request, pk=None):
        project = self._get_project(request, pk)
        qs = project.members.select_related("profile__user").order_by("created_at")
        return Response(ProjectMemberSerializer(qs, many=True).data)
