# cm_core/studios/api/serializers.py
from rest_framework import serializers

from cm_core.studios.models import Project, ProjectMember, Studio


class StudioSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Studio
        fields = ["id", "name", "description", "contact_name", "contact_email", "website"]
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer):
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            "id",
            "studio",
            "title",
            "description",
            "is_archived",
            "member_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_member_count(self, obj) -> int:
        return obj.members.count()


class ProjectCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ProjectArchiveSerializer(serializers.Serializer):
    is_archived = serializers.BooleanField()


class ProjectMemberSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="profile.user.email", read_only=True)

    class Meta:
        model = ProjectMember
        fields = ["id", "profile", "email", "role", "notes", "created_at"]
        read_only_fields = fields
