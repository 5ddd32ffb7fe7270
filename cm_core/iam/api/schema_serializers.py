# cm_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class RegisterRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, max_length=128)
    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    phoneNumber = serializers.CharField(source="phone_number", max_length=32, required=False, allow_blank=True, default="")


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False)
    is_superuser = serializers.BooleanField()


class MeTenantSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    type = serializers.CharField()


class MeProfileSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    phone_number = serializers.CharField(allow_blank=True)
    tenant = MeTenantSerializer()


class MeStudioSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    profile = MeProfileSerializer(allow_null=True)
    studio = MeStudioSerializer(allow_null=True)


class ConversionEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    studio = serializers.CharField()
    projects = serializers.IntegerField()


class ConversionResponseSerializer(serializers.Serializer):
    converted = serializers.BooleanField()
    message = serializers.CharField()
    conversions = ConversionEntrySerializer(many=True, required=False)
