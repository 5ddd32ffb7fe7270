# cm_core/flags/api/serializers.py
from rest_framework import serializers


class FeatureFlagSerializer(serializers.Serializer):
    key = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    enabled = serializers.BooleanField()
    source = serializers.ChoiceField(choices=["stored", "default"])


class FeatureFlagCreateSerializer(serializers.Serializer):
    key = serializers.SlugField(max_length=100)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    enabled = serializers.BooleanField(required=False, default=False)


class FeatureFlagUpdateSerializer(serializers.Serializer):
    enabled = serializers.BooleanField(required=False)
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError({"detail": "Nothing to update."})
        return attrs
