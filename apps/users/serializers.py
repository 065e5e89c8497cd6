"""Serializers for user-related API endpoints."""

from __future__ import annotations

from zoneinfo import available_timezones

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Account view of the current user."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "username",
            "role",
            "bio",
            "hourly_rate",
            "hourly_rate_usd",
            "currency",
            "time_zone",
            "profile_image",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "role",
            "created_at",
            "updated_at",
        ]

    def validate_time_zone(self, value: str) -> str:
        if value not in available_timezones():
            raise serializers.ValidationError("Unknown timezone.")
        return value


class HostProfileSerializer(serializers.ModelSerializer):
    """Public host profile shown to customers before they pick a slot."""

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "username",
            "bio",
            "hourly_rate",
            "hourly_rate_usd",
            "currency",
            "time_zone",
            "profile_image",
        ]
        read_only_fields = fields
