"""Serializers for notification endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class CustomEmailSerializer(serializers.Serializer):
    customer_email = serializers.EmailField()
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField(max_length=5000)
