"""Serializers for the reservation API."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.availability.pricing import SUPPORTED_CURRENCIES

from .models import Reservation

User = get_user_model()


class ReservationSerializer(serializers.ModelSerializer):
    host_name = serializers.CharField(source="host.name", read_only=True)
    host_username = serializers.CharField(source="host.username", read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "host",
            "host_name",
            "host_username",
            "customer",
            "customer_name",
            "customer_email",
            "start_time",
            "end_time",
            "status",
            "amount",
            "currency",
            "payment_gateway",
            "meeting_link",
            "created_at",
        ]
        read_only_fields = fields


class SlotRequestSerializer(serializers.Serializer):
    """A host and a [start_time, end_time) window picked from the slot listing."""

    host_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.RoleChoices.HOST, is_active=True),
        source="host",
    )
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    currency = serializers.ChoiceField(choices=SUPPORTED_CURRENCIES, default="INR")

    def validate(self, attrs):  # type: ignore
        if attrs["start_time"] >= attrs["end_time"]:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class ReservationRequestSerializer(SlotRequestSerializer):
    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    customer_email = serializers.EmailField(required=False, allow_blank=True)


class RazorpayVerificationSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField(max_length=64)
    razorpay_payment_id = serializers.CharField(max_length=64)
    razorpay_signature = serializers.CharField(max_length=256)
    reservation_id = serializers.IntegerField(required=False)
