"""Serializers for availability rules and generated slots."""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import TIME_OF_DAY_VALIDATOR, AvailabilityRule
from .services import ZERO, RuleDraft, create_rule


class AvailabilityRuleSerializer(serializers.ModelSerializer):
    day_label = serializers.CharField(source="get_day_of_week_display", read_only=True)
    is_recurring = serializers.BooleanField(read_only=True)

    class Meta:
        model = AvailabilityRule
        fields = [
            "id",
            "day_of_week",
            "day_label",
            "specific_date",
            "is_recurring",
            "start_time",
            "end_time",
            "slot_duration",
            "buffer_minutes",
            "is_free",
            "price",
            "price_usd",
            "created_at",
        ]
        read_only_fields = fields


class AvailabilityRuleWriteSerializer(serializers.Serializer):
    day_of_week = serializers.IntegerField(min_value=0, max_value=6, required=False, allow_null=True)
    specific_date = serializers.DateField(required=False, allow_null=True)
    start_time = serializers.CharField(max_length=5, validators=[TIME_OF_DAY_VALIDATOR])
    end_time = serializers.CharField(max_length=5, validators=[TIME_OF_DAY_VALIDATOR])
    slot_duration = serializers.IntegerField(min_value=1, default=60)
    buffer_minutes = serializers.IntegerField(min_value=0, default=0)
    is_free = serializers.BooleanField(default=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), default=ZERO)
    price_usd = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), default=ZERO)

    def validate(self, attrs):  # type: ignore
        draft = RuleDraft(**attrs)
        try:
            draft.normalized()
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"detail": exc.messages}) from exc
        attrs["draft"] = draft
        return attrs

    def create(self, validated_data):  # type: ignore
        try:
            return create_rule(self.context["request"].user, validated_data["draft"])
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"detail": exc.messages}) from exc

    def to_representation(self, instance):  # type: ignore
        return AvailabilityRuleSerializer(instance, context=self.context).data


class SlotSerializer(serializers.Serializer):
    start_time = serializers.DateTimeField(source="start")
    end_time = serializers.DateTimeField(source="end")
    is_free = serializers.BooleanField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    price_usd = serializers.DecimalField(max_digits=10, decimal_places=2)


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1970, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
