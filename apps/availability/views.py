"""Availability API views.

Hosts manage their rules under ``availability/rules/``; the public
``hosts/<username>/...`` endpoints expose bookable slots, the month
overview and the schedule used to highlight the booking calendar.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsHost

from .models import AvailabilityRule
from .resolver import available_slots, host_schedule, month_summary
from .serializers import (
    AvailabilityRuleSerializer,
    AvailabilityRuleWriteSerializer,
    DayQuerySerializer,
    MonthQuerySerializer,
    SlotSerializer,
)
from .services import delete_rule

User = get_user_model()


def get_public_host(username: str):
    return get_object_or_404(User, username=username, role=User.RoleChoices.HOST, is_active=True)


class AvailabilityRuleViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Rules of the current host. Rules are immutable: delete and re-create to change one."""

    permission_classes = [IsHost]
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return AvailabilityRule.objects.filter(host=self.request.user)

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return AvailabilityRuleWriteSerializer
        return AvailabilityRuleSerializer

    def perform_destroy(self, instance):  # type: ignore
        delete_rule(self.request.user, instance.pk)


class HostAvailabilityView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, username):  # type: ignore
        host = get_public_host(username)
        query = DayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        on_date = query.validated_data["date"]

        rules = list(AvailabilityRule.objects.filter(host=host))
        slots = available_slots(host, on_date, rules=rules)
        data = {
            "date": on_date.isoformat(),
            "host_id": host.pk,
            "time_zone": host.time_zone,
            "hourly_rate": host.hourly_rate,
            "hourly_rate_usd": host.hourly_rate_usd,
            "currency": host.currency,
            "slots": SlotSerializer(slots, many=True).data,
        }
        if not rules:
            data["message"] = "Host has not set any availability yet."
        return Response(data)


class HostMonthAvailabilityView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, username):  # type: ignore
        host = get_public_host(username)
        query = MonthQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(month_summary(host, query.validated_data["year"], query.validated_data["month"]))


class HostScheduleView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, username):  # type: ignore
        return Response(host_schedule(get_public_host(username)))
