"""API views for host analytics."""

from __future__ import annotations

from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.availability.serializers import AvailabilityRuleSerializer
from apps.bookings.serializers import ReservationSerializer
from apps.users.permissions import IsHost

from .insights import dashboard_summary, generate_insights


class HostDashboardView(APIView):
    """Funnel, earnings, the host's rules and the ten most recent reservations."""

    permission_classes = [IsHost]

    def get(self, request, format=None):  # type: ignore
        host = request.user
        summary = dashboard_summary(host)
        summary["availability"] = AvailabilityRuleSerializer(host.availability_rules.all(), many=True).data
        summary["recent_reservations"] = ReservationSerializer(
            host.hosted_reservations.order_by("-start_time")[:10], many=True
        ).data
        return Response(summary)


class HostInsightsView(APIView):
    permission_classes = [IsHost]

    def get(self, request, format=None):  # type: ignore
        return Response(generate_insights(request.user))
