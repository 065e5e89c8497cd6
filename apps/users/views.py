"""User API views."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import generics, permissions  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.analytics.services import record_event, session_id_for

from .serializers import HostProfileSerializer, UserSerializer

User = get_user_model()


class MeView(generics.RetrieveUpdateAPIView):
    """Profile of the current user; hosts edit their display prices and timezone here."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):  # type: ignore
        return self.request.user


class HostProfileView(generics.RetrieveAPIView):
    """Public host profile. Every successful view feeds the host's booking funnel."""

    serializer_class = HostProfileSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "username"
    lookup_url_kwarg = "username"
    queryset = User.objects.filter(role=User.RoleChoices.HOST, is_active=True)

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        host = self.get_object()
        record_event(
            host=host,
            event="profile_view",
            session_id=session_id_for(request),
            metadata={
                "referrer": request.META.get("HTTP_REFERER") or "Direct",
                "path": request.get_full_path(),
            },
        )
        return Response(self.get_serializer(host).data)
