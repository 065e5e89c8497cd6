"""API views for notifications."""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsHost

from .serializers import CustomEmailSerializer
from .services import send_custom_email


class CustomEmailView(APIView):
    """Lets a host e-mail one of their customers."""

    permission_classes = [IsHost]

    def post(self, request):  # type: ignore
        serializer = CustomEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        sent = send_custom_email(
            data["customer_email"],
            data["subject"],
            data["message"],
            request.user.name or request.user.email,
        )
        if not sent:
            return Response(
                {"detail": "Failed to send email."},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({"detail": "Email sent successfully."}, status=status.HTTP_200_OK)
