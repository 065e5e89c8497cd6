"""DRF exception handler for domain errors."""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from apps.bookings.exceptions import ReservationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):  # type: ignore
    """Render reservation errors and model validation errors as ``{"detail", "code"}``."""
    if isinstance(exc, ReservationError):
        if exc.status_code >= 500:
            logger.error("Reservation request failed: %s", exc.detail)
        return Response({"detail": exc.detail, "code": exc.default_code}, status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        return Response(
            {"detail": " ".join(exc.messages), "code": "invalid"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    return exception_handler(exc, context)
