"""Funnel event model."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.serializers.json import DjangoJSONEncoder  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class AnalyticsEvent(models.Model):
    """One step of a visitor's way from a host profile to a paid booking."""

    class EventKind(models.TextChoices):
        PROFILE_VIEW = "profile_view", _("Profile view")
        CHECKOUT_VIEW = "checkout_view", _("Checkout view")
        PAYMENT_START = "payment_start", _("Payment start")
        PAYMENT_SUCCESS = "payment_success", _("Payment success")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="analytics_events",
    )
    event = models.CharField(max_length=32, choices=EventKind.choices)
    session_id = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Analytics event")
        verbose_name_plural = _("Analytics events")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["host", "event", "-created_at"], name="analytics_host_event_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event} for {self.host_id} at {self.created_at:%Y-%m-%d %H:%M}"
