"""Reservation ledger models."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


GUEST_NAME = "Guest"
GUEST_EMAIL = "guest@example.com"


def lock_ttl() -> timedelta:
    return timedelta(minutes=getattr(settings, "BOOKING_LOCK_TTL_MINUTES", 5))


class ReservationQuerySet(models.QuerySet):
    def stale_locks(self, *, now: datetime | None = None, ttl: timedelta | None = None):
        threshold = (now or timezone.now()) - (ttl if ttl is not None else lock_ttl())
        return self.filter(status=Reservation.Status.LOCKED, created_at__lt=threshold)

    def blocking(self, *, now: datetime | None = None, ttl: timedelta | None = None):
        """Reservations that make their time range unavailable.

        Confirmed rows always block; locked rows block until they are
        older than the lock TTL.
        """
        threshold = (now or timezone.now()) - (ttl if ttl is not None else lock_ttl())
        return self.filter(
            models.Q(status=Reservation.Status.CONFIRMED)
            | models.Q(status=Reservation.Status.LOCKED, created_at__gt=threshold)
        )


class Reservation(models.Model):
    """A customer's claim on one slot of a host."""

    class Status(models.TextChoices):
        LOCKED = "locked", _("Locked for payment")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class Gateway(models.TextChoices):
        RAZORPAY = "razorpay", _("Razorpay")
        PAYU = "payu", _("PayU")
        FREE = "free", _("Free")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_reservations",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    customer_name = models.CharField(max_length=150, default=GUEST_NAME)
    customer_email = models.EmailField(default=GUEST_EMAIL)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.LOCKED,
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")
    payment_gateway = models.CharField(
        max_length=16,
        choices=Gateway.choices,
        default=Gateway.RAZORPAY,
    )
    razorpay_order_id = models.CharField(max_length=64, blank=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=64, blank=True)
    payu_txn_id = models.CharField(max_length=64, blank=True, db_index=True)
    meeting_link = models.URLField(blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-start_time"]
        constraints = [
            models.UniqueConstraint(fields=["host", "start_time"], name="reservation_unique_host_start"),
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="reservation_valid_range",
            ),
        ]
        indexes = [
            models.Index(fields=["host", "status", "start_time"], name="reservation_host_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} {self.host_id} @ {self.start_time.isoformat()} ({self.status})"

    def is_lock_expired(self, *, now: datetime | None = None) -> bool:
        if self.status != self.Status.LOCKED:
            return False
        return self.created_at < (now or timezone.now()) - lock_ttl()

    def mark_confirmed(self, **fields) -> None:
        for name, value in fields.items():
            setattr(self, name, value)
        self.status = self.Status.CONFIRMED
        self.save(update_fields=["status", "updated_at", *fields.keys()])
