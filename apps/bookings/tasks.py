"""Celery tasks for the reservation ledger."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .locks import ReservationRowLockBackend
from .models import Reservation

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat)
# ============================================================================

@shared_task(name="bookings.cleanup_expired_locks")
def cleanup_expired_locks() -> dict[str, int]:
    """
    Delete payment holds older than the lock TTL.

    Runs every BOOKING_LOCK_SWEEP_SECONDS. Lock acquisition also reaps a
    stale hold on the exact slot it targets, so the sweep only keeps the
    table small.

    Returns:
        dict: {"released": number of deleted holds}
    """
    released = ReservationRowLockBackend().reap()
    if released:
        logger.info("Released %s expired reservation locks", released)
    return {"released": released}


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@shared_task(name="bookings.notify_reservation_confirmed")
def notify_reservation_confirmed(reservation_id: int) -> bool:
    """Confirmation e-mails to the customer and the host."""
    try:
        reservation = Reservation.objects.select_related("host").get(pk=reservation_id)
    except Reservation.DoesNotExist:
        logger.error("Reservation %s not found for confirmation notice", reservation_id)
        return False

    from apps.notifications.services import notify_reservation_confirmed as send_notice

    return send_notice(reservation)
