"""Slot locks held while a customer completes payment.

A lock is a ``locked`` reservation row. It expires ``lock_ttl`` after
creation: expired locks no longer block the slot, are deleted by the next
acquisition attempt on the same start instant and are swept periodically.
"""

from __future__ import annotations

import abc
import logging
from datetime import datetime, timedelta

from django.utils import timezone  # type: ignore

from apps.availability.intervals import overlap_q

from .models import Reservation, lock_ttl

logger = logging.getLogger(__name__)


class SlotLockBackend(abc.ABC):
    @abc.abstractmethod
    def try_acquire(self, host, start: datetime, end: datetime, *, now: datetime | None = None) -> bool:
        """Return True when [start, end) may be locked for ``host``."""

    @abc.abstractmethod
    def reap(self, *, now: datetime | None = None) -> int:
        """Drop every expired lock, return how many were removed."""


class ReservationRowLockBackend(SlotLockBackend):
    """Lock backend on top of the reservation table.

    ``try_acquire`` only decides; the caller inserts the ``locked`` row in
    the same transaction, after taking the host row lock.
    """

    def __init__(self, ttl: timedelta | None = None) -> None:
        self.ttl = ttl if ttl is not None else lock_ttl()

    def try_acquire(self, host, start: datetime, end: datetime, *, now: datetime | None = None) -> bool:
        now = now or timezone.now()

        reaped, _ = Reservation.objects.filter(host=host, start_time=start).stale_locks(
            now=now, ttl=self.ttl
        ).delete()
        if reaped:
            logger.info("Released expired lock for host %s at %s", host.pk, start.isoformat())

        busy = (
            Reservation.objects.filter(host=host)
            .blocking(now=now, ttl=self.ttl)
            .filter(overlap_q(start, end))
            .exists()
        )
        return not busy

    def reap(self, *, now: datetime | None = None) -> int:
        deleted, _ = Reservation.objects.stale_locks(now=now, ttl=self.ttl).delete()
        return deleted
