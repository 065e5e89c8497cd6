"""Slot lock lifecycle: acquisition, expiry and reaping."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase

from apps.availability.pricing import PriceQuote
from apps.availability.tests.factories import make_host
from apps.bookings.exceptions import SlotUnavailableError
from apps.bookings.locks import ReservationRowLockBackend
from apps.bookings.models import Reservation
from apps.bookings.services import Customer, acquire_slot
from apps.bookings.tasks import cleanup_expired_locks
from shared.domain.value_objects import TimeRange

UTC = dt_timezone.utc
T = datetime(2024, 3, 11, 8, 0, tzinfo=UTC)
SLOT = TimeRange(datetime(2024, 3, 11, 9, 0, tzinfo=UTC), datetime(2024, 3, 11, 9, 30, tzinfo=UTC))
PAID = PriceQuote(amount=Decimal("500.00"), currency="INR", is_free=False)


class AcquireSlotTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()

    def _acquire(self, now: datetime, slot: TimeRange = SLOT) -> Reservation:
        return acquire_slot(self.host, slot, PAID, Customer(), gateway=Reservation.Gateway.RAZORPAY, now=now)

    def test_lock_blocks_until_it_expires(self) -> None:
        first = self._acquire(T)
        self.assertEqual(first.status, Reservation.Status.LOCKED)

        with self.assertRaises(SlotUnavailableError):
            self._acquire(T + timedelta(minutes=1))

        second = self._acquire(T + timedelta(minutes=6))

        self.assertEqual(second.status, Reservation.Status.LOCKED)
        self.assertFalse(Reservation.objects.filter(pk=first.pk).exists())
        self.assertEqual(Reservation.objects.filter(host=self.host).count(), 1)

    def test_confirmed_reservation_never_expires(self) -> None:
        reservation = self._acquire(T)
        reservation.mark_confirmed()

        with self.assertRaises(SlotUnavailableError):
            self._acquire(T + timedelta(days=1))

    def test_overlapping_range_with_other_start_is_blocked(self) -> None:
        self._acquire(T)
        shifted = TimeRange(SLOT.start + timedelta(minutes=15), SLOT.end + timedelta(minutes=15))

        with self.assertRaises(SlotUnavailableError):
            self._acquire(T + timedelta(minutes=1), slot=shifted)

    def test_adjacent_slot_is_free(self) -> None:
        self._acquire(T)
        following = TimeRange(SLOT.end, SLOT.end + timedelta(minutes=30))

        self.assertEqual(self._acquire(T, slot=following).start_time, SLOT.end)

    def test_other_hosts_are_independent(self) -> None:
        self._acquire(T)
        other = make_host()

        reservation = acquire_slot(other, SLOT, PAID, Customer(), gateway=Reservation.Gateway.RAZORPAY, now=T)

        self.assertEqual(reservation.host, other)

    def test_free_quote_is_confirmed_immediately(self) -> None:
        free = PriceQuote(amount=Decimal("0.00"), currency="INR", is_free=True)

        reservation = acquire_slot(self.host, SLOT, free, Customer(), gateway=Reservation.Gateway.RAZORPAY, now=T)

        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
        self.assertEqual(reservation.payment_gateway, Reservation.Gateway.FREE)

    def test_duplicate_insert_is_reported_as_unavailable(self) -> None:
        class AlwaysGrant(ReservationRowLockBackend):
            def try_acquire(self, host, start, end, *, now=None):
                return True

        self._acquire(T)

        with self.assertRaises(SlotUnavailableError):
            acquire_slot(
                self.host,
                SLOT,
                PAID,
                Customer(),
                gateway=Reservation.Gateway.RAZORPAY,
                lock_backend=AlwaysGrant(),
                now=T + timedelta(minutes=1),
            )
        self.assertEqual(Reservation.objects.filter(host=self.host).count(), 1)


class ReapTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()
        self.now = T + timedelta(hours=1)

    def _row(self, start_minute: int, status: str, age_minutes: int) -> Reservation:
        start = SLOT.start + timedelta(minutes=start_minute)
        return Reservation.objects.create(
            host=self.host,
            start_time=start,
            end_time=start + timedelta(minutes=10),
            status=status,
            created_at=self.now - timedelta(minutes=age_minutes),
        )

    def test_reap_removes_only_expired_locks(self) -> None:
        stale = self._row(0, Reservation.Status.LOCKED, age_minutes=6)
        fresh = self._row(10, Reservation.Status.LOCKED, age_minutes=2)
        confirmed = self._row(20, Reservation.Status.CONFIRMED, age_minutes=60)

        backend = ReservationRowLockBackend()
        self.assertEqual(backend.reap(now=self.now), 1)
        self.assertEqual(backend.reap(now=self.now), 0)

        remaining = set(Reservation.objects.values_list("pk", flat=True))
        self.assertEqual(remaining, {fresh.pk, confirmed.pk})
        self.assertNotIn(stale.pk, remaining)

    def test_try_acquire_is_idempotent_while_granted(self) -> None:
        backend = ReservationRowLockBackend()

        self.assertTrue(backend.try_acquire(self.host, SLOT.start, SLOT.end, now=self.now))
        self.assertTrue(backend.try_acquire(self.host, SLOT.start, SLOT.end, now=self.now))
        self.assertFalse(Reservation.objects.exists())

    def test_ttl_can_be_overridden(self) -> None:
        self._row(0, Reservation.Status.LOCKED, age_minutes=6)

        backend = ReservationRowLockBackend(ttl=timedelta(minutes=10))

        self.assertFalse(backend.try_acquire(self.host, SLOT.start, SLOT.end, now=self.now))
        self.assertEqual(backend.reap(now=self.now), 0)

    def test_zero_ttl_expires_locks_immediately(self) -> None:
        self._row(0, Reservation.Status.LOCKED, age_minutes=1)

        backend = ReservationRowLockBackend(ttl=timedelta(0))

        self.assertEqual(backend.ttl, timedelta(0))
        self.assertFalse(Reservation.objects.blocking(now=self.now, ttl=timedelta(0)).exists())
        self.assertTrue(backend.try_acquire(self.host, SLOT.start, SLOT.end, now=self.now))
        self.assertFalse(Reservation.objects.exists())

    def test_cleanup_task(self) -> None:
        old = datetime(2000, 1, 1, tzinfo=UTC)
        Reservation.objects.create(
            host=self.host,
            start_time=SLOT.start,
            end_time=SLOT.end,
            status=Reservation.Status.LOCKED,
            created_at=old,
        )

        self.assertEqual(cleanup_expired_locks(), {"released": 1})
        self.assertFalse(Reservation.objects.exists())
