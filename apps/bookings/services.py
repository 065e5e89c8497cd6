"""Reservation workflows: hold a slot, hand off to a payment provider, confirm.

A reservation starts as a ``locked`` row written under a per-host row lock,
so overlapping requests for one host are serialised; the unique
``(host, start_time)`` constraint still rejects a duplicate insert. Paid
reservations become ``confirmed`` only after the provider's signature or
hash has been verified; free ones are confirmed immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.availability.intervals import overlap_q
from apps.availability.pricing import PriceQuote, normalize_currency, resolve_quote
from apps.payments.gateways import PaymentGateways, build_payment_gateways
from shared.domain.value_objects import TimeRange

from .exceptions import (
    ReservationNotFoundError,
    ReservationNotPayableError,
    SignatureMismatchError,
    SlotUnavailableError,
)
from .locks import ReservationRowLockBackend, SlotLockBackend
from .models import GUEST_EMAIL, GUEST_NAME, Reservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Customer:
    name: str = GUEST_NAME
    email: str = GUEST_EMAIL
    user: Any = None

    @classmethod
    def from_user(cls, user) -> "Customer":
        if user is None or not getattr(user, "is_authenticated", False):
            return cls()
        return cls(name=user.name or GUEST_NAME, email=user.email, user=user)

    @property
    def first_name(self) -> str:
        return (self.name or GUEST_NAME).split(" ")[0]


@dataclass
class ReservationOutcome:
    reservation: Reservation
    quote: PriceQuote
    order: dict[str, Any] = field(default_factory=dict)
    payu: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "granted": True,
            "reservation_id": self.reservation.pk,
            "status": self.reservation.status,
            "is_free": self.quote.is_free,
            "amount": str(self.quote.amount),
            "currency": self.quote.currency,
        }
        if self.order:
            data["order"] = self.order
        if self.payu:
            data["payu"] = self.payu
        return data


def requested_range(start: datetime, end: datetime) -> TimeRange:
    try:
        return TimeRange(start, end)
    except ValueError as exc:
        raise ValidationError("Reservation start must be before its end.") from exc


def checkout_quote(host, start: datetime, end: datetime, currency: Optional[str] = None) -> PriceQuote:
    """Price shown on the checkout page, resolved from the governing rule."""
    requested_range(start, end)
    return resolve_quote(host, start, currency)


def acquire_slot(
    host,
    slot: TimeRange,
    quote: PriceQuote,
    customer: Customer,
    *,
    gateway: str,
    lock_backend: Optional[SlotLockBackend] = None,
    now: Optional[datetime] = None,
) -> Reservation:
    """Lock ``slot`` for ``host`` and write the reservation row.

    Free quotes are written as ``confirmed``; anything else as ``locked``.
    Raises SlotUnavailableError when the slot is held or confirmed.
    """
    now = now or timezone.now()
    lock_backend = lock_backend or ReservationRowLockBackend()

    with transaction.atomic():
        get_user_model().objects.lock_for_update(host.pk)

        if not lock_backend.try_acquire(host, slot.start, slot.end, now=now):
            logger.info("Slot %s for host %s is not available", slot, host.pk)
            raise SlotUnavailableError()

        try:
            with transaction.atomic():
                reservation = Reservation.objects.create(
                    host=host,
                    customer=customer.user,
                    customer_name=customer.name,
                    customer_email=customer.email,
                    start_time=slot.start,
                    end_time=slot.end,
                    status=Reservation.Status.CONFIRMED if quote.is_free else Reservation.Status.LOCKED,
                    amount=quote.amount,
                    currency=quote.currency,
                    payment_gateway=Reservation.Gateway.FREE if quote.is_free else gateway,
                    created_at=now,
                )
        except IntegrityError as exc:
            logger.warning("Lost insert race for host %s at %s", host.pk, slot.start.isoformat())
            raise SlotUnavailableError() from exc

    logger.info("Reservation %s %s for host %s (%s)", reservation.pk, reservation.status, host.pk, slot)
    return reservation


def create_reservation(
    host,
    start: datetime,
    end: datetime,
    *,
    currency: Optional[str] = None,
    customer: Optional[Customer] = None,
    gateway: str = Reservation.Gateway.RAZORPAY,
    gateways: Optional[PaymentGateways] = None,
    lock_backend: Optional[SlotLockBackend] = None,
    now: Optional[datetime] = None,
) -> ReservationOutcome:
    """Reserve a slot and start the payment flow with ``gateway``.

    The price always comes from the rule governing ``start``. A provider
    failure leaves the ``locked`` row in place; it expires with the lock TTL.
    """
    now = now or timezone.now()
    slot = requested_range(start, end)
    quote = resolve_quote(host, slot.start, normalize_currency(currency))
    customer = customer or Customer()

    reservation = acquire_slot(
        host, slot, quote, customer, gateway=gateway, lock_backend=lock_backend, now=now
    )
    outcome = ReservationOutcome(reservation=reservation, quote=quote)

    if quote.is_free:
        schedule_confirmation_notice(reservation)
        return outcome

    gateways = gateways or build_payment_gateways()
    if gateway == Reservation.Gateway.PAYU:
        outcome.payu = start_payu_checkout(reservation, quote, customer, gateways, now=now)
    else:
        outcome.order = start_razorpay_checkout(reservation, quote, gateways, now=now)
    return outcome


def start_razorpay_checkout(
    reservation: Reservation,
    quote: PriceQuote,
    gateways: PaymentGateways,
    *,
    now: datetime,
) -> dict[str, Any]:
    client = gateways.razorpay_for(quote.currency)
    order = client.create_order(
        quote.minor_units,
        quote.currency,
        receipt=f"receipt_{reservation.pk}_{int(now.timestamp())}",
    )
    reservation.razorpay_order_id = order["id"]
    reservation.save(update_fields=["razorpay_order_id", "updated_at"])
    return {
        "id": order["id"],
        "amount": order.get("amount", quote.minor_units),
        "currency": order.get("currency", quote.currency),
        "key_id": client.key_id,
    }


def start_payu_checkout(
    reservation: Reservation,
    quote: PriceQuote,
    customer: Customer,
    gateways: PaymentGateways,
    *,
    now: datetime,
) -> dict[str, Any]:
    client = gateways.payu_gateway()
    txnid = f"txn_{reservation.pk}_{int(now.timestamp())}"
    reservation.payu_txn_id = txnid
    reservation.save(update_fields=["payu_txn_id", "updated_at"])

    response_url = f"{getattr(settings, 'SITE_URL', '').rstrip('/')}/api/v1/bookings/payu-response/"
    fields = client.form_fields(
        {
            "txnid": txnid,
            "amount": f"{quote.amount:.2f}",
            "productinfo": "Session Booking",
            "firstname": customer.first_name,
            "email": customer.email,
            "phone": "9999999999",
        },
        success_url=response_url,
        failure_url=response_url,
    )
    return {"action": client.action_url, "params": fields}


def _confirm(reservation_id: int, **fields: Any) -> Reservation:
    with transaction.atomic():
        reservation = Reservation.objects.select_for_update().get(pk=reservation_id)
        if reservation.status == Reservation.Status.CONFIRMED:
            return reservation
        if reservation.status != Reservation.Status.LOCKED:
            logger.warning("Payment for reservation %s arrived in status %s", reservation.pk, reservation.status)
            raise ReservationNotPayableError()

        if reservation.is_lock_expired():
            # The hold lapsed during payment; confirm only if nobody took the slot since.
            taken = (
                Reservation.objects.filter(host_id=reservation.host_id)
                .exclude(pk=reservation.pk)
                .blocking()
                .filter(overlap_q(reservation.start_time, reservation.end_time))
                .exists()
            )
            if taken:
                logger.error("Paid reservation %s lost its slot after the lock expired", reservation.pk)
                raise SlotUnavailableError("The slot was taken after your hold expired. Contact support for a refund.")

        reservation.mark_confirmed(**fields)

    logger.info("Reservation %s confirmed", reservation.pk)
    schedule_confirmation_notice(reservation)
    return reservation


def confirm_razorpay(
    order_id: str,
    payment_id: str,
    signature: str,
    *,
    reservation_id: Optional[int] = None,
    gateways: Optional[PaymentGateways] = None,
) -> Reservation:
    queryset = Reservation.objects.filter(razorpay_order_id=order_id) if order_id else Reservation.objects.none()
    if reservation_id is not None:
        queryset = queryset.filter(pk=reservation_id)
    reservation = queryset.first()
    if reservation is None:
        raise ReservationNotFoundError()

    gateways = gateways or build_payment_gateways()
    if not gateways.razorpay_for(reservation.currency).verify(order_id, payment_id, signature):
        logger.warning("Razorpay signature mismatch for reservation %s", reservation.pk)
        raise SignatureMismatchError()

    return _confirm(reservation.pk, razorpay_payment_id=payment_id)


def confirm_payu(params: Mapping[str, Any], *, gateways: Optional[PaymentGateways] = None) -> Reservation:
    """Handle PayU's post-back. Only a verified ``success`` status confirms."""
    gateways = gateways or build_payment_gateways()
    if not gateways.payu_gateway().verify_response(params):
        logger.warning("PayU hash mismatch for txn %s", params.get("txnid"))
        raise SignatureMismatchError()

    reservation = Reservation.objects.filter(payu_txn_id=params.get("txnid") or "").first()
    if reservation is None:
        raise ReservationNotFoundError()

    if params.get("status") != "success":
        logger.info("PayU reported %s for reservation %s", params.get("status"), reservation.pk)
        return reservation

    return _confirm(reservation.pk)


def schedule_confirmation_notice(reservation: Reservation) -> None:
    """Queue the confirmation e-mails once the surrounding transaction commits."""
    from .tasks import notify_reservation_confirmed

    reservation_id = reservation.pk

    def enqueue() -> None:
        try:
            notify_reservation_confirmed.delay(reservation_id)
        except Exception as exc:
            logger.error("Could not queue confirmation notice for reservation %s: %s", reservation_id, exc, exc_info=True)

    transaction.on_commit(enqueue)
