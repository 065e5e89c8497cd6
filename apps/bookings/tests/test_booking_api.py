"""End-to-end API flow: checkout, order creation and payment verification."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

import requests
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.models import AnalyticsEvent
from apps.availability.tests.factories import make_host, make_rule
from apps.bookings.models import Reservation
from apps.payments.gateways import build_payment_gateways
from apps.users.models import User

from .test_services import POST, order_response

UTC = dt_timezone.utc


class BookingFlowTests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        day = timezone.now().date() + timedelta(days=7)
        make_rule(self.host, day_of_week=day.weekday(), start_time="09:00", end_time="11:00", slot_duration=60)
        self.start = datetime(day.year, day.month, day.day, 9, 0, tzinfo=UTC)
        self.end = self.start + timedelta(hours=1)
        self.slot = {
            "host_id": self.host.pk,
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
        }

    def _events(self, name: str) -> int:
        return AnalyticsEvent.objects.filter(host=self.host, event=name).count()

    def test_checkout_shows_both_prices(self) -> None:
        response = self.client.get(reverse("reservation-checkout"), self.slot, HTTP_X_SESSION_ID="visitor-1")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["amount"], Decimal("500.00"))
        self.assertEqual(response.data["amount_usd"], Decimal("10.00"))
        self.assertEqual(response.data["duration_minutes"], 60)
        self.assertFalse(response.data["is_free"])
        event = AnalyticsEvent.objects.get(host=self.host, event="checkout_view")
        self.assertEqual(event.session_id, "visitor-1")

    def test_checkout_for_uncovered_slot(self) -> None:
        start = self.start + timedelta(hours=4)
        params = {**self.slot, "start_time": start.isoformat(), "end_time": (start + timedelta(hours=1)).isoformat()}

        response = self.client.get(reverse("reservation-checkout"), params)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "price_unresolved")

    def test_checkout_rejects_unknown_host_and_inverted_range(self) -> None:
        customer = User.objects.create_user(email="c@example.com", password="StrongPass123", name="C")
        for params in (
            {**self.slot, "host_id": customer.pk},
            {**self.slot, "start_time": self.end.isoformat(), "end_time": self.start.isoformat()},
        ):
            with self.subTest(params=params):
                response = self.client.get(reverse("reservation-checkout"), params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_order_then_verify(self) -> None:
        with mock.patch(POST, return_value=order_response()):
            response = self.client.post(
                reverse("reservation-create-order"),
                {**self.slot, "customer_name": "Ravi Kumar", "customer_email": "ravi@example.com"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["granted"])
        self.assertEqual(response.data["status"], Reservation.Status.LOCKED)
        self.assertEqual(response.data["order"]["id"], "order_123")
        self.assertEqual(self._events("payment_start"), 1)
        reservation = Reservation.objects.get(pk=response.data["reservation_id"])
        self.assertEqual(reservation.customer_name, "Ravi Kumar")

        signature = build_payment_gateways().razorpay_for("INR").signature_for("order_123", "pay_9")
        response = self.client.post(
            reverse("reservation-verify-payment"),
            {"razorpay_order_id": "order_123", "razorpay_payment_id": "pay_9", "razorpay_signature": signature},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["reservation"]["status"], Reservation.Status.CONFIRMED)
        self.assertEqual(self._events("payment_success"), 1)

    def test_held_slot_conflicts(self) -> None:
        with mock.patch(POST, return_value=order_response()):
            first = self.client.post(reverse("reservation-create-order"), self.slot, format="json")
            second = self.client.post(reverse("reservation-create-order"), self.slot, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data["code"], "slot_unavailable")

    def test_provider_outage(self) -> None:
        with mock.patch(POST, side_effect=requests.exceptions.ConnectionError("down")):
            response = self.client.post(reverse("reservation-create-order"), self.slot, format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["code"], "provider_error")

    def test_bad_signature(self) -> None:
        with mock.patch(POST, return_value=order_response()):
            self.client.post(reverse("reservation-create-order"), self.slot, format="json")

        response = self.client.post(
            reverse("reservation-verify-payment"),
            {"razorpay_order_id": "order_123", "razorpay_payment_id": "pay_9", "razorpay_signature": "forged"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "signature_mismatch")
        self.assertEqual(self._events("payment_success"), 0)

    def test_free_slot_flow(self) -> None:
        host = make_host()
        make_rule(host, day_of_week=self.start.weekday(), start_time="09:00", end_time="10:00", is_free=True)

        response = self.client.post(reverse("reservation-create-order"), {**self.slot, "host_id": host.pk}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["is_free"])
        self.assertEqual(response.data["status"], Reservation.Status.CONFIRMED)
        self.assertEqual(AnalyticsEvent.objects.filter(host=host, event="payment_success").count(), 1)

    def test_payu_round_trip(self) -> None:
        response = self.client.post(reverse("reservation-create-payu-order"), self.slot, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        form = response.data["payu"]["params"]
        payu = build_payment_gateways().payu_gateway()
        result = {
            "txnid": form["txnid"],
            "amount": form["amount"],
            "productinfo": form["productinfo"],
            "firstname": form["firstname"],
            "email": form["email"],
            "status": "success",
        }
        result["hash"] = payu.response_hash(result)

        response = self.client.post(reverse("reservation-payu-response"), result)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["reservation"]["status"], Reservation.Status.CONFIRMED)

    def test_payu_failure_post_back(self) -> None:
        response = self.client.post(reverse("reservation-create-payu-order"), self.slot, format="json")
        form = response.data["payu"]["params"]
        payu = build_payment_gateways().payu_gateway()
        result = {key: form[key] for key in ("txnid", "amount", "productinfo", "firstname", "email")}
        result["status"] = "failure"
        result["hash"] = payu.response_hash(result)

        response = self.client.post(reverse("reservation-payu-response"), result)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])


class ReservationListTests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        self.customer = User.objects.create_user(email="buyer@example.com", password="StrongPass123", name="Buyer")
        start = datetime(2030, 1, 7, 9, 0, tzinfo=UTC)
        self.own = Reservation.objects.create(
            host=self.host,
            customer=self.customer,
            start_time=start,
            end_time=start + timedelta(hours=1),
            status=Reservation.Status.CONFIRMED,
        )
        self.other = Reservation.objects.create(
            host=make_host(),
            start_time=start,
            end_time=start + timedelta(hours=1),
            status=Reservation.Status.LOCKED,
        )

    def _ids(self, response) -> set[int]:
        rows = response.data["results"] if isinstance(response.data, dict) else response.data
        return {row["id"] for row in rows}

    def test_host_sees_hosted_reservations(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._ids(response), {self.own.pk})

    def test_customer_sees_own_reservations(self) -> None:
        self.client.force_authenticate(self.customer)

        response = self.client.get(reverse("reservation-list"), {"status": "confirmed"})

        self.assertEqual(self._ids(response), {self.own.pk})

    def test_anonymous_is_rejected(self) -> None:
        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
