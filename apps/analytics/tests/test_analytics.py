"""Funnel recording, dashboard numbers and growth insights."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.test import RequestFactory, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.insights import dashboard_summary, event_counts, generate_insights
from apps.analytics.models import AnalyticsEvent
from apps.analytics.services import record_event, session_id_for
from apps.availability.tests.factories import make_host, make_rule
from apps.bookings.models import Reservation
from apps.users.models import User

UTC = dt_timezone.utc
NOW = datetime(2030, 1, 15, 12, 0, tzinfo=UTC)


def add_events(host, event: str, count: int, *, at: datetime = NOW, **metadata) -> None:
    for _ in range(count):
        AnalyticsEvent.objects.create(host=host, event=event, metadata=metadata, created_at=at)


def add_reservation(host, hour: int, status: str, amount: str, currency: str = "INR") -> Reservation:
    start = datetime(2030, 1, 20, hour, 0, tzinfo=UTC)
    return Reservation.objects.create(
        host=host,
        start_time=start,
        end_time=start + timedelta(hours=1),
        status=status,
        amount=Decimal(amount),
        currency=currency,
    )


class RecordEventTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()

    def test_event_is_stored(self) -> None:
        event = record_event(self.host, "payment_start", "s-1", {"amount": Decimal("500.00")})

        self.assertEqual(event.session_id, "s-1")
        event.refresh_from_db()
        self.assertEqual(event.metadata, {"amount": "500.00"})

    def test_write_failures_are_swallowed(self) -> None:
        with mock.patch.object(AnalyticsEvent.objects, "create", side_effect=RuntimeError("db down")):
            self.assertIsNone(record_event(self.host, "profile_view"))

        self.assertFalse(AnalyticsEvent.objects.exists())

    def test_session_id_prefers_header(self) -> None:
        request = RequestFactory().get("/", HTTP_X_SESSION_ID="x" * 100)

        self.assertEqual(session_id_for(request), "x" * 64)
        self.assertEqual(session_id_for(RequestFactory().get("/")), "")


class DashboardSummaryTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()

    def test_empty_funnel(self) -> None:
        summary = dashboard_summary(self.host)

        self.assertEqual(summary["funnel"]["views"], 0)
        self.assertEqual(summary["funnel"]["overall_conversion"], 0.0)
        self.assertEqual(summary["total_earnings"], Decimal("0.00"))

    def test_rates_and_earnings(self) -> None:
        add_events(self.host, "profile_view", 10)
        add_events(self.host, "checkout_view", 4)
        add_events(self.host, "payment_start", 3)
        add_events(self.host, "payment_success", 1)
        add_reservation(self.host, 9, Reservation.Status.CONFIRMED, "500.00")
        add_reservation(self.host, 10, Reservation.Status.CONFIRMED, "10.00", currency="USD")
        add_reservation(self.host, 11, Reservation.Status.LOCKED, "500.00")

        summary = dashboard_summary(self.host)
        funnel = summary["funnel"]

        self.assertEqual(funnel["success"], 2)
        self.assertEqual(funnel["checkout_rate"], 40.0)
        self.assertEqual(funnel["payment_rate"], 75.0)
        self.assertEqual(funnel["success_rate"], 66.7)
        self.assertEqual(funnel["overall_conversion"], 20.0)
        self.assertEqual(summary["confirmed_reservations"], 2)
        self.assertEqual(summary["earnings_by_currency"], {"INR": Decimal("500.00"), "USD": Decimal("10.00")})

    def test_event_counts_window(self) -> None:
        add_events(self.host, "profile_view", 2, at=NOW - timedelta(days=40))
        add_events(self.host, "profile_view", 1)

        self.assertEqual(event_counts(self.host)["profile_view"], 3)
        self.assertEqual(event_counts(self.host, since=NOW - timedelta(days=30))["profile_view"], 1)


class InsightsTests(TestCase):
    def setUp(self) -> None:
        self.host = make_host()

    def test_new_host_gets_supply_advice(self) -> None:
        insights = generate_insights(self.host, now=NOW)

        self.assertEqual(insights["title"], "Growth Strategy")
        self.assertEqual(insights["all_recommendations"], ["Add at least 5 different time slots per week to catch impulse bookings."])
        self.assertEqual(insights["stats"]["conversion_health"], "Needs Attention")
        self.assertEqual(insights["stats"]["top_referrer"], "Direct/Search")

    def test_evening_traffic_and_drop_off(self) -> None:
        for day in range(3):
            make_rule(self.host, day_of_week=day)
        evening = NOW.replace(hour=19)
        add_events(self.host, "profile_view", 8, at=evening, referrer="instagram.com")
        add_events(self.host, "profile_view", 2, at=NOW.replace(hour=9), referrer="Direct")
        add_events(self.host, "checkout_view", 1)

        insights = generate_insights(self.host, now=NOW)

        self.assertEqual(len(insights["all_recommendations"]), 2)
        self.assertIn("6 PM and 9 PM", insights["top_action"])
        self.assertIn("instagram.com", insights["personalized_note"])
        self.assertEqual(insights["stats"]["peak_time"], "Evening")
        self.assertEqual(insights["stats"]["top_referrer"], "instagram.com")
        self.assertEqual(insights["stats"]["conversion_health"], "Needs Attention")

    def test_healthy_funnel(self) -> None:
        add_events(self.host, "profile_view", 10, at=NOW.replace(hour=9))
        add_events(self.host, "checkout_view", 5)

        self.assertEqual(generate_insights(self.host, now=NOW)["stats"]["conversion_health"], "Excellent")


class AnalyticsApiTests(APITestCase):
    def setUp(self) -> None:
        self.host = make_host()
        make_rule(self.host)
        add_reservation(self.host, 9, Reservation.Status.CONFIRMED, "500.00")
        self.client.force_authenticate(self.host)

    def test_dashboard(self) -> None:
        response = self.client.get(reverse("analytics-dashboard"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["funnel"]["success"], 1)
        self.assertEqual(len(response.data["availability"]), 1)
        self.assertEqual(len(response.data["recent_reservations"]), 1)

    def test_insights(self) -> None:
        response = self.client.get(reverse("analytics-insights"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("top_action", response.data)

    def test_customers_are_forbidden(self) -> None:
        customer = User.objects.create_user(email="c@example.com", password="StrongPass123", name="C")
        self.client.force_authenticate(customer)

        self.assertEqual(self.client.get(reverse("analytics-dashboard")).status_code, status.HTTP_403_FORBIDDEN)
