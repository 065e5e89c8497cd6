"""Host dashboard numbers and behaviour insights built from funnel events."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import ExtractHour  # type: ignore
from django.utils import timezone  # type: ignore

from apps.availability.models import AvailabilityRule
from apps.bookings.models import Reservation

from .models import AnalyticsEvent

FUNNEL_EVENTS = [choice.value for choice in AnalyticsEvent.EventKind]
INSIGHT_WINDOW = timedelta(days=30)
EVENING_FROM_HOUR = 17
MORNING_UNTIL_HOUR = 12
MIN_RULES_FOR_HEALTHY_SUPPLY = 3


def _rate(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def event_counts(host, since: Optional[datetime] = None) -> dict[str, int]:
    queryset = AnalyticsEvent.objects.filter(host=host)
    if since is not None:
        queryset = queryset.filter(created_at__gte=since)
    counts = dict.fromkeys(FUNNEL_EVENTS, 0)
    for row in queryset.values("event").annotate(total=Count("id")):
        if row["event"] in counts:
            counts[row["event"]] = row["total"]
    return counts


def dashboard_summary(host) -> dict[str, Any]:
    """Funnel counts and conversion rates plus confirmed earnings.

    Confirmed reservations are the source of truth for successes, so the
    success count never falls below them even if events were lost.
    """
    counts = event_counts(host)
    confirmed = Reservation.objects.filter(host=host, status=Reservation.Status.CONFIRMED)
    confirmed_count = confirmed.count()
    success = max(counts["payment_success"], confirmed_count)

    earnings = {
        row["currency"]: row["total"] or Decimal("0.00")
        for row in confirmed.values("currency").annotate(total=Sum("amount")).order_by("currency")
    }

    return {
        "funnel": {
            "views": counts["profile_view"],
            "checkout": counts["checkout_view"],
            "payment": counts["payment_start"],
            "success": success,
            "checkout_rate": _rate(counts["checkout_view"], counts["profile_view"]),
            "payment_rate": _rate(counts["payment_start"], counts["checkout_view"]),
            "success_rate": _rate(success, counts["payment_start"]),
            "overall_conversion": _rate(success, counts["profile_view"]),
        },
        "confirmed_reservations": confirmed_count,
        "total_earnings": sum(earnings.values(), Decimal("0.00")),
        "earnings_by_currency": earnings,
    }


def _profile_views_by_hour(host) -> dict[int, int]:
    rows = (
        AnalyticsEvent.objects.filter(host=host, event=AnalyticsEvent.EventKind.PROFILE_VIEW)
        .annotate(hour=ExtractHour("created_at", tzinfo=host.tzinfo))
        .values("hour")
        .annotate(total=Count("id"))
    )
    return {row["hour"]: row["total"] for row in rows}


def _top_referrer(host) -> Optional[str]:
    referrers: dict[str, int] = {}
    views = AnalyticsEvent.objects.filter(host=host, event=AnalyticsEvent.EventKind.PROFILE_VIEW)
    for metadata in views.values_list("metadata", flat=True):
        referrer = (metadata or {}).get("referrer")
        if referrer:
            referrers[referrer] = referrers.get(referrer, 0) + 1
    if not referrers:
        return None
    return max(referrers.items(), key=lambda item: item[1])[0]


def generate_insights(host, now: Optional[datetime] = None) -> dict[str, Any]:
    now = now or timezone.now()
    counts = event_counts(host, since=now - INSIGHT_WINDOW)

    by_hour = _profile_views_by_hour(host)
    evening_views = sum(total for hour, total in by_hour.items() if hour >= EVENING_FROM_HOUR)
    morning_views = sum(total for hour, total in by_hour.items() if hour < MORNING_UNTIL_HOUR)

    observations: list[str] = []
    recommendations: list[str] = []

    if evening_views > morning_views * 1.5:
        observations.append("Your profile gets 50% more traffic in the evenings.")
        recommendations.append("Open more slots between 6 PM and 9 PM to capture high evening traffic.")

    checkout_rate = counts["checkout_view"] / counts["profile_view"] if counts["profile_view"] else 0.0
    if counts["profile_view"] > 0 and checkout_rate < 0.2:
        observations.append("High drop-off detected on your profile page.")
        recommendations.append(
            "Your profile has many views but few clicks. Add a profile picture or a sharper bio to build trust."
        )

    if AvailabilityRule.objects.filter(host=host).count() < MIN_RULES_FOR_HEALTHY_SUPPLY:
        observations.append("You have very limited slots open.")
        recommendations.append("Add at least 5 different time slots per week to catch impulse bookings.")

    top_referrer = _top_referrer(host)
    if top_referrer and top_referrer != "Direct":
        observations.append(f"Most of your clients are finding you through {top_referrer}.")

    if checkout_rate > 0.4:
        health = "Excellent"
    elif checkout_rate > 0.1:
        health = "Healthy"
    else:
        health = "Needs Attention"

    return {
        "title": "Growth Strategy",
        "personalized_note": (
            f"Observation: {' '.join(observations)}"
            if observations
            else "We are tracking your traffic. Share your link on social media to see where visitors come from."
        ),
        "top_action": recommendations[0] if recommendations else "Keep monitoring your funnel to spot drop-off points.",
        "all_recommendations": recommendations,
        "stats": {
            "peak_time": "Evening" if evening_views > morning_views else "Morning/Afternoon",
            "top_referrer": top_referrer or "Direct/Search",
            "conversion_health": health,
            "window_counts": counts,
        },
    }
