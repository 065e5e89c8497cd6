"""Availability resolver: which slots of a host can still be booked.

Slots are derived from the host's rules for a calendar date, then pruned
of slots that already started and of slots overlapping an active
reservation (confirmed, or locked within the lock TTL).
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime
from operator import attrgetter
from typing import Iterable, Optional

from django.utils import timezone  # type: ignore

from apps.bookings.models import Reservation

from .intervals import overlap_q, overlaps
from .models import AvailabilityRule
from .slots import Slot, slots_for_rule

logger = logging.getLogger(__name__)


def rules_for_date(rules: Iterable[AvailabilityRule], on_date: date) -> list[AvailabilityRule]:
    """Recurring rules for the weekday followed by rules pinned to the date."""
    weekday = on_date.weekday()
    recurring = [rule for rule in rules if rule.specific_date is None and rule.day_of_week == weekday]
    pinned = [rule for rule in rules if rule.specific_date == on_date]
    by_start = attrgetter("start_time")
    return sorted(recurring, key=by_start) + sorted(pinned, key=by_start)


def candidate_slots(host, on_date: date, rules: Iterable[AvailabilityRule]) -> list[Slot]:
    tz = host.tzinfo
    slots = [slot for rule in rules_for_date(rules, on_date) for slot in slots_for_rule(rule, on_date, tz)]
    return sorted(slots, key=attrgetter("start"))


def available_slots(
    host,
    on_date: date,
    rules: Optional[Iterable[AvailabilityRule]] = None,
    now: Optional[datetime] = None,
) -> list[Slot]:
    now = now or timezone.now()
    if rules is None:
        rules = AvailabilityRule.objects.filter(host=host)
    rules = list(rules)

    upcoming = [slot for slot in candidate_slots(host, on_date, rules) if slot.start > now]
    if not upcoming:
        return []

    window_start = min(slot.start for slot in upcoming)
    window_end = max(slot.end for slot in upcoming)
    busy = list(
        Reservation.objects.filter(host=host)
        .blocking(now=now)
        .filter(overlap_q(window_start, window_end))
        .values_list("start_time", "end_time")
    )

    return [
        slot
        for slot in upcoming
        if not any(overlaps(slot.start, slot.end, busy_start, busy_end) for busy_start, busy_end in busy)
    ]


def month_summary(host, year: int, month: int, now: Optional[datetime] = None) -> dict[str, dict]:
    """Bookable slot count for every day of ``month`` (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}.")

    now = now or timezone.now()
    rules = list(AvailabilityRule.objects.filter(host=host))
    _, days_in_month = calendar.monthrange(year, month)

    summary: dict[str, dict] = {}
    for day in range(1, days_in_month + 1):
        on_date = date(year, month, day)
        count = len(available_slots(host, on_date, rules=rules, now=now)) if rules else 0
        summary[on_date.isoformat()] = {"count": count, "is_available": count > 0}

    logger.debug("Month summary for host %s %04d-%02d computed", host.pk, year, month)
    return summary


def host_schedule(host, today: Optional[date] = None) -> dict[str, list]:
    """Weekdays with recurring rules and upcoming pinned dates, for calendar highlighting."""
    today = today or timezone.localdate(timezone=host.tzinfo)
    rules = AvailabilityRule.objects.filter(host=host)

    recurring_days = sorted(set(rules.recurring().values_list("day_of_week", flat=True)))
    specific_dates = sorted(
        set(rules.pinned().filter(specific_date__gte=today).values_list("specific_date", flat=True))
    )
    return {
        "recurring_days": recurring_days,
        "specific_dates": [value.isoformat() for value in specific_dates],
    }
