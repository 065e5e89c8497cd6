"""Availability rule store: validated creation and deletion of host rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.contrib.auth import get_user_model  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from .intervals import overlap_q
from .models import AvailabilityRule
from .slots import parse_time_of_day

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class RuleOverlapError(ValidationError):
    """Raised when a new rule would overlap an existing rule of the host."""


@dataclass
class RuleDraft:
    start_time: str
    end_time: str
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None
    slot_duration: int = 60
    buffer_minutes: int = 0
    is_free: bool = False
    price: Decimal = ZERO
    price_usd: Decimal = ZERO

    def normalized(self) -> "RuleDraft":
        """Validate the draft and derive the weekday of date-pinned rules."""
        parse_time_of_day(self.start_time)
        parse_time_of_day(self.end_time)
        if self.start_time >= self.end_time:
            raise ValidationError("Start time must be before end time.")
        if self.slot_duration is None or self.slot_duration <= 0:
            raise ValidationError("Slot duration must be a positive number of minutes.")
        if self.buffer_minutes is None or self.buffer_minutes < 0:
            raise ValidationError("Buffer must not be negative.")

        if self.specific_date is not None:
            self.day_of_week = self.specific_date.weekday()
        elif self.day_of_week is None:
            raise ValidationError("Either a weekday or a specific date is required.")
        elif not 0 <= self.day_of_week <= 6:
            raise ValidationError("Weekday must be between 0 (Monday) and 6 (Sunday).")

        if self.is_free:
            self.price = ZERO
            self.price_usd = ZERO
        elif (self.price or ZERO) < 0 or (self.price_usd or ZERO) < 0:
            raise ValidationError("Prices must not be negative.")
        return self


def conflicting_rules(host, draft: RuleDraft, *, today: Optional[date] = None):
    """Rules of ``host`` whose applicability and time window intersect the draft.

    A date-pinned draft conflicts with the weekday's recurring rules and with
    rules pinned to the same date. A recurring draft conflicts with the
    weekday's recurring rules and with its upcoming pinned rules.
    """
    today = today or timezone.localdate(timezone=host.tzinfo)
    same_day = AvailabilityRule.objects.filter(host=host, day_of_week=draft.day_of_week)

    if draft.specific_date is not None:
        applicability = Q(specific_date__isnull=True) | Q(specific_date=draft.specific_date)
    else:
        applicability = Q(specific_date__isnull=True) | Q(specific_date__gte=today)

    return same_day.filter(applicability).filter(overlap_q(draft.start_time, draft.end_time))


def create_rule(host, draft: RuleDraft) -> AvailabilityRule:
    draft.normalized()

    with transaction.atomic():
        # Serialises rule creation per host so two overlapping rules cannot both pass the check.
        get_user_model().objects.lock_for_update(host.pk)

        clash = conflicting_rules(host, draft).first()
        if clash is not None:
            raise RuleOverlapError(f"This window overlaps an existing rule ({clash.start_time}-{clash.end_time}).")

        rule = AvailabilityRule.objects.create(
            host=host,
            day_of_week=draft.day_of_week,
            specific_date=draft.specific_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            slot_duration=draft.slot_duration,
            buffer_minutes=draft.buffer_minutes,
            is_free=draft.is_free,
            price=draft.price,
            price_usd=draft.price_usd,
        )

    logger.info("Host %s added availability rule %s", host.pk, rule.pk)
    return rule


def delete_rule(host, rule_id: int) -> bool:
    deleted, _ = AvailabilityRule.objects.filter(host=host, pk=rule_id).delete()
    if deleted:
        logger.info("Host %s deleted availability rule %s", host.pk, rule_id)
    return bool(deleted)
