"""Slot generation for a single availability window on a calendar date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Iterator, TYPE_CHECKING

from django.core.exceptions import ValidationError  # type: ignore

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import AvailabilityRule


ZERO = Decimal("0.00")


@dataclass(frozen=True)
class SlotPrice:
    """Display prices carried by every slot of a rule."""

    is_free: bool
    price: Decimal
    price_usd: Decimal

    @classmethod
    def from_rule(cls, rule: "AvailabilityRule") -> "SlotPrice":
        if rule.is_free:
            return cls(is_free=True, price=ZERO, price_usd=ZERO)
        return cls(is_free=False, price=rule.price, price_usd=rule.price_usd)


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    is_free: bool
    price: Decimal
    price_usd: Decimal


def parse_time_of_day(value: str) -> time:
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"Invalid time of day: {value!r}") from exc


class SlotSequence:
    """Lazy, restartable sequence of slots.

    Slots start at the window start and advance by ``duration + buffer``;
    only slots ending at or before the window end are produced, so a
    trailing remainder shorter than one slot is dropped.
    """

    def __init__(
        self,
        start_time: str,
        end_time: str,
        slot_duration: int,
        buffer_minutes: int,
        on_date: date,
        tz: tzinfo,
        quote: SlotPrice,
    ) -> None:
        if slot_duration is None or slot_duration <= 0:
            raise ValidationError("Slot duration must be a positive number of minutes.")
        if buffer_minutes is None or buffer_minutes < 0:
            raise ValidationError("Buffer must not be negative.")

        self.window_start = datetime.combine(on_date, parse_time_of_day(start_time), tzinfo=tz)
        self.window_end = datetime.combine(on_date, parse_time_of_day(end_time), tzinfo=tz)
        self.duration = timedelta(minutes=slot_duration)
        self.step = timedelta(minutes=slot_duration + buffer_minutes)
        self.quote = quote

    def __iter__(self) -> Iterator[Slot]:
        cursor = self.window_start
        while cursor + self.duration <= self.window_end:
            yield Slot(
                start=cursor,
                end=cursor + self.duration,
                is_free=self.quote.is_free,
                price=self.quote.price,
                price_usd=self.quote.price_usd,
            )
            cursor += self.step

    def __repr__(self) -> str:
        return f"SlotSequence({self.window_start.isoformat()} - {self.window_end.isoformat()})"


def generate_slots(
    start_time: str,
    end_time: str,
    slot_duration: int,
    buffer_minutes: int,
    on_date: date,
    tz: tzinfo,
    quote: SlotPrice,
) -> SlotSequence:
    return SlotSequence(start_time, end_time, slot_duration, buffer_minutes, on_date, tz, quote)


def slots_for_rule(rule: "AvailabilityRule", on_date: date, tz: tzinfo) -> SlotSequence:
    return generate_slots(
        rule.start_time,
        rule.end_time,
        rule.slot_duration,
        rule.buffer_minutes,
        on_date,
        tz,
        SlotPrice.from_rule(rule),
    )
