"""Price resolution for a single instant.

The price a customer pays is always derived from the rule governing the
requested start instant, never from client input. Date-pinned rules take
precedence over weekly ones.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from apps.bookings.exceptions import PriceResolutionError

from .models import AvailabilityRule


SUPPORTED_CURRENCIES = ("INR", "USD")
DEFAULT_CURRENCY = "INR"


def normalize_currency(currency: Optional[str]) -> str:
    value = (currency or DEFAULT_CURRENCY).upper()
    return value if value in SUPPORTED_CURRENCIES else DEFAULT_CURRENCY


class MatchKind(enum.Enum):
    SPECIFIC = "specific"
    RECURRING = "recurring"
    NONE = "none"


@dataclass(frozen=True)
class RuleMatch:
    kind: MatchKind
    rule: Optional[AvailabilityRule] = None

    def __bool__(self) -> bool:
        return self.kind is not MatchKind.NONE


@dataclass(frozen=True)
class PriceQuote:
    amount: Decimal
    currency: str
    is_free: bool

    @property
    def minor_units(self) -> int:
        """Amount in paise/cents as payment providers expect it."""
        return int((self.amount * 100).to_integral_value())


def find_governing_rule(host, instant: datetime) -> RuleMatch:
    local = instant.astimezone(host.tzinfo)
    on_date = local.date()
    time_of_day = local.strftime("%H:%M")

    rules = AvailabilityRule.objects.filter(host=host).covering(time_of_day).order_by("start_time")

    specific = rules.filter(specific_date=on_date).first()
    if specific is not None:
        return RuleMatch(MatchKind.SPECIFIC, specific)

    recurring = rules.recurring().filter(day_of_week=on_date.weekday()).first()
    if recurring is not None:
        return RuleMatch(MatchKind.RECURRING, recurring)

    return RuleMatch(MatchKind.NONE)


def quote_for(rule: AvailabilityRule, currency: Optional[str]) -> PriceQuote:
    currency = normalize_currency(currency)
    if rule.is_free:
        return PriceQuote(amount=Decimal("0.00"), currency=currency, is_free=True)
    amount = rule.price_usd if currency == "USD" else rule.price
    amount = Decimal(amount)
    # Zero-priced slots are booked as free.
    return PriceQuote(amount=amount, currency=currency, is_free=amount == 0)


def resolve_quote(host, instant: datetime, currency: Optional[str]) -> PriceQuote:
    match = find_governing_rule(host, instant)
    if not match:
        raise PriceResolutionError(
            f"No availability rule covers {instant.isoformat()} for host {host.pk}."
        )
    return quote_for(match.rule, currency)
