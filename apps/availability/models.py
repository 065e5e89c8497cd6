"""Availability rule model."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


TIME_OF_DAY_VALIDATOR = RegexValidator(
    regex=r"^([01]\d|2[0-3]):[0-5]\d$",
    message=_("Use the 24h HH:MM format."),
)


class AvailabilityRuleQuerySet(models.QuerySet):
    def recurring(self):
        return self.filter(specific_date__isnull=True)

    def pinned(self):
        return self.filter(specific_date__isnull=False)

    def covering(self, time_of_day: str):
        """Rules whose [start_time, end_time) window contains ``time_of_day``."""
        return self.filter(start_time__lte=time_of_day, end_time__gt=time_of_day)


class AvailabilityRule(models.Model):
    """A bookable window of a host: weekly recurring or pinned to one date."""

    class Weekday(models.IntegerChoices):
        MONDAY = 0, _("Monday")
        TUESDAY = 1, _("Tuesday")
        WEDNESDAY = 2, _("Wednesday")
        THURSDAY = 3, _("Thursday")
        FRIDAY = 4, _("Friday")
        SATURDAY = 5, _("Saturday")
        SUNDAY = 6, _("Sunday")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="availability_rules",
    )
    day_of_week = models.PositiveSmallIntegerField(
        choices=Weekday.choices,
        help_text=_("Derived from specific_date for date-pinned rules."),
    )
    specific_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Set for a one-off window instead of a weekly one."),
    )
    start_time = models.CharField(max_length=5, validators=[TIME_OF_DAY_VALIDATOR])
    end_time = models.CharField(max_length=5, validators=[TIME_OF_DAY_VALIDATOR])
    slot_duration = models.PositiveIntegerField(
        default=60,
        validators=[MinValueValidator(1)],
        help_text=_("Slot length in minutes."),
    )
    buffer_minutes = models.PositiveIntegerField(
        default=0,
        help_text=_("Gap between consecutive slots in minutes."),
    )
    is_free = models.BooleanField(default=False)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    price_usd = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AvailabilityRuleQuerySet.as_manager()

    class Meta:
        verbose_name = _("Availability rule")
        verbose_name_plural = _("Availability rules")
        ordering = ["-specific_date", "day_of_week", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="availability_rule_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(day_of_week__gte=0) & models.Q(day_of_week__lte=6),
                name="availability_rule_valid_weekday",
            ),
        ]
        indexes = [
            models.Index(fields=["host", "day_of_week", "specific_date"], name="availability_rule_lookup_idx"),
        ]

    def __str__(self) -> str:
        when = self.specific_date.isoformat() if self.specific_date else self.get_day_of_week_display()
        return f"{self.host_id}: {when} {self.start_time}-{self.end_time}"

    @property
    def is_recurring(self) -> bool:
        return self.specific_date is None
