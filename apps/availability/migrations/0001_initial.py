from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


TIME_OF_DAY = django.core.validators.RegexValidator(
    message="Use the 24h HH:MM format.",
    regex="^([01]\\d|2[0-3]):[0-5]\\d$",
)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AvailabilityRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "day_of_week",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Monday"),
                            (1, "Tuesday"),
                            (2, "Wednesday"),
                            (3, "Thursday"),
                            (4, "Friday"),
                            (5, "Saturday"),
                            (6, "Sunday"),
                        ],
                        help_text="Derived from specific_date for date-pinned rules.",
                    ),
                ),
                (
                    "specific_date",
                    models.DateField(blank=True, help_text="Set for a one-off window instead of a weekly one.", null=True),
                ),
                ("start_time", models.CharField(max_length=5, validators=[TIME_OF_DAY])),
                ("end_time", models.CharField(max_length=5, validators=[TIME_OF_DAY])),
                (
                    "slot_duration",
                    models.PositiveIntegerField(
                        default=60,
                        help_text="Slot length in minutes.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "buffer_minutes",
                    models.PositiveIntegerField(default=0, help_text="Gap between consecutive slots in minutes."),
                ),
                ("is_free", models.BooleanField(default=False)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "price_usd",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="availability_rules",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Availability rule",
                "verbose_name_plural": "Availability rules",
                "ordering": ["-specific_date", "day_of_week", "start_time"],
                "indexes": [
                    models.Index(fields=["host", "day_of_week", "specific_date"], name="availability_rule_lookup_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="availability_rule_valid_window",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("day_of_week__gte", 0), ("day_of_week__lte", 6)),
                        name="availability_rule_valid_weekday",
                    ),
                ],
            },
        ),
    ]
