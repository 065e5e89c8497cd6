from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_name", models.CharField(default="Guest", max_length=150)),
                ("customer_email", models.EmailField(default="guest@example.com", max_length=254)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("locked", "Locked for payment"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        default="locked",
                        max_length=16,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("currency", models.CharField(default="INR", max_length=3)),
                (
                    "payment_gateway",
                    models.CharField(
                        choices=[("razorpay", "Razorpay"), ("payu", "PayU"), ("free", "Free")],
                        default="razorpay",
                        max_length=16,
                    ),
                ),
                ("razorpay_order_id", models.CharField(blank=True, db_index=True, max_length=64)),
                ("razorpay_payment_id", models.CharField(blank=True, max_length=64)),
                ("payu_txn_id", models.CharField(blank=True, db_index=True, max_length=64)),
                ("meeting_link", models.URLField(blank=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="hosted_reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Reservation",
                "verbose_name_plural": "Reservations",
                "ordering": ["-start_time"],
                "indexes": [
                    models.Index(fields=["host", "status", "start_time"], name="reservation_host_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("host", "start_time"), name="reservation_unique_host_start"),
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="reservation_valid_range",
                    ),
                ],
            },
        ),
    ]
