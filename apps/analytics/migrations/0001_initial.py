import django.core.serializers.json
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
            name="AnalyticsEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "event",
                    models.CharField(
                        choices=[
                            ("profile_view", "Profile view"),
                            ("checkout_view", "Checkout view"),
                            ("payment_start", "Payment start"),
                            ("payment_success", "Payment success"),
                        ],
                        max_length=32,
                    ),
                ),
                ("session_id", models.CharField(blank=True, max_length=64)),
                (
                    "metadata",
                    models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="analytics_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Analytics event",
                "verbose_name_plural": "Analytics events",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["host", "event", "-created_at"], name="analytics_host_event_idx"),
                ],
            },
        ),
    ]
