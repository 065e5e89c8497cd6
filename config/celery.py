import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("slot_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

LOCK_SWEEP_SECONDS = float(os.environ.get("BOOKING_LOCK_SWEEP_SECONDS", 300))

app.conf.beat_schedule = {
    # Reap payment holds older than the lock TTL
    "cleanup-expired-locks": {
        "task": "bookings.cleanup_expired_locks",
        "schedule": LOCK_SWEEP_SECONDS,
        "options": {"expires": LOCK_SWEEP_SECONDS - 10},
    },
}

app.conf.timezone = "UTC"
