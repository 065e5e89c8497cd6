"""Development settings for the slot booking service.

Debug on, e-mails printed to the console and Celery tasks run inline so
the booking flow works without a Redis broker. Payment keys come from the
environment; point them at the providers' sandbox accounts.
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Set DEV_CELERY_EAGER=false to exercise a real worker and beat locally
CELERY_TASK_ALWAYS_EAGER = os.environ.get('DEV_CELERY_EAGER', 'true').lower() == 'true'  # noqa: F405
CELERY_TASK_EAGER_PROPAGATES = True

CORS_ALLOW_ALL_ORIGINS = True

LOGGING['loggers']['apps']['level'] = 'DEBUG'  # noqa: F405
LOGGING['handlers']['console']['level'] = 'DEBUG'  # noqa: F405
