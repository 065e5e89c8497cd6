"""Test settings.

In-memory SQLite, eager Celery, in-memory e-mail and a fast password
hasher. Payment keys are dummies; tests mock the provider HTTP calls.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

RAZORPAY_KEY_ID = 'rzp_test_key'
RAZORPAY_KEY_SECRET = 'rzp_test_secret'
RAZORPAY_KEY_ID_USD = ''
RAZORPAY_KEY_SECRET_USD = ''
RAZORPAY_API_BASE_URL = 'https://api.razorpay.test/v1'
PAYU_MERCHANT_KEY = 'payu_key'
PAYU_SALT = 'payu_salt'

BOOKING_LOCK_TTL_MINUTES = 5

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['loggers']['apps']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['loggers']['apps.payments']['level'] = 'CRITICAL'  # noqa: F405
