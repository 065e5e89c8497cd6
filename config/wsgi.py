"""WSGI entry point for the slot booking API.

Gunicorn or uWSGI load ``application`` from here. Deployments set
DJANGO_SETTINGS_MODULE=config.settings.prod; the default is development.
"""

import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
