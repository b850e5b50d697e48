# backend/wsgi.py
"""
WSGI config for the coffee shop backend.

Run ONE worker process: the mutation lock serializes writes within a
process only. Production sets DJANGO_SETTINGS_MODULE=backend.settings.prod.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
