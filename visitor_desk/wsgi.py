"""WSGI entry point for the visitor desk API."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "visitor_desk.settings")

application = get_wsgi_application()
