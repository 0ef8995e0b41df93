"""
WSGI config for RoomHub.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roomhub.settings.production')

application = get_wsgi_application()
