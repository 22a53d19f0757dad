"""
WSGI config for the filebot project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'filebot.settings')

application = get_wsgi_application()
