"""
WSGI config for the fanzone project.

Exposes the WSGI callable as a module-level variable named ``application``.
Served by gunicorn (see gunicorn.conf.py).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fanzone.settings')

application = get_wsgi_application()
