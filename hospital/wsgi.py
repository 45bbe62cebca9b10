"""
WSGI config for the hospital project.

Exposes the WSGI callable as a module-level variable named ``application``.
Websocket refresh events need the ASGI entry point in ``hospital.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hospital.settings')

application = get_wsgi_application()
