"""
ASGI config for the hms project.

The API is plain request/response HTTP, so the stock Django ASGI handler
is all that is mounted here.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hms.settings")

application = get_asgi_application()
