"""
WSGI config for Dine-in.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "dinein.web.config.settings")

application = get_wsgi_application()
