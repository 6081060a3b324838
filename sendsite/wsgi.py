"""
WSGI config for sendsite project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sendsite.settings')

application = get_wsgi_application()
