"""ASGI config for the Toolshed project.

Exposes the ASGI callable for async-capable application servers.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
