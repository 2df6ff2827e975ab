"""Development settings for the Toolshed project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and emulating
the payment gateway. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Emulate checkout sessions and transfers unless explicitly enabled
PAYMENT_GATEWAY_ENABLED = os.environ.get('PAYMENT_GATEWAY_ENABLED', 'false').lower() == 'true'
