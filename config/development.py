from .base import *

DEBUG = True

# Static files for development
STATIC_ROOT = BASE_DIR / "staticfiles"

# Print outgoing mail to the console unless a backend is configured
EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")
