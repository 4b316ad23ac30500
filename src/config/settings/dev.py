from datetime import timedelta

from . import base as base_settings

DEBUG = base_settings.DEBUG
INSTALLED_APPS = [*base_settings.INSTALLED_APPS]
MIDDLEWARE = [*base_settings.MIDDLEWARE]

# Scheduled-request reports run inline when no broker is around.
CELERY_TASK_ALWAYS_EAGER = base_settings.config(
    "CELERY_TASK_ALWAYS_EAGER", default=True, cast=bool
)

if DEBUG:
    INSTALLED_APPS += [
        "debug_toolbar",
        "django_extensions",
    ]

    MIDDLEWARE += [
        "debug_toolbar.middleware.DebugToolbarMiddleware",
    ]

    INTERNAL_IPS = ["127.0.0.1"]

    SIMPLE_JWT = {
        "ACCESS_TOKEN_LIFETIME": timedelta(days=1),
        "REFRESH_TOKEN_LIFETIME": timedelta(days=7),
        "ROTATE_REFRESH_TOKENS": True,
        "AUTH_HEADER_TYPES": ("Bearer",),
    }

    CORS_ALLOWED_ORIGINS = [
        *base_settings.CORS_ALLOWED_ORIGINS,
        base_settings.FRONTEND_URL,
    ]

for setting_name in dir(base_settings):
    if setting_name.isupper() and setting_name not in globals():
        globals()[setting_name] = getattr(base_settings, setting_name)
