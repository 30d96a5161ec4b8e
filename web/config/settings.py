"""Django settings for the orders service.

Values come from environment variables so the same image runs in every
environment; application code reads them with ``getattr(settings, ...)``
and a default.
"""

import os
from pathlib import Path


def env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "apps.orders",
]

MIDDLEWARE = [
    "gateway.middleware.RequestIdMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("ORDERS_DB_PATH", str(BASE_DIR / "orders.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
TIME_ZONE = "UTC"

# Identity comes from the X-User-* headers, see apps.core.http
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
}

# ---- Orders ----
USE_HTTP_ADAPTERS = env_bool("USE_HTTP_ADAPTERS", False)
EVENTS_BASE_URL = os.getenv("EVENTS_BASE_URL", "http://events-bridge:8080")
EVENTS_TOPIC = os.getenv("EVENTS_TOPIC", "orders")
HTTP_TIMEOUT_SECS = float(os.getenv("HTTP_TIMEOUT_SECS", "2.0"))

ORDERS_CREATE_HELPER_KEY = os.getenv("ORDERS_CREATE_HELPER_KEY", "CreateOrderHelperV0")
ORDERS_CREATE_PIPELINE = env_bool("ORDERS_CREATE_PIPELINE", False)
ORDERS_PUBLISH_FAILURE_POLICY = os.getenv("ORDERS_PUBLISH_FAILURE_POLICY", "log")

# Operation name -> roles allowed to run it; unlisted operations are open
# to every identified caller.
SERVICE_PERMISSIONS = {}

# Identity used when a request carries no X-User-Id header. None rejects
# anonymous requests with UNAUTHORIZED.
API_DEFAULT_USER = None
if os.getenv("API_DEFAULT_USER_ID"):
    API_DEFAULT_USER = {
        "id": os.getenv("API_DEFAULT_USER_ID"),
        "email": os.getenv("API_DEFAULT_USER_EMAIL"),
        "role": os.getenv("API_DEFAULT_USER_ROLE", "USER"),
    }

# ---- Logging ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "gateway.logging_filters.RequestIdFilter"},
        "diagnostic_context": {"()": "gateway.logging_filters.DiagnosticContextFilter"},
    },
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["request_id", "diagnostic_context"],
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}
