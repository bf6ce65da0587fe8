# visitor_desk/settings.py
#
# Purpose:
# - Project settings for the visitor desk API (kiosk + staff mobile app).
#
# Configuration sources:
# - Environment variables for anything deployment-specific (secrets, DB, email).
# - VISITOR_DESK dict for application knobs (slot capacity, kiosk defaults).
# - configmgr.SystemSetting rows override the kiosk defaults at runtime.
#
# Notes for developers:
# - Defaults are dev-friendly: SQLite, console email backend, DEBUG on.
# - In production set DJANGO_SECRET_KEY, DJANGO_DEBUG=false and DB_* vars.
#
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    return os.environ.get(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-secret-key")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]


INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework.authtoken",
    "configmgr",
    "staff",
    "visitors",
    "notifications.apps.NotificationsConfig",
    "reports",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "visitor_desk.urls"
WSGI_APPLICATION = "visitor_desk.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]


# ==========
# Database
# ==========
# SQLite by default; set DB_ENGINE=django.db.backends.postgresql (plus DB_*)
# for a shared deployment. Slot load updates rely on conditional UPDATEs, so
# any backend Django supports keeps the capacity guard.
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "Asia/Seoul")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# ==========
# REST API
# ==========
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.TokenAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    "EXCEPTION_HANDLER": "visitor_desk.exceptions.api_exception_handler",
}


# ==========
# Email (notification delivery)
# ==========
# Console backend prints messages to the terminal in dev.
EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "25"))
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", False)
DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "visitor-desk@localhost")


# ==========
# Application knobs
# ==========
VISITOR_DESK = {
    # Maximum concurrent visitors per staff slot when none is given.
    "DEFAULT_SLOT_CAPACITY": int(os.environ.get("DEFAULT_SLOT_CAPACITY", "3")),
    # Kiosk location defaults (Seoul City Hall); overridable via SystemSetting.
    "KIOSK_LATITUDE": float(os.environ.get("KIOSK_LATITUDE", "37.5665")),
    "KIOSK_LONGITUDE": float(os.environ.get("KIOSK_LONGITUDE", "126.9780")),
    "KIOSK_NAME": os.environ.get("KIOSK_NAME", "Main kiosk"),
    "KIOSK_ADDRESS": os.environ.get("KIOSK_ADDRESS", "110 Sejong-daero, Jung-gu, Seoul"),
    # 0 disables the check-in proximity gate.
    "PROXIMITY_MAX_DISTANCE": float(os.environ.get("PROXIMITY_MAX_DISTANCE", "0")),
    # Deliver notification emails on a background thread pool.
    "NOTIFICATION_ASYNC": _env_bool("NOTIFICATION_ASYNC", True),
    "NOTIFICATION_WORKERS": int(os.environ.get("NOTIFICATION_WORKERS", "2")),
}


# ==========
# Logging
# ==========
LOG_LEVEL = os.environ.get("DJANGO_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "django.request": {"handlers": ["console"], "level": "ERROR", "propagate": False},
    },
}
