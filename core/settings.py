"""
Django settings for the navlinks demo site.

Reads configuration from environment variables (with sensible defaults for
local development).  In production, set these in a `.env` file or in the
process environment.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file in project root
from dotenv import load_dotenv

load_dotenv(BASE_DIR / ".env")


# ==============================================================================
# ENVIRONMENT HELPERS
# ==============================================================================


def _env(key, default=""):
    """Return an environment variable or *default*."""
    return os.environ.get(key, default)


def _env_bool(key, default=False):
    """Return an environment variable as a boolean."""
    return _env(key, str(default)).lower() in ("true", "1", "yes")


def _env_list(key, default="", sep=","):
    """Return an environment variable as a list of strings."""
    raw = _env(key, default)
    return [item.strip() for item in raw.split(sep) if item.strip()]


# ==============================================================================
# SECURITY
# ==============================================================================

DEBUG = _env_bool("DEBUG", False)

# The development key is only used with DEBUG on; set SECRET_KEY otherwise.
SECRET_KEY = _env("SECRET_KEY") or ("insecure-secret-key-do-NOT-use-in-prod" if DEBUG else "")

ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", "localhost,127.0.0.1" if DEBUG else "")


# ==============================================================================
# APPLICATIONS
# ==============================================================================

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    "navlinks",
    "django_htmx",
]


MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "navlinks.middleware.NavigationSubtitlesMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_htmx.middleware.HtmxMiddleware",
]


ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "navlinks.context_processors.navigation",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"


# ==============================================================================
# DATABASE
# ==============================================================================

# Only sessions and auth use the database.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": _env("SQLITE_PATH", "") or (BASE_DIR / "db.sqlite3"),
    }
}


# ==============================================================================
# INTERNATIONALIZATION
# ==============================================================================

LANGUAGE_CODE = _env("LANGUAGE_CODE", "en-us")
TIME_ZONE = _env("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True


# ==============================================================================
# STATIC FILES
# ==============================================================================

STATIC_URL = _env("STATIC_URL", "/static/")
STATIC_ROOT = _env("STATIC_ROOT", "") or (BASE_DIR / "staticfiles")

STORAGES = {
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ==============================================================================
# NAVIGATION
# ==============================================================================

NAVLINKS_AUTHORIZATION_METHOD = _env("NAVLINKS_AUTHORIZATION_METHOD", "is_authenticated")
NAVLINKS_AUTHORIZED_CSS = _env("NAVLINKS_AUTHORIZED_CSS", "authorized_nav_link")
NAVLINKS_TEMPLATE = _env("NAVLINKS_TEMPLATE", "navlinks/navigation.html")
NAVLINKS_ACTIVE_CSS = _env("NAVLINKS_ACTIVE_CSS", "active")


# ==============================================================================
# LOGGING
# ==============================================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": _env("DJANGO_LOG_LEVEL", "INFO"),
        },
        "navlinks": {
            "handlers": ["console"],
            "level": _env("APP_LOG_LEVEL", "INFO"),
        },
    },
}
