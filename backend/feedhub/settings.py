"""
Django settings for feedhub project.
"""

from pathlib import Path
import os

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# ------------------------------------------------------------
# Load .env (works both for: manual run + docker)
# 1) backend/.env (if exists)
# 2) project_root/.env
# ------------------------------------------------------------
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")


SECRET_KEY = os.getenv(
    "DJANGO_SECRET_KEY",
    "django-insecure-6w!k0n#feedhub-dev-only-7c$q2m^x9r@u1z%h8p&j3v"
)

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

# Hosts
_hosts_env = os.getenv("DJANGO_ALLOWED_HOSTS", "").strip()
_hosts_fallback = "127.0.0.1,localhost,testserver"
ALLOWED_HOSTS = [h.strip() for h in (_hosts_env or _hosts_fallback).split(",") if h.strip()]

# CSRF
_csrf_env = os.getenv("DJANGO_CSRF_TRUSTED_ORIGINS", "").strip()
_csrf_fallback = "http://127.0.0.1:3000,http://localhost:3000"
CSRF_TRUSTED_ORIGINS = [u.strip() for u in (_csrf_env or _csrf_fallback).split(",") if u.strip()]


INSTALLED_APPS = [
    "daphne",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "channels",
    "social.apps.SocialConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "feedhub.urls"

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

WSGI_APPLICATION = "feedhub.wsgi.application"
ASGI_APPLICATION = "feedhub.asgi.application"


# ------------------------------------------------------------
# Database
# SQLite by default. For MySQL set DB_ENGINE=django.db.backends.mysql
# and the DB_* credentials (docker-compose sets DB_HOST=db).
# ------------------------------------------------------------
DB_ENGINE = os.getenv("DB_ENGINE", "django.db.backends.sqlite3")

if DB_ENGINE.endswith("sqlite3"):
    DATABASES = {
        "default": {
            "ENGINE": DB_ENGINE,
            "NAME": os.getenv("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": DB_ENGINE,
            "NAME": os.getenv("DB_NAME", "feedhub"),
            "USER": os.getenv("DB_USER", "feedhub_user"),
            "PASSWORD": os.getenv("DB_PASSWORD", ""),
            "HOST": os.getenv("DB_HOST", "127.0.0.1"),
            "PORT": os.getenv("DB_PORT", "3306"),
            "OPTIONS": {"charset": "utf8mb4"},
        }
    }


AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = "en-us"
# Daily post quotas are counted in UTC whatever this is set to
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

MEDIA_URL = "/uploads/"
MEDIA_ROOT = BASE_DIR / "uploads"

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "social.User"

DATA_UPLOAD_MAX_MEMORY_SIZE = 25 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 25 * 1024 * 1024


# CORS (the feed client may be served from another origin)
CORS_ALLOW_ALL_ORIGINS = os.getenv("CORS_ORIGIN_ALLOW_ALL", "1").lower() in ("1", "true", "yes")
if not CORS_ALLOW_ALL_ORIGINS:
    cors_whitelist = os.getenv("CORS_ORIGIN_WHITELIST", "")
    CORS_ALLOWED_ORIGINS = [u.strip() for u in cors_whitelist.split(",")] if cors_whitelist else []


# Channels (WebSocket)
REDIS_URL = os.environ.get("REDIS_URL", "").strip()

if REDIS_URL:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels_redis.core.RedisChannelLayer",
            "CONFIG": {"hosts": [REDIS_URL]},
        }
    }
else:
    CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}


# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "standard"},
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "social": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
