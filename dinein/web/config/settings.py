"""
Django settings for Dine-in.

Secrets come from the environment - never hardcode credentials.
Run with: DATABASE_URL=... SECRET_KEY=... python manage.py runserver

Development defaults keep the test suite runnable on SQLite.
"""

from pathlib import Path

import environ  # type: ignore[import-untyped]

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Initialize environ
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1", "testserver"]),
)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", default="django-insecure-dinein-dev-only")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "dinein.web.core",
    "dinein.web.restaurant",
    "dinein.web.payments",
    "dinein.web.realtime",
    "dinein.web.dashboard",
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

ROOT_URLCONF = "dinein.web.config.urls"

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
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "dinein.web.config.wsgi.application"

# Database
# https://docs.djangoproject.com/en/5.1/ref/settings/#databases
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR.parent.parent / 'db.sqlite3'}",
    ),
}

# Idempotency keys for checkout are stored here
CACHES = {
    "default": env.cache("CACHE_URL", default="locmemcache://dinein"),
}

# Custom user model (carries the staff role)
AUTH_USER_MODEL = "core.User"

# Password validation
_V = "django.contrib.auth.password_validation"
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": f"{_V}.UserAttributeSimilarityValidator"},
    {"NAME": f"{_V}.MinimumLengthValidator"},
    {"NAME": f"{_V}.CommonPasswordValidator"},
    {"NAME": f"{_V}.NumericPasswordValidator"},
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR.parent.parent / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "dinein": {
            "handlers": ["console"],
            "level": env("LOG_LEVEL", default="INFO"),
        },
    },
}

# =============================================================================
# Payments
# =============================================================================

# Which gateway checkout uses: "snap", "stripe" or "mock"
PAYMENT_GATEWAY = env("PAYMENT_GATEWAY", default="mock")
PAYMENT_CURRENCY = env("PAYMENT_CURRENCY", default="usd")
# Seconds before a gateway call is abandoned with GatewayUnavailable
PAYMENT_GATEWAY_TIMEOUT = env.float("PAYMENT_GATEWAY_TIMEOUT", default=10.0)

# Snap-style hosted checkout (server key is used as the basic-auth username)
SNAP_SERVER_KEY = env("SNAP_SERVER_KEY", default="")
SNAP_SANDBOX = env.bool("SNAP_SANDBOX", default=True)

# Stripe PaymentIntents
STRIPE_SECRET_KEY = env("STRIPE_SECRET_KEY", default="")
STRIPE_WEBHOOK_SECRET = env("STRIPE_WEBHOOK_SECRET", default="")

# =============================================================================
# Realtime
# =============================================================================

# Per-subscriber queue bound before the subscriber is told to resync
NOTIFIER_QUEUE_SIZE = env.int("NOTIFIER_QUEUE_SIZE", default=256)
SSE_KEEPALIVE_SECONDS = env.float("SSE_KEEPALIVE_SECONDS", default=15.0)

# =============================================================================
# Dashboard
# =============================================================================

LOW_STOCK_THRESHOLD = env.int("LOW_STOCK_THRESHOLD", default=5)
