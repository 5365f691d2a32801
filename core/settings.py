import os
from decimal import Decimal
from dotenv import load_dotenv
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# .env is optional; real environment variables win when both are set.
load_dotenv(BASE_DIR / ".env")


def env_bool(name, default=False):
    val = os.environ.get(name)
    if val is None:
        return default
    return str(val).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
DEBUG = env_bool("DEBUG", True)
ALLOWED_HOSTS = [
    h.strip()
    for h in os.environ.get("ALLOWED_HOSTS", "*").split(",")
    if h.strip()
]
CSRF_TRUSTED_ORIGINS = [
    o.strip()
    for o in os.environ.get("CSRF_TRUSTED_ORIGINS", "").split(",")
    if o.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django.contrib.humanize",
    # local apps
    "accounts.apps.AccountsConfig",
    "academics.apps.AcademicsConfig",
    "students.apps.StudentsConfig",
    "finance.apps.FinanceConfig",
]

AUTH_USER_MODEL = "accounts.User"
LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "/"
LOGOUT_REDIRECT_URL = "login"

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # role gating
    "accounts.middleware.RoleBasedAccessMiddleware",
]

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [str(BASE_DIR / "templates")],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "accounts.context_processors.role",
            ],
        },
    }
]

WSGI_APPLICATION = "core.wsgi.application"

_DB_NAME = os.environ.get("DB_NAME")
if _DB_NAME:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": _DB_NAME,
            "USER": os.environ.get("DB_USER", ""),
            "PASSWORD": os.environ.get("DB_PASSWORD", ""),
            "HOST": os.environ.get("DB_HOST", "localhost"),
            "PORT": os.environ.get("DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": str(BASE_DIR / "db.sqlite3"),
        }
    }

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "smis-cache",
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": (
            "django.contrib.auth.password_validation."
            "MinimumLengthValidator"
        ),
        "OPTIONS": {"min_length": 8},
    },
    {
        "NAME": (
            "django.contrib.auth.password_validation."
            "CommonPasswordValidator"
        )
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "America/Jamaica")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "static_build"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

SESSION_COOKIE_SAMESITE = "Lax"
if not DEBUG:
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

# =============================================================================
# SMIS POLICY
# =============================================================================

SMIS_SCHOOL_NAME = os.environ.get("SMIS_SCHOOL_NAME", "SMIS")
SMIS_CURRENCY = os.environ.get("SMIS_CURRENCY", "JMD")

# Fat-finger guard on a single payment, in JMD.
SMIS_MAX_PAYMENT_AMOUNT = Decimal(
    os.environ.get("SMIS_MAX_PAYMENT_AMOUNT", "1000000")
)

# Card checkout quotes (JMD -> USD cents at the gateway boundary)
SMIS_EXCHANGE_RATE_URL = os.environ.get(
    "SMIS_EXCHANGE_RATE_URL", "https://api.exchangerate-api.com/v4/latest/USD"
)
SMIS_DEFAULT_EXCHANGE_RATE = Decimal(
    os.environ.get("SMIS_DEFAULT_EXCHANGE_RATE", "157.19")
)
SMIS_EXCHANGE_RATE_TTL = int(os.environ.get("SMIS_EXCHANGE_RATE_TTL", "3600"))
SMIS_EXCHANGE_RATE_TIMEOUT = float(
    os.environ.get("SMIS_EXCHANGE_RATE_TIMEOUT", "5")
)

SMIS_LOG_LEVEL = os.environ.get("SMIS_LOG_LEVEL", "INFO").upper()

_admin_emails = os.environ.get("ADMIN_EMAILS", "")
ADMINS = [
    (os.environ.get("ADMIN_NAME", "Admin"), e.strip())
    for e in _admin_emails.split(",")
    if e.strip()
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "mail_admins": {
            "level": "ERROR",
            "class": "django.utils.log.AdminEmailHandler",
        },
    },
    "loggers": {
        "django.request": {
            "handlers": ["console", "mail_admins"],
            "level": "ERROR",
            "propagate": False,
        },
        "accounts": {"handlers": ["console"], "level": SMIS_LOG_LEVEL},
        "academics": {"handlers": ["console"], "level": SMIS_LOG_LEVEL},
        "students": {"handlers": ["console"], "level": SMIS_LOG_LEVEL},
        "finance": {"handlers": ["console"], "level": SMIS_LOG_LEVEL},
    },
}
