import os
from pathlib import Path
import environ
from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent
env = environ.Env(
    DJANGO_DEBUG=(bool, True),
    DJANGO_SECRET_KEY=(str, "insecure-key"),
    DJANGO_ALLOWED_HOSTS=(str, "localhost,127.0.0.1"),
    TIME_ZONE=(str, "America/Sao_Paulo"),
    CSRF_TRUSTED_ORIGINS=(str, ""),
    SESSION_COOKIE_SECURE=(bool, False),
    CSRF_COOKIE_SECURE=(bool, False),

    ROSTER_BAND_MINISTRY_NAME=(str, "Bandas"),
    ROSTER_DERIVED_MINISTRIES=(list, ["Multimídia", "Áudio", "Iluminação"]),
    ROSTER_SPECIAL_BAND_KEYWORD=(str, "eleve"),
    ROSTER_SPECIAL_EVENT_KEYWORDS=(list, ["eleve", "30 semanas", "30-semanas", "30semana"]),

    POSTGRES_DB=(str, "roster"),
    POSTGRES_USER=(str, "roster_user"),
    POSTGRES_PASSWORD=(str, "roster_pass"),
    POSTGRES_HOST=(str, "db"),
    POSTGRES_PORT=(int, 5432),

    REDIS_URL=(str, "redis://redis:6379/0"),
    SCHEDULE_GENERATION_DAY=(int, 25),
    SCHEDULE_GENERATION_HOUR=(int, 12),
    SCHEDULE_SYSTEM_USERNAME=(str, "system"),

    EMAIL_BACKEND=(str, "django.core.mail.backends.console.EmailBackend"),
    EMAIL_HOST=(str, ""),
    EMAIL_PORT=(int, 587),
    EMAIL_HOST_USER=(str, ""),
    EMAIL_HOST_PASSWORD=(str, ""),
    EMAIL_USE_TLS=(bool, True),
    DEFAULT_FROM_EMAIL=(str, "escala@igreja.local"),
)
environ.Env.read_env(os.path.join(BASE_DIR.parent, ".env"))

SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = env("DJANGO_DEBUG")
ALLOWED_HOSTS = [h.strip() for h in env("DJANGO_ALLOWED_HOSTS").split(",")]

CSRF_TRUSTED_ORIGINS = [h.strip() for h in env("CSRF_TRUSTED_ORIGINS").split(",") if h.strip()]
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
USE_X_FORWARDED_HOST = True
SESSION_COOKIE_SECURE = env("SESSION_COOKIE_SECURE")
CSRF_COOKIE_SECURE = env("CSRF_COOKIE_SECURE")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_filters",
    "roster.apps.RosterConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.middleware.locale.LocaleMiddleware",
    "core.middleware.ErrorLoggingMiddleware",  # custom middleware to log errors
    "core.middleware.CurrentUserMiddleware", # custom middleware to track current user
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
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

WSGI_APPLICATION = "core.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": env("POSTGRES_DB"),
        "USER": env("POSTGRES_USER"),
        "PASSWORD": env("POSTGRES_PASSWORD"),
        "HOST": env("POSTGRES_HOST"),
        "PORT": env("POSTGRES_PORT"),
    }
}

LANGUAGE_CODE = "pt-br"
TIME_ZONE = env("TIME_ZONE")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "static"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_FILTER_BACKENDS": ["django_filters.rest_framework.DjangoFilterBackend"],
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAuthenticated"],
}

ROSTER_BAND_MINISTRY_NAME = env("ROSTER_BAND_MINISTRY_NAME")
ROSTER_DERIVED_MINISTRIES = env("ROSTER_DERIVED_MINISTRIES")
ROSTER_SPECIAL_BAND_KEYWORD = env("ROSTER_SPECIAL_BAND_KEYWORD")
ROSTER_SPECIAL_EVENT_KEYWORDS = env("ROSTER_SPECIAL_EVENT_KEYWORDS")
SCHEDULE_GENERATION_DAY = env("SCHEDULE_GENERATION_DAY")
SCHEDULE_GENERATION_HOUR = env("SCHEDULE_GENERATION_HOUR")
SCHEDULE_SYSTEM_USERNAME = env("SCHEDULE_SYSTEM_USERNAME")

CELERY_BROKER_URL = env("REDIS_URL")
CELERY_RESULT_BACKEND = env("REDIS_URL")
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    "monthly-draft": {
        "task": "roster.tasks.monthly_draft_generation",
        "schedule": crontab(minute=0, hour=SCHEDULE_GENERATION_HOUR, day_of_month=SCHEDULE_GENERATION_DAY),
    },
}

EMAIL_BACKEND = env("EMAIL_BACKEND")
EMAIL_HOST = env("EMAIL_HOST")
EMAIL_PORT = env("EMAIL_PORT")
EMAIL_HOST_USER = env("EMAIL_HOST_USER")
EMAIL_HOST_PASSWORD = env("EMAIL_HOST_PASSWORD")
EMAIL_USE_TLS = env("EMAIL_USE_TLS")
DEFAULT_FROM_EMAIL = env("DEFAULT_FROM_EMAIL", default="escala@igreja.local")

LOG_DIR = BASE_DIR / "logs"
LOG_DIR.mkdir(exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "detailed": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
        "rotating_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "app.log",
            "maxBytes": 1024 * 1024 * 5,  # 5 MB
            "backupCount": 5,
            "formatter": "detailed",
        }
    },
    "loggers": {
        "roster": {"handlers": ["console", "rotating_file"], "level": "INFO"},

        "django": {"handlers": ["console", "rotating_file"], "level": "INFO", "propagate": True},
        "django.request": {"handlers": ["console", "rotating_file"], "level": "ERROR", "propagate": False},
        "gunicorn.error": {"handlers": ["console", "rotating_file"], "level": "INFO", "propagate": False},
    },
}

APPEND_SLASH = False

LANGUAGES = [
    ('en', 'English'),
    ('pt-br', 'Português (Brasil)'),
    ('es', 'Español (España)'),
    ('fr', 'Français (France)'),
    ('de', 'Deutsch (Deutschland)'),
    ('it', 'Italiano (Italia)'),
]

LOCALE_PATHS = [
    BASE_DIR / "locale",
]
