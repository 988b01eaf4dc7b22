"""
Base Django settings for the form submission router.

Shared configuration for all environments.
"""

from pathlib import Path

from pydantic_settings import BaseSettings

from apps.core.logging import configure_logging


class Settings(BaseSettings):
    """Environment-based configuration using pydantic-settings."""

    SECRET_KEY: str = "django-insecure-change-me-in-production"
    DEBUG: bool = False
    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    # Postgres
    DB_NAME: str = "formrelay"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"

    # Logging
    LOG_JSON_FORMAT: bool = True
    LOG_LEVEL: str = "INFO"

    # Base URL used to build each connector's public ingestion URL
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # Public submission rate limiting (per connector)
    SUBMISSION_RATE_LIMIT_MAX_REQUESTS: int = 100
    SUBMISSION_RATE_LIMIT_WINDOW_SECONDS: int = 3600
    RATE_LIMIT_CLEANUP_THRESHOLD: int = 1000

    # Destination dispatch
    DISPATCH_MAX_ATTEMPTS: int = 4
    DISPATCH_BACKOFF_BASE_SECONDS: float = 1.0
    DISPATCH_ATTEMPT_TIMEOUT_SECONDS: float = 10.0
    DISPATCH_MAX_RETRY_AFTER_SECONDS: float = 10.0
    DISPATCH_HANDLER_TIMEOUT_SECONDS: float = 30.0
    DESTINATION_URL_RESOLVE_DNS: bool = True

    # Email (AWS SES)
    AWS_SES_REGION: str = "us-east-1"
    EMAIL_DEFAULT_FROM_NAME: str = "Form Connector"

    # SMS (AWS End User Messaging)
    AWS_SMS_REGION: str = "us-east-1"
    AWS_SMS_ORIGINATION_IDENTITY: str = ""

    # Google Sheets service account (JSON key file contents)
    GOOGLE_SERVICE_ACCOUNT_JSON: str = ""

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = settings.SECRET_KEY

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = settings.DEBUG

ALLOWED_HOSTS = [h.strip() for h in settings.ALLOWED_HOSTS.split(",") if h.strip()]

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "apps.core",
    "apps.connectors",
    "apps.submissions",
    "apps.destinations",
]

MIDDLEWARE = [
    "apps.core.middleware.RequestContextMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

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

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": settings.DB_NAME,
        "USER": settings.DB_USER,
        "PASSWORD": settings.DB_PASSWORD,
        "HOST": settings.DB_HOST,
        "PORT": settings.DB_PORT,
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Public submissions are JSON; anything larger than this is rejected before parsing
DATA_UPLOAD_MAX_MEMORY_SIZE = 2 * 1024 * 1024

# Submission pipeline
PUBLIC_BASE_URL = settings.PUBLIC_BASE_URL.rstrip("/")
SUBMISSION_RATE_LIMIT_MAX_REQUESTS = settings.SUBMISSION_RATE_LIMIT_MAX_REQUESTS
SUBMISSION_RATE_LIMIT_WINDOW_SECONDS = settings.SUBMISSION_RATE_LIMIT_WINDOW_SECONDS
RATE_LIMIT_CLEANUP_THRESHOLD = settings.RATE_LIMIT_CLEANUP_THRESHOLD
DISPATCH_MAX_ATTEMPTS = settings.DISPATCH_MAX_ATTEMPTS
DISPATCH_BACKOFF_BASE_SECONDS = settings.DISPATCH_BACKOFF_BASE_SECONDS
DISPATCH_ATTEMPT_TIMEOUT_SECONDS = settings.DISPATCH_ATTEMPT_TIMEOUT_SECONDS
DISPATCH_MAX_RETRY_AFTER_SECONDS = settings.DISPATCH_MAX_RETRY_AFTER_SECONDS
DISPATCH_HANDLER_TIMEOUT_SECONDS = settings.DISPATCH_HANDLER_TIMEOUT_SECONDS
DESTINATION_URL_RESOLVE_DNS = settings.DESTINATION_URL_RESOLVE_DNS

# Destination backends
AWS_SES_REGION = settings.AWS_SES_REGION
EMAIL_DEFAULT_FROM_NAME = settings.EMAIL_DEFAULT_FROM_NAME
AWS_SMS_REGION = settings.AWS_SMS_REGION
AWS_SMS_ORIGINATION_IDENTITY = settings.AWS_SMS_ORIGINATION_IDENTITY
GOOGLE_SERVICE_ACCOUNT_JSON = settings.GOOGLE_SERVICE_ACCOUNT_JSON

# Logging is configured through structlog; disable Django's dictConfig
LOGGING_CONFIG = None
configure_logging(json_format=settings.LOG_JSON_FORMAT, log_level=settings.LOG_LEVEL)
