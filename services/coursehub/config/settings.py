"""Django settings for Course Hub.

Key idea:
- Learners self-register and sign in with Django auth (username mapped to a contact address).
- An administrator activates accounts; activated learners read Markdown course pages.
- Operator credentials live in a local credentials file, never in served code.
"""

from pathlib import Path
import environ

BASE_DIR = Path(__file__).resolve().parent.parent
env = environ.Env(
    DJANGO_DEBUG=(bool, False),
)

# Credentials file (storage admin key etc.). Missing file is fine for the web process.
CREDENTIALS_FILE = Path(env("COURSEHUB_CREDENTIALS_FILE", default=str(BASE_DIR / ".env.local")))
if CREDENTIALS_FILE.exists():
    environ.Env.read_env(str(CREDENTIALS_FILE))

DEBUG = env.bool("DJANGO_DEBUG", default=False)
SECRET_KEY = env("DJANGO_SECRET_KEY", default="dev-only-change-me")
ALLOWED_HOSTS = [h.strip() for h in env("DJANGO_ALLOWED_HOSTS", default="*").split(",") if h.strip()]

CSRF_TRUSTED_ORIGINS = []
_origins = env("CSRF_TRUSTED_ORIGINS", default="")
if _origins:
    CSRF_TRUSTED_ORIGINS = [o.strip() for o in _origins.split(",") if o.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "courses",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # AccessGateMiddleware relies on sessions + request.user.
    "courses.middleware.AccessGateMiddleware",
]

ROOT_URLCONF = "config.urls"

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
                "config.context_processors.product",
                "config.context_processors.navigation",
            ]
        },
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": env.db(default=f"sqlite:///{BASE_DIR/'db.sqlite3'}")
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STATICFILES_DIRS = [BASE_DIR / "static"]
MEDIA_URL = env("COURSEHUB_MEDIA_URL", default="/media/")
MEDIA_ROOT = Path(env("COURSEHUB_MEDIA_ROOT", default=str(BASE_DIR / "media")))
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LOGIN_URL = "/login"

# When behind a reverse proxy, Django should respect forwarded proto for secure cookies.
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SECURE = not DEBUG

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "courses": {
            "handlers": ["console"],
            "level": env("COURSEHUB_LOG_LEVEL", default="INFO").upper(),
            "propagate": False,
        },
    },
}

# --- Course Hub --------------------------------------------------------------

COURSEHUB_PRODUCT_NAME = env("COURSEHUB_PRODUCT_NAME", default="Course Hub")

# Usernames become `<username>@<domain>` because the identity layer wants an email-shaped id.
COURSEHUB_CONTACT_DOMAIN = env("COURSEHUB_CONTACT_DOMAIN", default="gzdlab.com")
COURSEHUB_MIN_USERNAME_LENGTH = env.int("COURSEHUB_MIN_USERNAME_LENGTH", default=3)
COURSEHUB_MIN_SECRET_LENGTH = env.int("COURSEHUB_MIN_SECRET_LENGTH", default=6)

# Operator-only commands (import_accounts, sync_course_pages) refuse to run without it.
COURSEHUB_SERVICE_ROLE_KEY = env("COURSEHUB_SERVICE_ROLE_KEY", default="")
COURSEHUB_STORAGE_BUCKET = env("COURSEHUB_STORAGE_BUCKET", default="course-assets")
COURSEHUB_CONTENT_ROOT = Path(env("COURSEHUB_CONTENT_ROOT", default=str(BASE_DIR / "notebook")))
COURSEHUB_ACCOUNTS_FILE = Path(env("COURSEHUB_ACCOUNTS_FILE", default=str(BASE_DIR / "account.txt")))
COURSEHUB_IMPORT_DELAY_SECONDS = env.float("COURSEHUB_IMPORT_DELAY_SECONDS", default=0.1)
