from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

TMDB_API_KEY = "test-tmdb-key"

PLAYBACK = {
    **PLAYBACK,  # noqa: F405
    "SEEK_RETRY_DELAYS": (0.01, 0.02),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"]},
}
