"""
Django settings for Cookbook tests.

Includes all apps needed to run the full Cookbook test suite.
"""

SECRET_KEY = "test-secret-key-for-cookbook-tests"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "simple_history",
    "rest_framework",
    "cookbook",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

ROOT_URLCONF = "cookbook.tests.test_api_urls"

USE_TZ = True
TIME_ZONE = "America/Sao_Paulo"

REST_FRAMEWORK = {
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
}

# SQLite has no full-text engine: the vendor table maps it to substring matching
COOKBOOK = {
    "DEFAULT_LIMIT": None,
}
