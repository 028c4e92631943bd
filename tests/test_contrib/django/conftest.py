"""Configuration pytest pour les tests Django.

FR: Configure Django avec SQLite in-memory pour les tests et remplace le
    stockage en mémoire par le backend Django ORM.
EN: Configures Django with in-memory SQLite for tests and swaps the
    in-memory storage for the Django ORM backend.
"""

import django
from django.conf import settings


def pytest_configure() -> None:
    """Configure Django pour les tests."""
    if not settings.configured:
        settings.configure(
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                },
            },
            INSTALLED_APPS=[
                "django.contrib.admin",
                "django.contrib.auth",
                "django.contrib.contenttypes",
                "django.contrib.messages",
                "django.contrib.sessions",
                "factures_b2c.contrib.django",
            ],
            MIDDLEWARE=[
                "django.contrib.sessions.middleware.SessionMiddleware",
                "django.contrib.auth.middleware.AuthenticationMiddleware",
                "django.contrib.messages.middleware.MessageMiddleware",
            ],
            TEMPLATES=[
                {
                    "BACKEND": "django.template.backends.django.DjangoTemplates",
                    "APP_DIRS": True,
                    "OPTIONS": {
                        "context_processors": [
                            "django.template.context_processors.request",
                            "django.contrib.auth.context_processors.auth",
                            "django.contrib.messages.context_processors.messages",
                        ],
                    },
                },
            ],
            ROOT_URLCONF="tests.test_contrib.django.urls",
            SECRET_KEY="factures-b2c-tests",
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            USE_TZ=True,
        )
        django.setup()


import pytest  # noqa: E402


@pytest.fixture
def storage(db):
    """Stockage Django sur la base de test."""
    from factures_b2c.contrib.django.storage import DjangoStorage

    return DjangoStorage()
