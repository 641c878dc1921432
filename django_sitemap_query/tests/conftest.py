"""
Pytest configuration for django-sitemap-query tests.
"""

import os
import sys

# Add the package root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_configure():
    """Configure Django settings before tests run."""
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            SECRET_KEY="test-secret-key",
            DEBUG=True,
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django_sitemap_query",
            ],
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                }
            },
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            USE_TZ=True,
            DJANGO_SITEMAP_QUERY={
                "CONTENT_TYPES": {
                    "article": {
                        "languages": {
                            "en": {"pattern": "/posts/[title]"},
                            "fr": {"pattern": "/articles/[titre]/[category.name]"},
                        },
                    },
                },
                "EXCLUDE_DRAFTS": True,
                "PAGE_SIZE": 2,
            },
        )

    import django

    django.setup()
