"""
Django-Sitemap-Query Settings

Configuration is read from Django settings under the DJANGO_SITEMAP_QUERY key.
All settings have sensible defaults.

Example:
    # settings.py
    DJANGO_SITEMAP_QUERY = {
        'CONTENT_TYPES': {
            'article': {
                'languages': {
                    'en': {'pattern': '/articles/[slug]'},
                    'fr': {'pattern': '/fr/articles/[slug]/[category.slug]'},
                },
            },
        },
        'EXCLUDE_DRAFTS': True,
        'PAGE_SIZE': 100,
    }
"""

from django.conf import settings

DEFAULTS = {
    # Content types: name -> {'languages': {code: {'pattern': str}}, 'options': {...}}
    "CONTENT_TYPES": {},
    # Visibility
    "EXCLUDE_DRAFTS": True,
    "EXCLUDE_FIELD": "sitemap_exclude",
    "PUBLISHED_FIELD": "published_at",
    "ID_FIELD": "id",
    # Fetching
    "ORDER_BY": "id",
    "PAGE_SIZE": 100,
}


class SitemapSettings:
    """
    A settings object that allows django-sitemap-query settings to be accessed
    as properties. For example:

        from django_sitemap_query.conf import sitemap_settings
        print(sitemap_settings.PAGE_SIZE)

    Settings can be overridden in Django settings.py under the
    DJANGO_SITEMAP_QUERY key.
    """

    def __init__(self, defaults=None):
        self.defaults = defaults or DEFAULTS
        self._cached_attrs = set()

    @property
    def user_settings(self):
        if not hasattr(self, "_user_settings"):
            self._user_settings = getattr(settings, "DJANGO_SITEMAP_QUERY", {})
        return self._user_settings

    def __getattr__(self, attr):
        if attr not in self.defaults:
            raise AttributeError(f"Invalid django-sitemap-query setting: '{attr}'")

        try:
            val = self.user_settings[attr]
        except KeyError:
            val = self.defaults[attr]

        # Cache the result
        self._cached_attrs.add(attr)
        setattr(self, attr, val)
        return val

    def reload(self):
        """Reload settings (useful for testing)."""
        for attr in self._cached_attrs:
            try:
                delattr(self, attr)
            except AttributeError:
                pass
        self._cached_attrs.clear()
        if hasattr(self, "_user_settings"):
            delattr(self, "_user_settings")


sitemap_settings = SitemapSettings(DEFAULTS)
