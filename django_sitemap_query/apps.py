from django.apps import AppConfig


class SitemapQueryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_sitemap_query"
    verbose_name = "Sitemap Query"
