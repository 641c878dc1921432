"""Stored sitemap documents and sitemap caches."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Sitemap(models.Model):
    """A generated sitemap document, split into numbered parts by delta."""

    name = models.CharField(max_length=255, verbose_name=_("Name"))
    delta = models.PositiveIntegerField(default=1, verbose_name=_("Delta"))
    sitemap_string = models.TextField(verbose_name=_("Sitemap"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Sitemap")
        verbose_name_plural = _("Sitemaps")
        ordering = ["name", "delta"]
        constraints = [
            models.UniqueConstraint(fields=["name", "delta"], name="unique_sitemap_name_delta"),
        ]

    def __str__(self):
        return f"{self.name} ({self.delta})"


class SitemapCache(models.Model):
    """Cached sitemap entries used to regenerate a sitemap incrementally."""

    name = models.CharField(max_length=255, unique=True, verbose_name=_("Name"))
    sitemap_json = models.JSONField(default=dict, verbose_name=_("Sitemap JSON"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Sitemap cache")
        verbose_name_plural = _("Sitemap caches")

    def __str__(self):
        return self.name
