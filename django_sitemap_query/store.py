"""
Django-Sitemap-Query Sitemap Store

Persists generated sitemap documents and sitemap caches.

Creating a sitemap or cache replaces any existing row for the same key
(name + delta for sitemaps, name for caches): the old row is deleted,
then the new one inserted. The two steps are not atomic in the store,
so writes for one key are serialized with an asyncio.Lock; writes for
different keys run concurrently.

Usage:
    store = SitemapStore.from_models()
    await store.create_sitemap(xml, "default", 1)
    sitemap = await store.get_sitemap("default", 1)
"""

import asyncio
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger("django_sitemap_query")


class ModelCollection:
    """
    Collection interface over a Django model, using the async ORM.

    Rows are returned as dicts. Any object providing the same four
    coroutine methods can be given to SitemapStore instead.
    """

    def __init__(self, model):
        self.model = model

    async def find_many(self, filters, fields=None):
        queryset = self.model.objects.filter(**filters).order_by("pk")
        queryset = queryset.values(*fields) if fields else queryset.values()
        return [row async for row in queryset]

    async def create(self, data):
        obj = await self.model.objects.acreate(**data)
        return {"id": obj.pk, **data}

    async def update(self, pk, data):
        await self.model.objects.filter(pk=pk).aupdate(**data)
        return {"id": pk, **data}

    async def delete(self, pk):
        await self.model.objects.filter(pk=pk).adelete()


class SitemapStore:
    """
    Sitemap and sitemap cache persistence with replace semantics.

    Args:
        sitemaps: Collection of sitemap rows (name, delta, sitemap_string)
        caches: Collection of sitemap cache rows (name, sitemap_json)
    """

    def __init__(self, sitemaps, caches):
        self.sitemaps = sitemaps
        self.caches = caches
        self._locks = {}

    @classmethod
    def from_models(cls):
        """Build a store over the Sitemap and SitemapCache models."""
        from django_sitemap_query.models import Sitemap, SitemapCache

        return cls(ModelCollection(Sitemap), ModelCollection(SitemapCache))

    @asynccontextmanager
    async def _locked(self, *key):
        """
        Hold the write lock of one key.

        A lock lives in _locks only while some write holds or waits for it.
        """
        entry = self._locks.setdefault(key, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if not entry[1]:
                del self._locks[key]

    async def create_sitemap(self, sitemap_string, name, delta):
        """Store a sitemap document, replacing the one with the same name and delta."""
        async with self._locked("sitemap", name, delta):
            existing = await self.sitemaps.find_many({"name": name, "delta": delta}, fields=["id"])
            for row in existing:
                await self.sitemaps.delete(row["id"])

            record = await self.sitemaps.create(
                {
                    "sitemap_string": sitemap_string,
                    "name": name,
                    "delta": delta,
                }
            )

        logger.info(f"Stored sitemap '{name}' (delta {delta})")
        return record

    async def get_sitemap(self, name, delta):
        """Get a sitemap document, or None if there is none."""
        rows = await self.sitemaps.find_many({"name": name, "delta": delta})
        return rows[0] if rows else None

    async def delete_sitemap(self, name):
        """Delete every sitemap document with this name, whatever its delta."""
        rows = await self.sitemaps.find_many({"name": name}, fields=["id", "delta"])

        async def delete_row(row):
            async with self._locked("sitemap", name, row["delta"]):
                await self.sitemaps.delete(row["id"])

        await asyncio.gather(*(delete_row(row) for row in rows))

        if rows:
            logger.info(f"Deleted {len(rows)} sitemap(s) '{name}'")

    async def create_sitemap_cache(self, sitemap_json, name):
        """Store a sitemap cache, replacing the one with the same name."""
        async with self._locked("cache", name):
            existing = await self.caches.find_many({"name": name}, fields=["id"])
            for row in existing:
                await self.caches.delete(row["id"])

            record = await self.caches.create(
                {
                    "sitemap_json": sitemap_json,
                    "name": name,
                }
            )

        logger.info(f"Stored sitemap cache '{name}'")
        return record

    async def update_sitemap_cache(self, sitemap_json, name):
        """Update a sitemap cache in place. Returns None if there is no cache to update."""
        async with self._locked("cache", name):
            existing = await self.caches.find_many({"name": name}, fields=["id"])
            if not existing:
                return None

            record = await self.caches.update(
                existing[0]["id"],
                {
                    "sitemap_json": sitemap_json,
                    "name": name,
                },
            )

        logger.info(f"Updated sitemap cache '{name}'")
        return record

    async def get_sitemap_cache(self, name):
        """Get a sitemap cache, or None if there is none."""
        rows = await self.caches.find_many({"name": name})
        return rows[0] if rows else None
