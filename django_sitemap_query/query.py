"""
Django-Sitemap-Query Page Query Engine

Ties pattern extraction, field aggregation and visibility filters
together into the fetch specification of a content type's pages, and
runs that specification against a Django model.

Provides:
- build_page_query for the declarative fetch specification
- SitemapQuery class for OOP-style usage
- get_pages function for procedural usage
"""

import logging
from collections.abc import Mapping

from django.apps import apps

from django_sitemap_query.conf import sitemap_settings
from django_sitemap_query.config import ContentTypeMeta, get_content_type
from django_sitemap_query.fields import fields_from_config, get_model_relations, relations_from_config
from django_sitemap_query.filters import build_page_filters, build_q_object
from django_sitemap_query.response import build_page_record

logger = logging.getLogger("django_sitemap_query")

LOCALIZATIONS = "localizations"


def _as_meta(meta):
    if isinstance(meta, ContentTypeMeta):
        return meta
    if meta is None or isinstance(meta, Mapping):
        return ContentTypeMeta.from_dict(meta)
    raise TypeError(f"Expected ContentTypeMeta or mapping, got {type(meta).__name__}")


def build_page_query(config, meta=None, page_id=None):
    """
    Build the fetch specification for the pages of a content type.

    Args:
        config: ContentTypeConfig of the content type (or None)
        meta: ContentTypeMeta, or a dict with 'draftAndPublish' and
            'i18nLocalized' flags (missing flags count as False)
        page_id: Optional identifier to narrow the query to one page

    Returns:
        Dict with 'fields', 'populate', 'filters', 'locale' and 'orderBy'

    Raises:
        PatternSyntaxError: If a pattern of the content type is malformed

    Example:
        >>> build_page_query(config, {"i18nLocalized": True}, page_id=42)
        {
            'filters': {'or': [...], 'id': 42},
            'locale': 'all',
            'fields': ['title', 'titre', 'locale', 'updatedAt'],
            'populate': {
                'localizations': {'fields': [...], 'populate': {'category': {'fields': ['name']}}},
                'category': {'fields': ['name']},
            },
            'orderBy': 'id',
        }
    """
    meta = _as_meta(meta)
    is_localized = meta.i18n_localized

    fields = fields_from_config(config, top_level=True, is_localized=is_localized, relations=meta.relations)
    relations = relations_from_config(config, relations=meta.relations)

    exclude_drafts = config.exclude_drafts if config is not None else None
    filters = build_page_filters(meta, exclude_drafts=exclude_drafts, page_id=page_id)

    logger.debug(f"Page query fields: {fields}, relations: {list(relations)}")

    return {
        "filters": filters,
        "locale": "all",
        "fields": fields,
        "populate": {
            LOCALIZATIONS: {
                "fields": fields,
                "populate": relations,
            },
            **relations,
        },
        "orderBy": sitemap_settings.ORDER_BY,
    }


def fetch_pages(model, fetch_spec, page_size=None):
    """
    Run a fetch specification against a model, without a result limit.

    Pages are read in batches of page_size until a short batch is
    returned.

    Args:
        model: Django model class
        fetch_spec: Dict from build_page_query
        page_size: Optional batch size (defaults to PAGE_SIZE setting)

    Returns:
        Flat list of page record dicts
    """
    if page_size is None:
        page_size = sitemap_settings.PAGE_SIZE

    queryset = model.objects.filter(build_q_object(fetch_spec.get("filters")))

    model_relations = get_model_relations(model)
    populate = fetch_spec.get("populate", {})
    prefetch = [name for name in populate if name in model_relations]
    if prefetch:
        queryset = queryset.prefetch_related(*prefetch)

    order_by = fetch_spec.get("orderBy")
    if order_by:
        queryset = queryset.order_by(order_by.replace(".", "__"))

    fields = fetch_spec.get("fields", [])
    pages = []
    offset = 0

    while True:
        batch = list(queryset[offset : offset + page_size])
        pages.extend(build_page_record(obj, fields, populate) for obj in batch)
        logger.debug(f"Fetched {len(batch)} pages of {model.__name__} at offset {offset}")

        if len(batch) < page_size:
            break
        offset += page_size

    return pages


def get_model_by_name(model_name):
    """
    Get Django model class by name (case-insensitive).

    Searches all installed apps for a matching model.

    Returns:
        Model class or None if not found
    """
    for app_config in apps.get_app_configs():
        for model in app_config.get_models():
            if model.__name__.lower() == model_name.lower():
                return model
    return None


class SitemapQuery:
    """
    Page query for one content type.

    Example:
        # Config from settings.DJANGO_SITEMAP_QUERY['CONTENT_TYPES']['article']
        pages = SitemapQuery(Article).fetch()

        # With model name and explicit config
        query = SitemapQuery('article')
        query.set_config(ContentTypeConfig.from_dict({...}))
        fetch_spec = query.build(page_id=42)
    """

    def __init__(self, model, config=None, meta=None):
        """
        Initialize a SitemapQuery.

        Args:
            model: Django model class or model name string
            config: Optional ContentTypeConfig (looked up by model name if not set)
            meta: Optional ContentTypeMeta (derived from the model if not set)
        """
        if isinstance(model, str):
            self.name = model.lower()
            self.model = get_model_by_name(model)
        else:
            self.model = model
            self.name = model.__name__.lower()

        self.config = config
        self.meta = meta

    def set_config(self, config):
        """Set the content type configuration."""
        self.config = config
        return self

    def set_meta(self, meta):
        """Set the content type metadata."""
        self.meta = meta
        return self

    def get_config(self):
        if self.config is None:
            self.config = get_content_type(self.name)
        return self.config

    def get_meta(self):
        if self.meta is not None:
            return _as_meta(self.meta)
        if self.model is not None:
            return ContentTypeMeta.from_model(self.model)
        return ContentTypeMeta()

    def build(self, page_id=None):
        """Build the fetch specification."""
        return build_page_query(self.get_config(), self.get_meta(), page_id=page_id)

    def fetch(self, page_id=None, page_size=None):
        """
        Fetch the pages of the content type.

        Raises:
            LookupError: If the model could not be found
            PatternSyntaxError: If a pattern of the content type is malformed
        """
        if self.model is None:
            raise LookupError(f"Model '{self.name}' not found")

        return fetch_pages(self.model, self.build(page_id=page_id), page_size=page_size)


def get_pages(model, page_id=None, config=None, meta=None):
    """
    Fetch the pages of a content type.

    Convenience function that wraps SitemapQuery.

    Example:
        pages = get_pages(Article)
        page = get_pages(Article, page_id=42)
    """
    return SitemapQuery(model, config=config, meta=meta).fetch(page_id=page_id)
