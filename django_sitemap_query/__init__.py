"""
Django-Sitemap-Query: Page queries for sitemap generation

Derives, from the URL patterns configured per language for a content
type, which fields and relations must be fetched to build its sitemap
entries, and assembles the page query that fetches them.

Example:
    from django_sitemap_query import ContentTypeConfig, build_page_query

    config = ContentTypeConfig.from_dict({
        'languages': {
            'en': {'pattern': '/posts/[title]'},
            'fr': {'pattern': '/articles/[titre]/[category.name]'},
        },
    })
    fetch_spec = build_page_query(config, {'i18nLocalized': True})
"""

__version__ = "26.1.0"
__author__ = "Nehemiah Jacob"

# Patterns
from django_sitemap_query.patterns import (
    PatternSyntaxError,
    PathToken,
    parse_pattern,
    fields_from_pattern,
    relations_from_pattern,
    resolve_pattern,
    validate_pattern,
)

# Configuration
from django_sitemap_query.config import (
    ContentTypeConfig,
    ContentTypeMeta,
    LanguageConfig,
    load_content_types,
    get_content_type,
)

# Field utilities
from django_sitemap_query.fields import (
    fields_from_config,
    relations_from_config,
    allowed_pattern_fields,
)

# Filter utilities
from django_sitemap_query.filters import (
    build_page_filters,
    build_q_object,
    parse_filter_key,
)

# Page queries
from django_sitemap_query.query import SitemapQuery, build_page_query, fetch_pages, get_pages

# Response utilities
from django_sitemap_query.response import build_page_record

# Persistence
from django_sitemap_query.store import ModelCollection, SitemapStore

# Settings
from django_sitemap_query.conf import sitemap_settings

__all__ = [
    # Version
    "__version__",
    # Patterns
    "PatternSyntaxError",
    "PathToken",
    "parse_pattern",
    "fields_from_pattern",
    "relations_from_pattern",
    "resolve_pattern",
    "validate_pattern",
    # Configuration
    "ContentTypeConfig",
    "ContentTypeMeta",
    "LanguageConfig",
    "load_content_types",
    "get_content_type",
    # Fields
    "fields_from_config",
    "relations_from_config",
    "allowed_pattern_fields",
    # Filters
    "build_page_filters",
    "build_q_object",
    "parse_filter_key",
    # Query
    "SitemapQuery",
    "build_page_query",
    "fetch_pages",
    "get_pages",
    # Response
    "build_page_record",
    # Store
    "ModelCollection",
    "SitemapStore",
    # Settings
    "sitemap_settings",
]
