"""
Django-Sitemap-Query Content Type Configuration

Typed configuration for the content types that feed the sitemap,
validated once when it is loaded.

Example:
    from django_sitemap_query.config import ContentTypeConfig

    config = ContentTypeConfig.from_dict({
        'languages': {
            'en': {'pattern': '/posts/[title]'},
            'fr': {'pattern': '/articles/[titre]/[category.name]'},
        },
        'options': {'exclude_drafts': False},
    })
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from django.core.exceptions import ImproperlyConfigured

from django_sitemap_query.conf import sitemap_settings


@dataclass(frozen=True)
class LanguageConfig:
    pattern: str


@dataclass(frozen=True)
class ContentTypeConfig:
    """URL patterns per language, plus options, for one content type."""

    languages: Mapping = field(default_factory=dict)
    options: Mapping = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data, name=None):
        """
        Build a validated config from its settings dict.

        Raises:
            ImproperlyConfigured: If 'languages' is missing or not a mapping,
                or a language entry has no usable 'pattern'
        """
        label = f"content type '{name}'" if name else "content type"

        if not isinstance(data, Mapping):
            raise ImproperlyConfigured(f"Invalid {label}: expected a mapping, got {type(data).__name__}")

        languages = data.get("languages")
        if not isinstance(languages, Mapping):
            raise ImproperlyConfigured(f"Invalid {label}: 'languages' must be a mapping of language code to pattern")

        parsed = {}
        for langcode, entry in languages.items():
            pattern = entry.get("pattern") if isinstance(entry, Mapping) else None
            if not isinstance(pattern, str) or not pattern:
                raise ImproperlyConfigured(f"Invalid {label}: language '{langcode}' has no pattern")
            parsed[langcode] = LanguageConfig(pattern=pattern)

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise ImproperlyConfigured(f"Invalid {label}: 'options' must be a mapping")

        return cls(languages=MappingProxyType(parsed), options=MappingProxyType(dict(options)))

    @property
    def patterns(self):
        """Patterns in language order."""
        return [language.pattern for language in self.languages.values()]

    @property
    def exclude_drafts(self):
        return self.options.get("exclude_drafts", sitemap_settings.EXCLUDE_DRAFTS)


@dataclass(frozen=True)
class ContentTypeMeta:
    """Runtime metadata of a content type, supplied by the data layer."""

    draft_and_publish: bool = False
    i18n_localized: bool = False
    relations: frozenset = frozenset()
    has_exclude_field: bool = True

    @classmethod
    def from_dict(cls, data):
        """Missing flags are treated as False; the exclusion field is assumed present."""
        data = data or {}
        return cls(
            draft_and_publish=bool(data.get("draftAndPublish", data.get("draft_and_publish", False))),
            i18n_localized=bool(data.get("i18nLocalized", data.get("i18n_localized", False))),
            relations=frozenset(data.get("relations", ())),
            has_exclude_field=bool(data.get("hasExcludeField", data.get("has_exclude_field", True))),
        )

    @classmethod
    def from_model(cls, model):
        """
        Derive metadata from a Django model.

        A model is draft-aware when it has the published field, localized
        when it has a 'locale' field. The exclusion filter only applies
        when it has the exclusion field.
        """
        from django_sitemap_query.fields import get_model_fields, get_model_relations

        fields = set(get_model_fields(model))
        return cls(
            draft_and_publish=sitemap_settings.PUBLISHED_FIELD in fields,
            i18n_localized="locale" in fields,
            relations=frozenset(get_model_relations(model)),
            has_exclude_field=sitemap_settings.EXCLUDE_FIELD in fields,
        )


def load_content_types(raw=None):
    """
    Build validated configs for every configured content type.

    Args:
        raw: Optional dict of name -> config dict (defaults to CONTENT_TYPES setting)

    Returns:
        Dict mapping content type name to ContentTypeConfig
    """
    if raw is None:
        raw = sitemap_settings.CONTENT_TYPES

    return {name: ContentTypeConfig.from_dict(data, name=name) for name, data in raw.items()}


def get_content_type(name, content_types=None):
    """Get the config of a content type, or None if it isn't configured."""
    if content_types is None:
        content_types = load_content_types()
    return content_types.get(name)
