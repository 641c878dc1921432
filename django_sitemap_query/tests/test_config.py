"""
Tests for django_sitemap_query.config and django_sitemap_query.conf modules.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from django.core.exceptions import ImproperlyConfigured


class TestContentTypeConfig:
    """Tests for ContentTypeConfig.from_dict."""

    def test_valid_config(self):
        from django_sitemap_query.config import ContentTypeConfig, LanguageConfig

        config = ContentTypeConfig.from_dict(
            {
                "languages": {
                    "en": {"pattern": "/posts/[title]"},
                    "fr": {"pattern": "/articles/[titre]"},
                },
                "options": {"exclude_drafts": False},
            }
        )

        assert config.languages["en"] == LanguageConfig(pattern="/posts/[title]")
        assert config.patterns == ["/posts/[title]", "/articles/[titre]"]
        assert config.exclude_drafts is False

    def test_missing_languages(self):
        from django_sitemap_query.config import ContentTypeConfig

        with pytest.raises(ImproperlyConfigured, match="languages"):
            ContentTypeConfig.from_dict({"options": {}})

    def test_languages_not_a_mapping(self):
        from django_sitemap_query.config import ContentTypeConfig

        with pytest.raises(ImproperlyConfigured):
            ContentTypeConfig.from_dict({"languages": ["/posts/[title]"]})

    def test_language_without_pattern(self):
        from django_sitemap_query.config import ContentTypeConfig

        with pytest.raises(ImproperlyConfigured, match="'de'"):
            ContentTypeConfig.from_dict({"languages": {"de": {}}}, name="article")

    def test_empty_pattern(self):
        from django_sitemap_query.config import ContentTypeConfig

        with pytest.raises(ImproperlyConfigured):
            ContentTypeConfig.from_dict({"languages": {"en": {"pattern": ""}}})

    def test_not_a_mapping(self):
        from django_sitemap_query.config import ContentTypeConfig

        with pytest.raises(ImproperlyConfigured, match="article"):
            ContentTypeConfig.from_dict("/posts/[title]", name="article")

    def test_immutable(self):
        from django_sitemap_query.config import ContentTypeConfig

        config = ContentTypeConfig.from_dict({"languages": {"en": {"pattern": "/[slug]"}}})

        with pytest.raises(TypeError):
            config.languages["fr"] = None

    def test_exclude_drafts_defaults_to_setting(self):
        from django_sitemap_query.config import ContentTypeConfig

        config = ContentTypeConfig.from_dict({"languages": {"en": {"pattern": "/[slug]"}}})

        with patch("django_sitemap_query.config.sitemap_settings") as mock_settings:
            mock_settings.EXCLUDE_DRAFTS = False
            assert config.exclude_drafts is False

            mock_settings.EXCLUDE_DRAFTS = True
            assert config.exclude_drafts is True


class TestContentTypeMeta:
    """Tests for ContentTypeMeta."""

    def test_from_dict(self):
        from django_sitemap_query.config import ContentTypeMeta

        meta = ContentTypeMeta.from_dict({"draftAndPublish": True, "i18nLocalized": True})
        assert meta.draft_and_publish is True
        assert meta.i18n_localized is True

    def test_missing_flags_are_false(self):
        from django_sitemap_query.config import ContentTypeMeta

        assert ContentTypeMeta.from_dict({}) == ContentTypeMeta()
        assert ContentTypeMeta.from_dict(None) == ContentTypeMeta()

    def test_relations(self):
        from django_sitemap_query.config import ContentTypeMeta

        meta = ContentTypeMeta.from_dict({"relations": ["category", "author"]})
        assert meta.relations == frozenset({"category", "author"})

    def test_from_model(self):
        from django_sitemap_query.config import ContentTypeMeta

        category = MagicMock()
        model = MagicMock()
        model._meta.get_fields.return_value = [
            SimpleNamespace(name="id", column="id", related_model=None, auto_created=True),
            SimpleNamespace(name="locale", column="locale", related_model=None, auto_created=False),
            SimpleNamespace(name="published_at", column="published_at", related_model=None, auto_created=False),
            SimpleNamespace(name="category", column="category_id", related_model=category, auto_created=False),
        ]

        meta = ContentTypeMeta.from_model(model)

        assert meta.draft_and_publish is True
        assert meta.i18n_localized is True
        assert meta.relations == frozenset({"category"})
        assert meta.has_exclude_field is False

    def test_from_model_plain(self):
        from django_sitemap_query.config import ContentTypeMeta

        model = MagicMock()
        model._meta.get_fields.return_value = [
            SimpleNamespace(name="id", column="id", related_model=None, auto_created=True),
            SimpleNamespace(name="slug", column="slug", related_model=None, auto_created=False),
        ]

        assert ContentTypeMeta.from_model(model) == ContentTypeMeta(has_exclude_field=False)

    def test_from_model_with_exclude_field(self):
        from django_sitemap_query.config import ContentTypeMeta

        model = MagicMock()
        model._meta.get_fields.return_value = [
            SimpleNamespace(name="sitemap_exclude", column="sitemap_exclude", related_model=None, auto_created=False),
        ]

        assert ContentTypeMeta.from_model(model).has_exclude_field is True

    def test_exclude_field_flag_from_dict(self):
        from django_sitemap_query.config import ContentTypeMeta

        assert ContentTypeMeta.from_dict({}).has_exclude_field is True
        assert ContentTypeMeta.from_dict({"hasExcludeField": False}).has_exclude_field is False


class TestLoadContentTypes:
    """Tests for load_content_types and get_content_type."""

    def test_loads_from_settings(self):
        from django_sitemap_query.config import load_content_types

        content_types = load_content_types()

        assert list(content_types) == ["article"]
        assert content_types["article"].patterns == ["/posts/[title]", "/articles/[titre]/[category.name]"]

    def test_explicit_raw(self):
        from django_sitemap_query.config import load_content_types

        content_types = load_content_types({"page": {"languages": {"en": {"pattern": "/[slug]"}}}})
        assert content_types["page"].patterns == ["/[slug]"]

    def test_invalid_entry_raises_at_load(self):
        from django_sitemap_query.config import load_content_types

        with pytest.raises(ImproperlyConfigured, match="page"):
            load_content_types({"page": {"languages": {"en": {}}}})

    def test_get_content_type_absent(self):
        from django_sitemap_query.config import get_content_type

        assert get_content_type("missing") is None
        assert get_content_type("article") is not None


class TestSitemapSettings:
    """Tests for the settings object."""

    def test_user_setting(self):
        from django_sitemap_query.conf import sitemap_settings

        assert sitemap_settings.PAGE_SIZE == 2

    def test_default_setting(self):
        from django_sitemap_query.conf import sitemap_settings

        assert sitemap_settings.EXCLUDE_FIELD == "sitemap_exclude"
        assert sitemap_settings.ORDER_BY == "id"

    def test_invalid_setting(self):
        from django_sitemap_query.conf import sitemap_settings

        with pytest.raises(AttributeError):
            sitemap_settings.NOT_A_SETTING

    def test_reload(self):
        from django.test import override_settings

        from django_sitemap_query.conf import sitemap_settings

        with override_settings(DJANGO_SITEMAP_QUERY={"PAGE_SIZE": 500}):
            sitemap_settings.reload()
            assert sitemap_settings.PAGE_SIZE == 500

        sitemap_settings.reload()
        assert sitemap_settings.PAGE_SIZE == 2
