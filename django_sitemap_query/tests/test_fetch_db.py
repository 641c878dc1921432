"""
Tests for fetching pages against real models in the in-memory database.

Tables are created with the schema editor since the test settings run
no migrations.
"""

import pytest
from django.db import connection, models
from django.utils import timezone

from django_sitemap_query.config import ContentTypeConfig
from django_sitemap_query.models import SitemapCache


class PageCategory(models.Model):
    name = models.CharField(max_length=100)

    class Meta:
        app_label = "django_sitemap_query"


class PageArticle(models.Model):
    slug = models.SlugField()
    category = models.ForeignKey(PageCategory, null=True, on_delete=models.SET_NULL)
    sitemap_exclude = models.BooleanField(null=True)
    published_at = models.DateTimeField(null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "django_sitemap_query"


ARTICLE_CONFIG = ContentTypeConfig.from_dict({"languages": {"en": {"pattern": "/blog/[category.name]/[slug]"}}})


@pytest.fixture(scope="module", autouse=True)
def tables():
    with connection.schema_editor() as editor:
        editor.create_model(PageCategory)
        editor.create_model(PageArticle)
        editor.create_model(SitemapCache)
    yield
    with connection.schema_editor() as editor:
        editor.delete_model(SitemapCache)
        editor.delete_model(PageArticle)
        editor.delete_model(PageCategory)


@pytest.fixture
def articles():
    news = PageCategory.objects.create(name="news")
    now = timezone.now()
    rows = {
        "visible": PageArticle.objects.create(slug="visible", category=news, sitemap_exclude=False, published_at=now),
        "hidden": PageArticle.objects.create(slug="hidden", category=news, sitemap_exclude=True, published_at=now),
        "unflagged": PageArticle.objects.create(slug="unflagged", category=news, sitemap_exclude=None, published_at=now),
        "draft": PageArticle.objects.create(slug="draft", category=news, sitemap_exclude=False, published_at=None),
        "uncategorized": PageArticle.objects.create(slug="uncategorized", category=None, published_at=now),
    }
    yield rows
    PageArticle.objects.all().delete()
    PageCategory.objects.all().delete()


class TestFetchArticles:
    """SitemapQuery.fetch against a model with exclusion, draft and relation fields."""

    def test_excluded_and_draft_rows_filtered(self, articles):
        from django_sitemap_query.query import SitemapQuery

        pages = SitemapQuery(PageArticle, config=ARTICLE_CONFIG).fetch()

        assert [page["slug"] for page in pages] == ["visible", "unflagged", "uncategorized"]

    def test_records_carry_relation_fields(self, articles):
        from django_sitemap_query.patterns import resolve_pattern
        from django_sitemap_query.query import SitemapQuery

        pages = SitemapQuery(PageArticle, config=ARTICLE_CONFIG).fetch()
        visible, _, uncategorized = pages

        assert visible["category"] == {"name": "news"}
        assert visible["updatedAt"] == articles["visible"].updated_at.isoformat()
        assert visible["localizations"] is None
        assert uncategorized["category"] is None
        assert resolve_pattern("/blog/[category.name]/[slug]", visible) == "/blog/news/visible"

    def test_page_id_narrows_results(self, articles):
        from django_sitemap_query.query import SitemapQuery

        query = SitemapQuery(PageArticle, config=ARTICLE_CONFIG)

        assert [p["slug"] for p in query.fetch(page_id=articles["visible"].pk)] == ["visible"]
        assert query.fetch(page_id=articles["hidden"].pk) == []
        assert query.fetch(page_id=articles["draft"].pk) == []

    def test_drafts_kept_when_option_disabled(self, articles):
        from django_sitemap_query.query import SitemapQuery

        config = ContentTypeConfig.from_dict(
            {
                "languages": {"en": {"pattern": "/blog/[category.name]/[slug]"}},
                "options": {"exclude_drafts": False},
            }
        )

        pages = SitemapQuery(PageArticle, config=config).fetch()

        assert "draft" in [page["slug"] for page in pages]
        assert "hidden" not in [page["slug"] for page in pages]

    def test_pages_larger_than_page_size(self, articles):
        from django_sitemap_query.query import get_pages

        pages = get_pages(PageArticle, config=ARTICLE_CONFIG)

        assert len(pages) == 3


class TestFetchWithoutExcludeField:
    """A model without the exclusion field is fetched without that filter."""

    def test_fetch_model_without_exclude_field(self):
        from django_sitemap_query.query import SitemapQuery

        SitemapCache.objects.create(name="default", sitemap_json={})
        SitemapCache.objects.create(name="news", sitemap_json={})
        try:
            config = ContentTypeConfig.from_dict({"languages": {"en": {"pattern": "/c/[name]"}}})
            query = SitemapQuery(SitemapCache, config=config)

            assert "or" not in query.build()["filters"]
            assert [page["name"] for page in query.fetch()] == ["default", "news"]
        finally:
            SitemapCache.objects.all().delete()
