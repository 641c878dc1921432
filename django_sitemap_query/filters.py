"""
Django-Sitemap-Query Filter Utilities

Builds the visibility filters of a page query and compiles filter
specifications into Django Q objects.

Filter specifications use dot notation with an optional operator suffix:
- Simple equality: {"sitemap_exclude": False}
- Operators: {"published_at.isnull": False}
- Alternatives: {"or": [{...}, {...}]}
"""

from django.db.models import Q

from django_sitemap_query.conf import sitemap_settings

# Django ORM lookups accepted as the last segment of a filter key
OPERATORS = {
    "lt",
    "lte",
    "gt",
    "gte",
    "exact",
    "iexact",
    "in",
    "isnull",
    "contains",
    "icontains",
    "startswith",
    "endswith",
}


def parse_filter_key(key):
    """
    Parse a filter key into (field_path, operator).

    Examples:
        >>> parse_filter_key("sitemap_exclude")
        ('sitemap_exclude', None)
        >>> parse_filter_key("published_at.isnull")
        ('published_at', 'isnull')
        >>> parse_filter_key("category.slug.in")
        ('category__slug', 'in')
    """
    parts = key.split(".")

    if len(parts) > 1 and parts[-1] in OPERATORS:
        return "__".join(parts[:-1]), parts[-1]

    return "__".join(parts), None


def _lookup(key, value):
    field_path, operator = parse_filter_key(key)
    if operator:
        return Q(**{f"{field_path}__{operator}": value})
    return Q(**{field_path: value})


def build_q_object(filters):
    """
    Build Django Q object from a filter specification.

    Args:
        filters: Dict of filter specifications

    Returns:
        Django Q object (all top-level keys combined with AND, the
        conditions listed under "or" combined with OR)

    Examples:
        >>> build_q_object({"id": 42})
        <Q: (AND: ('id', 42))>
        >>> build_q_object({"or": [{"sitemap_exclude.isnull": True}, {"sitemap_exclude": False}]})
        <Q: (OR: ('sitemap_exclude__isnull', True), ('sitemap_exclude', False))>
    """
    if not filters:
        return Q()

    result = Q()

    for key, value in filters.items():
        if key == "or":
            items = value if isinstance(value, list) else [{k: v} for k, v in value.items()]
            sub_q = Q()
            for item in items:
                sub_q |= build_q_object(item)
            result &= sub_q
        else:
            result &= _lookup(key, value)

    return result


def build_page_filters(meta, exclude_drafts=None, page_id=None):
    """
    Build the visibility filter for the pages of a content type.

    Pages are kept when:
    - the exclusion flag is unset or False (if the type has the flag)
    - the id equals page_id (if given)
    - the page is published (if drafts are excluded and the type is draft-aware)

    Args:
        meta: ContentTypeMeta of the content type
        exclude_drafts: Whether drafts should be left out (defaults to setting)
        page_id: Optional identifier to narrow the query to one page

    Returns:
        Filter specification dict

    Example:
        >>> build_page_filters(ContentTypeMeta(), page_id=42)
        {'or': [{'sitemap_exclude.isnull': True}, {'sitemap_exclude': False}], 'id': 42}
    """
    if exclude_drafts is None:
        exclude_drafts = sitemap_settings.EXCLUDE_DRAFTS

    filters = {}

    if meta.has_exclude_field:
        exclude_field = sitemap_settings.EXCLUDE_FIELD
        filters["or"] = [
            {f"{exclude_field}.isnull": True},
            {exclude_field: False},
        ]

    if page_id is not None:
        filters[sitemap_settings.ID_FIELD] = page_id

    if exclude_drafts and meta.draft_and_publish:
        filters[f"{sitemap_settings.PUBLISHED_FIELD}.isnull"] = False

    return filters
