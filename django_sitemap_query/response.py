"""
Django-Sitemap-Query Page Records

Builds the flat page records handed to sitemap generation from model
instances, following the fields and populate instructions of a fetch
specification.
"""

import re

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def attribute_name(field_name):
    """
    Map a field name to a Python attribute name.

    Examples:
        >>> attribute_name("updatedAt")
        'updated_at'
        >>> attribute_name("slug")
        'slug'
    """
    return _CAMEL_RE.sub("_", field_name).lower()


def get_field_value(obj, field_path):
    """
    Get value from object following dot notation path.

    Each part is looked up as written first, then as its snake_case
    attribute name. Returns None if any part of the path is missing.

    Examples:
        >>> get_field_value(article, "slug")
        "hello-world"
        >>> get_field_value(article, "updatedAt")
        datetime(2024, 1, 1, ...)
        >>> get_field_value(article, "category.name")
        "News"
    """
    value = obj

    for part in field_path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part, value.get(attribute_name(part)))
        elif hasattr(value, part):
            value = getattr(value, part)
        else:
            value = getattr(value, attribute_name(part), None)

    return value


def serialize_value(value):
    """
    Serialize a value for a page record.

    - Date, DateTime -> ISO format string
    - UUID -> string
    - Model instance -> primary key string
    """
    if value is None:
        return None

    # DateTime/Date
    if hasattr(value, "isoformat"):
        return value.isoformat()

    # UUID
    if hasattr(value, "hex") and not isinstance(value, (int, float, str)):
        return str(value)

    # Related object not in fields list - just use pk
    if hasattr(value, "pk"):
        return str(value.pk)

    return value


def build_page_record(obj, fields, populate=None):
    """
    Build a page record dict from an object.

    Args:
        obj: Model instance
        fields: Field names to read from the object
        populate: Optional dict of relation -> {'fields': [...], 'populate': {...}}

    Returns:
        Dict with one key per field; relations as nested dicts, or lists of
        dicts for to-many relations

    Example:
        >>> build_page_record(article, ["slug"], {"category": {"fields": ["name"]}})
        {'slug': 'hello', 'category': {'name': 'News'}}
    """
    record = {}

    for name in fields:
        record[name] = serialize_value(get_field_value(obj, name))

    for relation, spec in (populate or {}).items():
        related = get_field_value(obj, relation)
        related_fields = spec.get("fields", [])
        related_populate = spec.get("populate")

        if related is None:
            record[relation] = None
        elif hasattr(related, "all") or isinstance(related, (list, tuple)):
            items = related.all() if hasattr(related, "all") else related
            record[relation] = [build_page_record(item, related_fields, related_populate) for item in items]
        else:
            record[relation] = build_page_record(related, related_fields, related_populate)

    return record
