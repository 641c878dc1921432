"""
Django-Sitemap-Query Field Utilities

Folds the fields and relations referenced by every language pattern of a
content type into the lists a page query needs.

Features:
- Deduplicated top-level field lists (with locale/updatedAt metadata)
- Relation -> fields mapping for populate instructions
- Model introspection for the fields a pattern may reference
"""

import logging

from django.utils.datastructures import OrderedSet

from django_sitemap_query.patterns import fields_from_pattern, relations_from_pattern

logger = logging.getLogger("django_sitemap_query")

LOCALE_FIELD = "locale"
UPDATED_AT_FIELD = "updatedAt"


def _known_relations(config, relations=None):
    known = set(relations or ())
    for pattern in config.patterns:
        known.update(relations_from_pattern(pattern))
    return known


def fields_from_config(config, top_level=False, is_localized=False, relation=None, relations=None):
    """
    Get the fields referenced by all language patterns of a content type.

    Args:
        config: ContentTypeConfig (or None)
        top_level: Only include fields of the record itself; also appends
            'locale' (if is_localized) and 'updatedAt'
        is_localized: Whether the content type is localized
        relation: Only include the fields of this relation
        relations: Optional names known to be relations of the content type

    Returns:
        List of field names without duplicates, in first-seen order

    Raises:
        PatternSyntaxError: If any language pattern is malformed

    Examples:
        >>> fields_from_config(config, top_level=True, is_localized=True)
        ['title', 'titre', 'locale', 'updatedAt']
        >>> fields_from_config(config, relation="category")
        ['name']
    """
    fields = OrderedSet()

    if config is not None:
        known = _known_relations(config, relations)
        for pattern in config.patterns:
            for name in fields_from_pattern(pattern, top_level, relation, known):
                fields.add(name)

    if top_level:
        if is_localized:
            fields.add(LOCALE_FIELD)
        fields.add(UPDATED_AT_FIELD)

    return list(fields)


def relations_from_config(config, relations=None):
    """
    Get the relations referenced by all language patterns of a content type.

    Each relation lists the fields needed from it across every language,
    even if only one language references it.

    Args:
        config: ContentTypeConfig (or None)
        relations: Optional names known to be relations of the content type

    Returns:
        Dict of relation name -> {'fields': [...]}

    Example:
        >>> relations_from_config(config)
        {'category': {'fields': ['name']}}
    """
    populate = {}

    if config is None:
        return populate

    for pattern in config.patterns:
        for relation in relations_from_pattern(pattern):
            if relation not in populate:
                populate[relation] = {
                    "fields": fields_from_config(config, relation=relation, relations=relations),
                }

    logger.debug(f"Relations derived from patterns: {populate}")
    return populate


def get_model_fields(model):
    """
    Get list of concrete field names for a model.

    Only returns fields with database columns (excludes reverse relations,
    many-to-many through tables, etc.).

    Example:
        >>> get_model_fields(Article)
        ['id', 'title', 'slug', 'category', 'published_at', ...]
    """
    fields = []
    for field in model._meta.get_fields():
        if getattr(field, "column", None):
            fields.append(field.name)
    return fields


def get_model_relations(model):
    """
    Get dict of relation_name -> related_model for a model.

    Includes forward relations (ForeignKey, OneToOneField) and
    many-to-many fields declared on the model.

    Example:
        >>> get_model_relations(Article)
        {'category': <class 'Category'>, 'tags': <class 'Tag'>}
    """
    relations = {}
    for field in model._meta.get_fields():
        if getattr(field, "related_model", None) and not getattr(field, "auto_created", False):
            relations[field.name] = field.related_model
    return relations


def allowed_pattern_fields(model):
    """
    Get the field paths a pattern for this model may reference.

    Concrete non-relation fields of the model, plus 'relation.field' for
    every concrete field of each related model.

    Example:
        >>> allowed_pattern_fields(Article)
        ['id', 'title', 'slug', 'category.id', 'category.name', ...]
    """
    relations = get_model_relations(model)
    allowed = [name for name in get_model_fields(model) if name not in relations]

    for relation, related_model in relations.items():
        allowed.extend(f"{relation}.{name}" for name in get_model_fields(related_model))

    return allowed
