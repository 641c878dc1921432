"""
Django-Sitemap-Query Pattern Utilities

Parses URL patterns and derives the data a pattern needs.

A pattern is a URL template in which bracketed tokens reference field
paths of a content record:

    /articles/[slug]/[category.name]

- ``[slug]`` is a top-level field of the record
- ``[category.name]`` is the field ``name`` of the relation ``category``

Features:
- Tokenize patterns into path tokens (with syntax errors surfaced)
- Extract top-level fields, relation names and per-relation fields
- Resolve a pattern against a page record into a URL path
- Validate a pattern against a list of allowed fields
"""

import logging
import re
from typing import NamedTuple

from django.utils.datastructures import OrderedSet

logger = logging.getLogger("django_sitemap_query")

TOKEN_OPEN = "["
TOKEN_CLOSE = "]"
SEGMENT_RE = re.compile(r"^[\w-]+$")
TOKEN_RE = re.compile(r"\[([^\[\]]+)\]")


class PatternSyntaxError(ValueError):
    """Raised when a pattern contains a malformed or incomplete field token."""

    def __init__(self, message, pattern=None, position=None):
        self.pattern = pattern
        self.position = position
        if pattern is not None and position is not None:
            message = f"{message} at position {position} in pattern '{pattern}'"
        elif pattern is not None:
            message = f"{message} in pattern '{pattern}'"
        super().__init__(message)


class PathToken(NamedTuple):
    """A bracketed field path, split on dots."""

    path: str
    segments: tuple

    @property
    def is_relation(self):
        return len(self.segments) > 1

    @property
    def relation(self):
        """Relation name for dotted paths, None for top-level fields."""
        return self.segments[0] if self.is_relation else None

    @property
    def field(self):
        """Field name: the whole path for top-level tokens, the remainder after the relation otherwise."""
        if self.is_relation:
            return ".".join(self.segments[1:])
        return self.segments[0]


def _make_token(pattern, start, end):
    path = pattern[start + 1 : end]
    if not path:
        raise PatternSyntaxError("Empty field token", pattern, start)

    segments = tuple(path.split("."))
    for segment in segments:
        if not SEGMENT_RE.match(segment):
            raise PatternSyntaxError(f"Invalid field path '{path}'", pattern, start)

    return PathToken(path, segments)


def parse_pattern(pattern):
    """
    Parse a pattern into its path tokens, left to right.

    Duplicates are kept; deduplication is up to the caller.

    Args:
        pattern: URL pattern string (e.g., "/blog/[category.slug]/[slug]")

    Returns:
        List of PathToken

    Raises:
        PatternSyntaxError: On nested, unmatched or empty brackets, or on
            paths with empty or invalid segments

    Examples:
        >>> [t.path for t in parse_pattern("/blog/[category.slug]/[slug]")]
        ['category.slug', 'slug']
        >>> parse_pattern("/static/page")
        []
    """
    if pattern is None:
        raise PatternSyntaxError("Pattern can not be None")

    tokens = []
    start = None

    for position, char in enumerate(pattern):
        if char == TOKEN_OPEN:
            if start is not None:
                raise PatternSyntaxError("Nested '[' in field token", pattern, position)
            start = position
        elif char == TOKEN_CLOSE:
            if start is None:
                raise PatternSyntaxError("Unmatched ']'", pattern, position)
            tokens.append(_make_token(pattern, start, position))
            start = None

    if start is not None:
        raise PatternSyntaxError("Unterminated field token", pattern, start)

    return tokens


def relations_from_pattern(pattern):
    """
    Get the relation names referenced by a pattern.

    Examples:
        >>> list(relations_from_pattern("/[category.name]/[author.slug]/[category.id]"))
        ['category', 'author']
        >>> list(relations_from_pattern("/[title]"))
        []
    """
    relations = OrderedSet()
    for token in parse_pattern(pattern):
        if token.is_relation:
            relations.add(token.relation)
    return relations


def fields_from_pattern(pattern, top_level=False, relation=None, relations=None):
    """
    Get the fields referenced by a pattern.

    Answers two questions with one traversal:
    - which fields of the record itself the pattern needs (top_level=True)
    - which fields of one relation the pattern needs (relation="name")

    With neither, every token path is returned as written.

    A single-segment token is only known to name a relation when the
    same pattern dots into it, or it is listed in relations. Without
    that knowledge "/p/[category]" returns ['category'] and does not
    raise; pass the model's relations to have it rejected.

    Args:
        pattern: URL pattern string
        top_level: Only include fields of the record itself
        relation: Only include the fields of this relation (without prefix)
        relations: Optional iterable of names known to be relations; a
            single-segment token naming one of them is rejected

    Returns:
        OrderedSet of field names

    Raises:
        PatternSyntaxError: If the pattern is malformed, or a relation is
            referenced without a sub-field (e.g. "[category]")

    Examples:
        >>> list(fields_from_pattern("/[title]/[category.name]"))
        ['title', 'category.name']
        >>> list(fields_from_pattern("/[title]/[category.name]", top_level=True))
        ['title']
        >>> list(fields_from_pattern("/[title]/[category.name]", relation="category"))
        ['name']
    """
    tokens = parse_pattern(pattern)

    known_relations = set(relations or ())
    known_relations.update(token.relation for token in tokens if token.is_relation)

    fields = OrderedSet()
    for token in tokens:
        if not token.is_relation:
            if token.field in known_relations:
                raise PatternSyntaxError(
                    f"Relation '{token.field}' is referenced without a sub-field",
                    pattern,
                    pattern.find(f"[{token.path}]"),
                )
            if relation is None:
                fields.add(token.field)
        elif relation is not None:
            if token.relation == relation:
                fields.add(token.field)
        elif not top_level:
            fields.add(token.path)

    return fields


def resolve_pattern(pattern, record):
    """
    Resolve a pattern into a URL path using the values of a page record.

    Missing values resolve to an empty string. Duplicate slashes are
    collapsed and a leading slash is added.

    Args:
        pattern: URL pattern string
        record: Page record dict (relations as nested dicts)

    Returns:
        URL path string

    Example:
        >>> resolve_pattern("/blog/[category.slug]/[slug]", {
        ...     "slug": "hello", "category": {"slug": "news"}})
        '/blog/news/hello'
    """
    parse_pattern(pattern)

    def substitute(match):
        token = PathToken(match.group(1), tuple(match.group(1).split(".")))

        if not token.is_relation:
            value = record.get(token.field)
        else:
            related = record.get(token.relation)
            if isinstance(related, (list, tuple)):
                logger.error(f"Cannot resolve '{token.path}': relation '{token.relation}' holds multiple records")
                return match.group(0)
            value = related.get(token.field) if isinstance(related, dict) else None

        if value is None:
            return ""
        return str(value)

    url = TOKEN_RE.sub(substitute, pattern)
    url = re.sub(r"/{2,}", "/", url)
    if not url.startswith("/"):
        url = f"/{url}"
    return url


def validate_pattern(pattern, allowed_fields):
    """
    Check a pattern before it is stored in configuration.

    Args:
        pattern: URL pattern string
        allowed_fields: Field paths the pattern may reference

    Returns:
        Tuple of (is_valid, message)

    Examples:
        >>> validate_pattern("/[slug]", ["slug"])
        (True, 'Valid pattern')
        >>> validate_pattern("/[password]", ["slug"])
        (False, 'Pattern contains forbidden fields')
    """
    if not pattern:
        return (False, "Pattern can not be empty")

    if TOKEN_OPEN not in pattern or TOKEN_CLOSE not in pattern:
        return (False, "Pattern should contain at least one field")

    try:
        tokens = parse_pattern(pattern)
    except PatternSyntaxError:
        return (False, "Fields in the pattern are not escaped correctly")

    allowed = set(allowed_fields)
    if any(token.path not in allowed for token in tokens):
        return (False, "Pattern contains forbidden fields")

    return (True, "Valid pattern")
