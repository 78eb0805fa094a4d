"""Derived post fields: slug, excerpt, read time and publish date."""

import math
import re
import uuid
from datetime import datetime
from typing import Callable, Mapping, Optional

from src.models import PostStatus, utcnow

EXCERPT_LENGTH = 150
WORDS_PER_MINUTE = 200

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase the title, collapse non-alphanumeric runs to '-' and trim."""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def slug_suffix() -> str:
    return uuid.uuid4().hex[:8]


def make_slug(title: str, suffix: Optional[str] = None) -> str:
    base = slugify(title) or "post"
    return f"{base}-{suffix or slug_suffix()}"


def make_excerpt(content: str) -> str:
    return content[:EXCERPT_LENGTH] + "..."


def compute_read_time(content: str) -> int:
    """Minutes to read at 200 words per minute, never less than one."""
    word_count = len(content.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def derive_fields(
    previous: Optional[Mapping],
    patch: Mapping,
    now: Optional[datetime] = None,
    suffix_factory: Callable[[], str] = slug_suffix,
) -> dict:
    """
    Compute the field values to persist for a create or an update.

    Args:
        previous: Current stored values (title, content, excerpt, slug, status,
            published_at), or None when the post is being created
        patch: Fields supplied by the caller
        now: Timestamp used for published_at, defaults to the current UTC time
        suffix_factory: Produces the uniqueness suffix appended to derived slugs

    Returns:
        dict: The patch merged with every derived field that changed
    """
    now = now or utcnow()
    fields = dict(patch)
    creating = previous is None
    previous = previous or {}

    title = fields.get("title", previous.get("title"))
    content = fields.get("content", previous.get("content"))

    title_changed = "title" in patch and patch["title"] != previous.get("title")
    content_changed = "content" in patch and patch["content"] != previous.get("content")

    if creating:
        if not fields.get("slug"):
            fields["slug"] = make_slug(title, suffix_factory())
    elif title_changed:
        fields["slug"] = make_slug(title, suffix_factory())
    elif "slug" in fields and not fields["slug"]:
        del fields["slug"]

    excerpt_supplied = bool(patch.get("excerpt"))
    if content and not excerpt_supplied:
        if creating or content_changed or not previous.get("excerpt"):
            fields["excerpt"] = make_excerpt(content)
        elif "excerpt" in fields:
            del fields["excerpt"]

    if content and (creating or content_changed):
        fields["read_time"] = compute_read_time(content)

    status = fields.get("status", previous.get("status")) or PostStatus.DRAFT
    if creating:
        fields["status"] = status
    if status == PostStatus.PUBLISHED and not previous.get("published_at"):
        fields["published_at"] = now

    return fields
