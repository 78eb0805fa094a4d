"""Blog post lifecycle: create, read, update, delete, list, stats and likes."""

import logging
import math
from typing import NamedTuple, Optional

from src.derivation import derive_fields
from src.errors import Conflict, Forbidden, NotFound
from src.models import Post, PostStatus
from src.schemas import PostQuery
from src.stores import PostStore

# Configure logging
logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 5

# Fields derive_fields needs to know about the stored post
DERIVATION_FIELDS = ("title", "content", "excerpt", "slug", "status", "published_at")


class PostPage(NamedTuple):
    posts: list
    pagination: dict


def _snapshot(post: Post) -> dict:
    return {name: getattr(post, name) for name in DERIVATION_FIELDS}


class PostService:
    """Applies derived-field and ownership rules on top of a PostStore."""

    def __init__(self, store: PostStore):
        self.store = store

    def _resolve_fields(self, previous: Optional[dict], patch: dict, post_id: Optional[str] = None) -> dict:
        """Derive fields and make sure the resulting slug is free."""
        explicit_slug = patch.get("slug")
        for _ in range(MAX_SLUG_ATTEMPTS):
            fields = derive_fields(previous, patch)
            slug = fields.get("slug")
            if slug is None or (previous and slug == previous.get("slug")):
                return fields
            if not self.store.slug_exists(slug, exclude_id=post_id):
                return fields
            if slug == explicit_slug:
                logger.warning(f"Slug already in use: {slug}")
                raise Conflict("Slug already in use")
            logger.debug(f"Derived slug collided, retrying: {slug}")

        raise Conflict("Could not generate a unique slug")

    def _get_or_404(self, post_id: str) -> Post:
        post = self.store.get(post_id)
        if not post:
            logger.warning(f"Blog post not found: {post_id}")
            raise NotFound("Blog post not found")
        return post

    def _get_owned(self, post_id: str, user_id: str, action: str) -> Post:
        post = self._get_or_404(post_id)
        if post.author_id != user_id:
            logger.warning(f"User {user_id} may not {action} post {post_id}")
            raise Forbidden(f"Unauthorized to {action} this blog post")
        return post

    def create_post(self, data: dict, author_id: str) -> Post:
        logger.info(f"Creating blog post for author {author_id}: {data.get('title')}")
        patch = dict(data)
        tags = patch.pop("tags", None) or []

        fields = self._resolve_fields(None, patch)
        fields["author_id"] = author_id

        post = self.store.create(fields, tags)
        logger.info(f"Blog post created: {post.id} ({post.slug})")
        return post

    def list_posts(self, query: PostQuery) -> PostPage:
        return self._page(query)

    def get_posts_by_author(self, author_id: str, query: PostQuery, published_only: bool = False) -> PostPage:
        if published_only:
            query = query.model_copy(update={"status": PostStatus.PUBLISHED})
        return self._page(query, author_id=author_id)

    def _page(self, query: PostQuery, author_id: Optional[str] = None) -> PostPage:
        posts, total = self.store.search(
            page=query.page,
            limit=query.limit,
            status=query.status,
            category=query.category,
            tags=query.tags,
            search=query.search,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            author_id=author_id,
        )
        logger.info(f"Found {total} blog posts, returning page {query.page}")
        return PostPage(posts, {
            "current_page": query.page,
            "total_pages": math.ceil(total / query.limit),
            "total_items": total,
            "items_per_page": query.limit,
        })

    def get_post_by_id(self, post_id: str) -> Post:
        post = self._get_or_404(post_id)
        self.store.increment(post.id, "views")
        return self.store.get(post.id)

    def get_post_by_slug(self, slug: str) -> Post:
        post = self.store.get_by_slug(slug)
        if not post:
            logger.warning(f"Blog post not found for slug: {slug}")
            raise NotFound("Blog post not found")
        self.store.increment(post.id, "views")
        return self.store.get(post.id)

    def update_post(self, post_id: str, patch: dict, user_id: str) -> Post:
        post = self._get_owned(post_id, user_id, "update")

        patch = dict(patch)
        tags = patch.pop("tags", None)
        fields = self._resolve_fields(_snapshot(post), patch, post_id=post.id)

        post = self.store.update(post, fields, tags)
        logger.info(f"Blog post {post_id} updated successfully")
        return post

    def delete_post(self, post_id: str, user_id: str) -> None:
        post = self._get_owned(post_id, user_id, "delete")
        self.store.delete(post)
        logger.info(f"Blog post {post_id} deleted")

    def toggle_like(self, post_id: str) -> int:
        """Add one like and return the new count; repeated likes all count."""
        post = self._get_or_404(post_id)
        return self.store.increment(post.id, "likes")

    def get_stats(self, author_id: Optional[str] = None) -> dict:
        return self.store.stats(author_id)
