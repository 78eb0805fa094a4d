"""Blog router for managing blog posts."""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Path, Query, status

from src.dependencies import get_current_user, get_optional_user, get_post_service
from src.models import PostStatus, User
from src.schemas import (
    LikeResponse,
    MessageResponse,
    Pagination,
    PostCreate,
    PostDetailEnvelope,
    PostDetailResponse,
    PostEnvelope,
    PostListEnvelope,
    PostQuery,
    PostResponse,
    PostStats,
    PostUpdate,
    SortField,
    SortOrder,
    StatsEnvelope,
)
from src.services.post_service import PostPage, PostService

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blogs", tags=["Blog"])

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def post_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[PostStatus] = Query(None),
    category: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma-separated tag names"),
    search: Optional[str] = Query(None),
    sort_by: SortField = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query("DESC", alias="sortOrder"),
) -> PostQuery:
    """Collect listing query parameters into a PostQuery."""
    return PostQuery(
        page=page,
        limit=limit,
        status=status,
        category=category,
        tags=tags,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def _list_envelope(result: PostPage, message: str) -> PostListEnvelope:
    return PostListEnvelope(
        message=message,
        data=[PostResponse.model_validate(post) for post in result.posts],
        pagination=Pagination.model_validate(result.pagination),
    )


def _stats_envelope(stats: dict) -> StatsEnvelope:
    return StatsEnvelope(
        message="Blog statistics retrieved successfully",
        data=PostStats.model_validate(stats),
    )


@router.get("", response_model=PostListEnvelope)
def list_posts(
    query: PostQuery = Depends(post_query),
    post_service: PostService = Depends(get_post_service),
):
    """List posts with filtering, search, sorting and pagination."""
    logger.info(f"Listing blog posts: {query.model_dump(exclude_defaults=True)}")
    result = post_service.list_posts(query)
    return _list_envelope(result, "Blog posts retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostEnvelope)
def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """Create a new blog post owned by the authenticated user."""
    post = post_service.create_post(post_data.model_dump(), current_user.id)
    return PostEnvelope(
        message="Blog post created successfully",
        data=PostResponse.model_validate(post),
    )


@router.get("/my", response_model=PostListEnvelope)
def get_my_posts(
    query: PostQuery = Depends(post_query),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """List the authenticated user's posts in any status."""
    result = post_service.get_posts_by_author(current_user.id, query)
    return _list_envelope(result, "Your blog posts retrieved successfully")


@router.get("/my/stats", response_model=StatsEnvelope)
def get_my_stats(
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    return _stats_envelope(post_service.get_stats(current_user.id))


@router.get("/stats", response_model=StatsEnvelope)
def get_stats(
    my: bool = Query(False),
    current_user: Optional[User] = Depends(get_optional_user),
    post_service: PostService = Depends(get_post_service),
):
    """Platform-wide statistics, or the caller's own with ?my=true."""
    author_id = current_user.id if my and current_user else None
    return _stats_envelope(post_service.get_stats(author_id))


@router.get("/slug/{slug}", response_model=PostDetailEnvelope)
def get_post_by_slug(
    slug: str = Path(..., pattern=SLUG_PATTERN),
    current_user: Optional[User] = Depends(get_optional_user),
    post_service: PostService = Depends(get_post_service),
):
    post = post_service.get_post_by_slug(slug)
    return PostDetailEnvelope(
        message="Blog post retrieved successfully",
        data=PostDetailResponse.model_validate(post),
    )


@router.get("/author/{author_id}", response_model=PostListEnvelope)
def get_posts_by_author(
    author_id: UUID,
    query: PostQuery = Depends(post_query),
    post_service: PostService = Depends(get_post_service),
):
    """Public listing of an author's published posts."""
    result = post_service.get_posts_by_author(str(author_id), query, published_only=True)
    return _list_envelope(result, "Author blog posts retrieved successfully")


@router.get("/{post_id}", response_model=PostDetailEnvelope)
def get_post(
    post_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    post_service: PostService = Depends(get_post_service),
):
    post = post_service.get_post_by_id(str(post_id))
    return PostDetailEnvelope(
        message="Blog post retrieved successfully",
        data=PostDetailResponse.model_validate(post),
    )


@router.put("/{post_id}", response_model=PostEnvelope)
def update_post(
    post_id: UUID,
    update_data: PostUpdate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """
    Update a post; only its author may do so.

    Raises:
        NotFound: If the post does not exist
        Forbidden: If the caller is not the author
    """
    post = post_service.update_post(
        str(post_id),
        update_data.model_dump(exclude_unset=True),
        current_user.id,
    )
    return PostEnvelope(
        message="Blog post updated successfully",
        data=PostResponse.model_validate(post),
    )


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    post_service.delete_post(str(post_id), current_user.id)
    return MessageResponse(message="Blog post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
def like_post(
    post_id: UUID,
    post_service: PostService = Depends(get_post_service),
):
    """Add a like; there is no per-user tracking, every call counts."""
    likes = post_service.toggle_like(str(post_id))
    return LikeResponse(message="Blog post liked successfully", likes=likes)
