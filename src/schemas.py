"""Pydantic schemas for request and response validation."""

import re
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional
from pydantic import (
    AfterValidator,
    AliasGenerator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from src.models import PostStatus, UserRole

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    """Validate as an http(s) URL but keep the text as given."""
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        raise ValueError("Please provide a valid URL")
    return value


Url = Annotated[str, AfterValidator(_check_url)]


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to the naive timestamps read from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]

SortField = Literal["createdAt", "updatedAt", "title", "views", "likes", "publishedAt"]
SortOrder = Literal["ASC", "DESC"]

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class RequestModel(BaseModel):
    """Request bodies arrive in camelCase; attributes stay snake_case."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class ResponseModel(BaseModel):
    """Responses are read from ORM objects and serialized in camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Auth Schemas
class UserRegister(RequestModel):
    """Schema for user registration request."""

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)

    @field_validator('password')
    @classmethod
    def password_strength(cls, v: str) -> str:
        """Require a lowercase letter, an uppercase letter and a digit."""
        if not _PASSWORD_RULE.match(v):
            raise ValueError(
                'Password must contain at least one lowercase letter, '
                'one uppercase letter, and one number'
            )
        return v


class UserLogin(RequestModel):
    """Schema for user login request."""

    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(RequestModel):
    """Schema for profile update request."""

    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    profile_image: Optional[Url] = None
    password: Optional[str] = Field(None, min_length=6, max_length=100)

    @field_validator('first_name', 'last_name', 'password', mode='before')
    @classmethod
    def not_null(cls, v):
        """Required fields may be omitted but not cleared."""
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class UserResponse(ResponseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    role: UserRole
    is_active: bool
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AuthorSummary(ResponseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    profile_image: Optional[str] = None


class AuthorDetail(AuthorSummary):
    bio: Optional[str] = None


class AuthData(BaseModel):
    user: UserResponse
    token: str


# Blog Post Schemas
class PostCreate(RequestModel):
    """Schema for blog post creation request."""

    title: str = Field(min_length=3, max_length=200)
    content: str = Field(min_length=10, max_length=10000)
    excerpt: Optional[str] = Field(None, max_length=500)
    slug: Optional[str] = Field(None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", max_length=255)
    featured_image: Optional[Url] = None
    status: PostStatus = PostStatus.DRAFT
    tags: List[Tag] = Field(default_factory=list)
    category: Optional[str] = Field(None, min_length=2, max_length=50)
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = Field(None, max_length=500)


class PostUpdate(RequestModel):
    """Schema for blog post update request; only supplied fields change."""

    title: Optional[str] = Field(None, min_length=3, max_length=200)
    content: Optional[str] = Field(None, min_length=10, max_length=10000)
    excerpt: Optional[str] = Field(None, max_length=500)
    slug: Optional[str] = Field(None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", max_length=255)
    featured_image: Optional[Url] = None
    status: Optional[PostStatus] = None
    tags: Optional[List[Tag]] = None
    category: Optional[str] = Field(None, min_length=2, max_length=50)
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = Field(None, max_length=500)

    @field_validator('title', 'content', 'slug', 'status', 'tags', mode='before')
    @classmethod
    def not_null(cls, v):
        """Required fields may be omitted but not cleared."""
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class PostQuery(BaseModel):
    """Filters, sorting and pagination for post listings."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[PostStatus] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    search: Optional[str] = None
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "DESC"

    @field_validator('tags', mode='before')
    @classmethod
    def split_tags(cls, v):
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [tag.strip() for tag in v if tag and tag.strip()]


class PostResponse(ResponseModel):
    id: str
    title: str
    content: str
    excerpt: Optional[str] = None
    slug: str
    featured_image: Optional[str] = None
    status: PostStatus
    tags: List[str] = []
    category: Optional[str] = None
    read_time: Optional[int] = None
    views: int
    likes: int
    published_at: Optional[UtcDatetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    author_id: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    author: Optional[AuthorSummary] = None

    @computed_field(alias="isPublished")
    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED


class PostDetailResponse(PostResponse):
    author: Optional[AuthorDetail] = None


class Pagination(ResponseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class PostStats(ResponseModel):
    total_blogs: int
    published_blogs: int
    draft_blogs: int
    total_views: int
    total_likes: int


# Response envelopes
class MessageResponse(BaseModel):
    success: bool = True
    message: str


class AuthEnvelope(MessageResponse):
    data: AuthData


class UserEnvelope(MessageResponse):
    data: UserResponse


class PostEnvelope(MessageResponse):
    data: PostResponse


class PostDetailEnvelope(MessageResponse):
    data: PostDetailResponse


class PostListEnvelope(MessageResponse):
    data: List[PostResponse]
    pagination: Pagination


class StatsEnvelope(MessageResponse):
    data: PostStats


class LikeResponse(MessageResponse):
    likes: int
