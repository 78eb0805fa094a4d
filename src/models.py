"""Database models for the blog API."""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class User(Base):
    """User model for authentication and post authorship."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, values_callable=_enum_values, native_enum=False),
        default=UserRole.USER,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    profile_image = Column(String, nullable=True)
    bio = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    posts = relationship("Post", back_populates="author")


class PostTag(Base):
    """A single tag attached to a post."""

    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "name", name="uq_post_tag"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(30), nullable=False, index=True)


class Post(Base):
    """Blog post model."""

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500), nullable=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    featured_image = Column(String, nullable=True)
    status = Column(
        Enum(PostStatus, values_callable=_enum_values, native_enum=False),
        default=PostStatus.DRAFT,
        nullable=False,
    )
    category = Column(String(50), nullable=True, index=True)
    read_time = Column(Integer, nullable=True)
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    published_at = Column(DateTime, nullable=True)
    meta_title = Column(String(200), nullable=True)
    meta_description = Column(String(500), nullable=True)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", back_populates="posts")
    tag_links = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        order_by="PostTag.id",
        lazy="selectin",
    )

    @property
    def tags(self) -> list:
        return [link.name for link in self.tag_links]

    @tags.setter
    def tags(self, names) -> None:
        # Reuse existing rows so an unchanged tag never hits the unique constraint
        wanted = list(dict.fromkeys(names or []))
        existing = {link.name: link for link in self.tag_links}
        self.tag_links = [existing.get(name) or PostTag(name=name) for name in wanted]

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED
