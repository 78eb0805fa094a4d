"""Persistence for users and posts on top of a SQLAlchemy session."""

import logging
from typing import Iterable, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, contains_eager, joinedload

from src.models import Post, PostStatus, PostTag, User

# Configure logging
logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "createdAt": Post.created_at,
    "updatedAt": Post.updated_at,
    "title": Post.title,
    "views": Post.views,
    "likes": Post.likes,
    "publishedAt": Post.published_at,
}

COUNTERS = {
    "views": Post.views,
    "likes": Post.likes,
}

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Make LIKE wildcards in user text match literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class UserStore:
    """CRUD over user records."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_active_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.email == email, User.is_active.is_(True))
            .first()
        )

    def create(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.debug(f"Stored user {user.id}")
        return user

    def update(self, user: User, fields: dict) -> User:
        for name, value in fields.items():
            setattr(user, name, value)
        self.db.commit()
        self.db.refresh(user)
        return user


class PostStore:
    """CRUD, filtered listing and counters over post records."""

    def __init__(self, db: Session):
        self.db = db

    def _with_author(self):
        return self.db.query(Post).options(joinedload(Post.author))

    def get(self, post_id: str) -> Optional[Post]:
        return self._with_author().filter(Post.id == post_id).first()

    def get_by_slug(self, slug: str) -> Optional[Post]:
        return self._with_author().filter(Post.slug == slug).first()

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Post.id).filter(Post.slug == slug)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        return query.first() is not None

    def create(self, fields: dict, tags: Iterable[str] = ()) -> Post:
        post = Post(**fields)
        post.tags = tags
        self.db.add(post)
        self.db.commit()
        logger.debug(f"Stored post {post.id}")
        return self.get(post.id)

    def update(self, post: Post, fields: dict, tags: Optional[Iterable[str]] = None) -> Post:
        for name, value in fields.items():
            setattr(post, name, value)
        if tags is not None:
            post.tags = tags
        self.db.commit()
        return self.get(post.id)

    def delete(self, post: Post) -> None:
        self.db.delete(post)
        self.db.commit()

    def increment(self, post_id: str, counter: str) -> int:
        """Atomically add one to a counter column and return its new value."""
        column = COUNTERS[counter]
        self.db.query(Post).filter(Post.id == post_id).update(
            {column: column + 1}, synchronize_session=False
        )
        self.db.commit()
        return self.db.query(column).filter(Post.id == post_id).scalar()

    def search(
        self,
        page: int,
        limit: int,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "DESC",
        author_id: Optional[str] = None,
    ) -> Tuple[list, int]:
        """
        Filtered, sorted and paginated listing joined with the author.

        Returns:
            Tuple[list, int]: The posts of the requested page and the total
            number of matching posts
        """
        query = self.db.query(Post).join(Post.author)

        if author_id is not None:
            query = query.filter(Post.author_id == author_id)

        if status:
            query = query.filter(Post.status == status)

        if category:
            query = query.filter(Post.category == category)

        tags = list(tags or [])
        if tags:
            tagged = select(PostTag.post_id).where(PostTag.name.in_(tags))
            query = query.filter(Post.id.in_(tagged))

        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(
                or_(
                    Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Post.content.ilike(pattern, escape=LIKE_ESCAPE),
                    Post.excerpt.ilike(pattern, escape=LIKE_ESCAPE),
                    User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        total = query.count()

        column = SORT_COLUMNS[sort_by]
        if sort_order == "ASC":
            ordering = (column.asc(), Post.id.asc())
        else:
            ordering = (column.desc(), Post.id.desc())

        posts = (
            query.options(contains_eager(Post.author))
            .order_by(*ordering)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return posts, total

    def stats(self, author_id: Optional[str] = None) -> dict:
        def scoped(query):
            if author_id is not None:
                return query.filter(Post.author_id == author_id)
            return query

        row = scoped(
            self.db.query(
                func.count(Post.id),
                func.coalesce(func.sum(Post.views), 0),
                func.coalesce(func.sum(Post.likes), 0),
            )
        ).one()

        by_status = dict(
            scoped(self.db.query(Post.status, func.count(Post.id)))
            .group_by(Post.status)
            .all()
        )

        return {
            "total_blogs": row[0],
            "published_blogs": by_status.get(PostStatus.PUBLISHED, 0),
            "draft_blogs": by_status.get(PostStatus.DRAFT, 0),
            "total_views": int(row[1]),
            "total_likes": int(row[2]),
        }
